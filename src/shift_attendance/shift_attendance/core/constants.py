"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import timedelta

AUTO_CHECKOUT_HOURS = 9
AUTO_CHECKOUT_WINDOW = timedelta(hours=AUTO_CHECKOUT_HOURS)

CONTRACT_TYPE = "Daily Worker Vendor - NEXUS"

FIRST_PERIOD_LAST_DAY = 15

UNKNOWN_NAME = "Unknown"
UNKNOWN_OPS_ID = "N/A"
NO_DURATION = "—"
