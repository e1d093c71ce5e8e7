"""Shift attendance package.

Organized by feature modules (workers, attendance, reports) with a thin Flask
controller layer over service/repository layers. The attendance engine and the
periodic aggregator are pure and never touch the database themselves.
"""
