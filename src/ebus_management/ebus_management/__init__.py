"""eBus Management package.

This package is organized by feature modules (users, buses, bookings, admin, ...)
with a thin Flask controller layer and service/repository layers over a
key-value store.
"""
