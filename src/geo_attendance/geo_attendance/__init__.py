"""Geofenced attendance package.

Users toggle between clocked-in and clocked-out from inside an admin-defined
geofence. Organized by feature modules (attendance, geofence, geolocation,
auth, users) with a thin Flask controller layer over service/repository layers.
"""
