"""Geo Attendance package.

Organized by feature modules (geofence, attendance) with a thin Flask controller layer
over service/repository layers. Storage is a port with MySQL and in-memory adapters.
"""
