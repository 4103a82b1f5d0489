"""Attendance Tracker package.

This package is organized by feature modules (geofence, attendance, users, ...)
around a pure decision core, with a thin Flask gateway and a REST client for the
remote attendance service.
"""
