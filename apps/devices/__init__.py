"""Devices app - handles terminal sessions and realtime event capture.

This app provides low-level device communication without business logic.
"""
