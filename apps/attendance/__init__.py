"""Attendance app - reconciles raw device punches into daily records.

Nothing is persisted: every request reads the live device log.
"""
