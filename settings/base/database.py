# Attendance data is never persisted: every request is a live pass-through
# to the terminal, so no database is configured.
DATABASES: dict = {}
