"""Attendance module constants."""

# Display name for punches whose device user id has no enrolled user
UNKNOWN_USER_NAME = "Unknown"

# Zone names accepted by the query validator: "Area/Location" or the literal "UTC"
TIMEZONE_NAME_PATTERN = r"^[A-Za-z]+/[A-Za-z_]+$|^UTC$"

DATE_FORMAT = "%Y-%m-%d"
LOCAL_TIME_FORMAT = "%H:%M:%S"
