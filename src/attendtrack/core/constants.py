"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DEFAULT_HISTORY_LIMIT = 30
MIN_PASSWORD_LENGTH = 6

COURSE_YEAR_MIN = 2000
COURSE_YEAR_MAX = 2100

# QR rendering: error correction H, 256px-ish image with a quiet zone
QR_BOX_SIZE = 8
QR_BORDER = 4

# Hints for the in-browser scanner
SCAN_FPS = 10
SCAN_BOX_SIZE = 250

LOW_ATTENDANCE_THRESHOLD = 75
WARNING_ATTENDANCE_THRESHOLD = 60

FAKE_STUDENTS_MIN = 15
FAKE_STUDENTS_MAX = 44
FAKE_ATTENDANCE_MIN = 40
FAKE_ATTENDANCE_MAX = 89

DEFAULT_WARNING_SEND_DELAY_SECONDS = 1.5
