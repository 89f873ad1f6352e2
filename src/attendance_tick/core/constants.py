"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TIME_ZONE = "Asia/Phnom_Penh"
DEFAULT_EARLY_MINUTES = 5

DEFAULT_HISTORY_LIMIT = 200
MIN_HISTORY_LIMIT = 1
MAX_HISTORY_LIMIT = 500

DEFAULT_SLOTS = (
    ("08:00", "08:00 AM"),
    ("12:00", "12:00 PM"),
    ("12:20", "12:20 PM"),
    ("17:30", "05:30 PM"),
)

DEFAULT_EMPLOYEES = ("Heang", "Riya", "Kdey", "Chi Vorn", "Nith", "Savath")

EXPORT_FIELDS = ("employee", "date", "slot", "timestamp", "ip", "userAgent")
EXPORT_FILENAME = "attendance_ticks.csv"
