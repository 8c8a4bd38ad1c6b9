"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MAX_NOTE = 20.0
SLOT_HOURS = 2.5
ABSENCE_DEDUCTION_PER_SLOT = 0.5
LATES_PER_POINT = 4
LATE_HOURS = 1.0

SESSION_DAYS = ("Lundi", "Mardi", "Mercredi", "Jeudi", "Vendredi", "Samedi")
TIME_SLOTS = ("08:30-11:00", "11:00-13:30", "13:30-16:00", "16:00-18:30")

# Academic year rolls over in September.
ACADEMIC_YEAR_START_MONTH = 9

MIN_USER_PASSWORD_LENGTH = 6
MIN_TEACHER_PASSWORD_LENGTH = 8

DEFAULT_JWT_EXPIRES_HOURS = 24
ALLOWED_IMPORT_EXTENSIONS = (".xlsx", ".xls", ".csv")
