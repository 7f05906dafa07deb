"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

COMPANY_CODE_LENGTH = 8
COMPANY_CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
COMPANY_CODE_ATTEMPTS = 10

TRIAL_DAYS = 14
DEFAULT_MAX_EMPLOYEES = 10
DEFAULT_EXTEND_TRIAL_DAYS = 7

ADMIN_TOKEN_HOURS = 24 * 7
EMPLOYEE_TOKEN_HOURS = 24
SUPER_ADMIN_TOKEN_HOURS = 24 * 7

MIN_PASSWORD_LENGTH = 6

DEFAULT_LEAVE_DAYS = 15
# Contracts are offered to paid tiers only (more seats than this).
CONTRACT_MIN_EMPLOYEES = 5

DEFAULT_PAGE_LIMIT = 20
RECENT_LIMIT = 10

# Statistics assume a fixed workday when only counts are known.
ASSUMED_WORK_HOURS = 8
LATE_AFTER_HOUR = 9
DEFAULT_CHECK_IN_HOUR = 9
DEFAULT_CHECK_OUT_HOUR = 18
