"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DEFAULT_API_TIMEOUT_SECONDS = 10.0
MIN_PASSWORD_LENGTH = 6
UF_CODE_LENGTH = 2
