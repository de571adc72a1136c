"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TIMEZONE = "Asia/Singapore"
DEFAULT_CUTOFF_HOUR = 22
DEFAULT_REGISTRATION_TTL_MINUTES = 15
DEFAULT_STORE_TIMEOUT_SECONDS = 10
DEFAULT_HISTORY_LIMIT = 30

MAX_RANK_LENGTH = 100
MAX_NAME_LENGTH = 255
MAX_NUMBER_LENGTH = 50

TELEGRAM_API_BASE = "https://api.telegram.org"
