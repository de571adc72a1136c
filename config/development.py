from .config import Config, env_flag

SECRET_KEY = Config.SECRET_KEY
DB_CONFIG = Config.db_config()

DEBUG = True
LOG_LEVEL = "DEBUG"

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "1")

TIMEZONE = Config.TIMEZONE
TIMEZONE_LABEL = Config.TIMEZONE_LABEL
CUTOFF_HOUR = Config.CUTOFF_HOUR
REGISTRATION_TTL_MINUTES = Config.REGISTRATION_TTL_MINUTES
NOTIFY_ADMINS = Config.NOTIFY_ADMINS

# Without a bot token, messages are only logged.
TELEGRAM_BOT_TOKEN = Config.TELEGRAM_BOT_TOKEN
TELEGRAM_WEBHOOK_SECRET = Config.TELEGRAM_WEBHOOK_SECRET
CRON_SECRET = Config.CRON_SECRET
