from .config import Config

SECRET_KEY = "test-secret"
DB_CONFIG = dict(Config.db_config(), database="srtrack_test")

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False

TIMEZONE = "Asia/Singapore"
TIMEZONE_LABEL = "SGT"
CUTOFF_HOUR = 22
REGISTRATION_TTL_MINUTES = 15
NOTIFY_ADMINS = False

TELEGRAM_BOT_TOKEN = ""
TELEGRAM_WEBHOOK_SECRET = "test-webhook-secret"
CRON_SECRET = "test-cron-secret"
