"""Settings shared by every environment, read from the process environment.

Environment modules start from these values and override what differs.
"""

import os


def env_flag(name: str, default: str = "0") -> bool:
    return bool(int(os.environ.get(name, default)))


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "please-set-SECRET_KEY")

    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "srtrack_db")
    DB_TIMEOUT_SECONDS = int(os.environ.get("DB_TIMEOUT_SECONDS", "10"))

    TIMEZONE = os.environ.get("TIMEZONE", "Asia/Singapore")
    TIMEZONE_LABEL = os.environ.get("TIMEZONE_LABEL", "SGT")
    CUTOFF_HOUR = int(os.environ.get("CUTOFF_HOUR", "22"))
    REGISTRATION_TTL_MINUTES = int(os.environ.get("REGISTRATION_TTL_MINUTES", "15"))
    NOTIFY_ADMINS = env_flag("NOTIFY_ADMINS")

    TELEGRAM_BOT_TOKEN = os.environ.get("TELEGRAM_BOT_TOKEN", "")
    TELEGRAM_WEBHOOK_SECRET = os.environ.get("TELEGRAM_WEBHOOK_SECRET", "")
    CRON_SECRET = os.environ.get("CRON_SECRET", "")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    @classmethod
    def db_config(cls) -> dict:
        return {
            "host": cls.DB_HOST,
            "port": cls.DB_PORT,
            "user": cls.DB_USER,
            "password": cls.DB_PASSWORD,
            "database": cls.DB_NAME,
            "timeout_seconds": cls.DB_TIMEOUT_SECONDS,
        }
