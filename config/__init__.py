import os

_BY_ENV = {
    "prod": "config.production",
    "production": "config.production",
    "test": "config.testing",
    "testing": "config.testing",
}


def get_settings_module() -> str:
    """Dotted path of the settings module to load.

    SRTRACK_SETTINGS names a module outright (e.g. a site-specific one);
    otherwise APP_ENV picks a bundled module, defaulting to development.
    """
    explicit = os.getenv("SRTRACK_SETTINGS", "").strip()
    if explicit:
        return explicit
    return _BY_ENV.get(os.getenv("APP_ENV", "development").lower(), "config.development")
