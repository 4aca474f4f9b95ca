"""Settings modules, selected by the APP_ENV environment variable."""

import os

_ENV_ALIASES = {
    "prod": "production",
    "production": "production",
    "test": "testing",
    "testing": "testing",
}


def get_settings_module() -> str:
    # APP_SETTINGS_MODULE wins, e.g. for a one-off staging settings file
    explicit = os.getenv("APP_SETTINGS_MODULE")
    if explicit:
        return explicit

    env = os.getenv("APP_ENV", "development").strip().lower()
    return f"config.{_ENV_ALIASES.get(env, 'development')}"
