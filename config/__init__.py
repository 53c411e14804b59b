import os


def get_settings_module() -> str:
    # ABSENCE_SETTINGS names a module directly; otherwise APP_ENV picks one
    explicit = os.getenv("ABSENCE_SETTINGS")
    if explicit:
        return explicit

    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "config.production"

    if env in {"test", "testing"}:
        return "config.testing"

    return "config.development"
