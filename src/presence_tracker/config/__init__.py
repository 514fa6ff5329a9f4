import os


def get_settings_module() -> str:
    # APP_ENV picks the settings module; anything unrecognised is development.
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "presence_tracker.config.production"

    if env in {"test", "testing"}:
        return "presence_tracker.config.testing"

    return "presence_tracker.config.development"
