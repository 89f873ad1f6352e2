import os


def get_settings_module() -> str:
    # Settings module chosen from APP_ENV, default 'development'
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "attendance_tick.config.production"

    if env in {"test", "testing"}:
        return "attendance_tick.config.testing"

    return "attendance_tick.config.development"
