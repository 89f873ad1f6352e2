import os

from ..core.constants import DEFAULT_EARLY_MINUTES, DEFAULT_EMPLOYEES, DEFAULT_TIME_ZONE


def env_flag(name: str, default: str = "0") -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


def env_list(name: str, default: tuple) -> tuple:
    raw = os.environ.get(name)
    if raw is None:
        return tuple(default)
    return tuple(item.strip() for item in raw.split(",") if item.strip())


class Config:
    STORE_BACKEND = os.environ.get("STORE_BACKEND", "mysql").strip().lower()

    # MySQL backend
    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "attendance_tick")

    # Firestore backend
    FIREBASE_SERVICE_ACCOUNT_JSON = os.environ.get("FIREBASE_SERVICE_ACCOUNT_JSON", "")
    FIREBASE_PROJECT_ID = os.environ.get("FIREBASE_PROJECT_ID", "")

    # Business rules
    APP_TZ = os.environ.get("APP_TZ") or os.environ.get("TZ") or DEFAULT_TIME_ZONE
    EARLY_MINUTES = int(os.environ.get("EARLY_MINUTES", str(DEFAULT_EARLY_MINUTES)))
    TICK_SLOTS = os.environ.get("TICK_SLOTS", "")
    DATE_POLICY = os.environ.get("DATE_POLICY", "every_day")
    DEFAULT_EMPLOYEES = env_list("DEFAULT_EMPLOYEES", DEFAULT_EMPLOYEES)

    # Optional shared secret for /admin and the CSV export; empty = open.
    ADMIN_KEY = os.environ.get("ADMIN_KEY", "")

    PORT = int(os.environ.get("PORT", "3000"))
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()


STORE_BACKEND = Config.STORE_BACKEND
DB_CONFIG = {
    "host": Config.DB_HOST,
    "port": Config.DB_PORT,
    "user": Config.DB_USER,
    "password": Config.DB_PASSWORD,
    "database": Config.DB_NAME,
}
FIREBASE_SERVICE_ACCOUNT_JSON = Config.FIREBASE_SERVICE_ACCOUNT_JSON
FIREBASE_PROJECT_ID = Config.FIREBASE_PROJECT_ID

APP_TZ = Config.APP_TZ
EARLY_MINUTES = Config.EARLY_MINUTES
TICK_SLOTS = Config.TICK_SLOTS
DATE_POLICY = Config.DATE_POLICY
DEFAULT_EMPLOYEES = Config.DEFAULT_EMPLOYEES
ADMIN_KEY = Config.ADMIN_KEY
PORT = Config.PORT
LOG_LEVEL = Config.LOG_LEVEL
