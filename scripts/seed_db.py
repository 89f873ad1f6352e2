"""Seed the default employee list into the configured store (no-op when not empty)."""

from __future__ import annotations

import importlib

from dotenv import load_dotenv

from attendance_tick.config import get_settings_module
from attendance_tick.container import build_store


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())

    store = build_store(settings)
    try:
        inserted = store.seed_default_employees_if_empty(settings.DEFAULT_EMPLOYEES)
    finally:
        store.close()

    print(f"OK: Seeded {inserted} employees ({settings.STORE_BACKEND})")


if __name__ == "__main__":
    main()
