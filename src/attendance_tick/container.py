from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional

from .common.datetime_utils import TimeNormalizer, utc_now
from .core.constants import DEFAULT_EARLY_MINUTES, DEFAULT_EMPLOYEES, DEFAULT_TIME_ZONE
from .core.enums import StoreBackend
from .database.bootstrap import apply_schema
from .database.connection import DBConfig, DatabaseConnection
from .reports.service import ReportService
from .slots.catalog import SlotCatalog
from .store.repository import AttendanceStore
from .ticks.factory import DatePolicyFactory
from .ticks.rules import TickEligibilityRule
from .ticks.service import TickService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    store: AttendanceStore
    catalog: SlotCatalog
    normalizer: TimeNormalizer
    rule: TickEligibilityRule

    tick_service: TickService
    report_service: ReportService

    admin_key: str = ""
    default_employees: tuple = DEFAULT_EMPLOYEES

    def close(self) -> None:
        self.store.close()


def build_store(settings: Any) -> AttendanceStore:
    """Open the backend named by `STORE_BACKEND`."""
    backend = StoreBackend(str(getattr(settings, "STORE_BACKEND", StoreBackend.MYSQL.value)).lower())

    if backend is StoreBackend.FIRESTORE:
        from .store.firestore_store import open_firestore_store

        return open_firestore_store(
            service_account_json=getattr(settings, "FIREBASE_SERVICE_ACCOUNT_JSON", ""),
            project_id=getattr(settings, "FIREBASE_PROJECT_ID", ""),
        )

    from .store.mysql_store import MySQLAttendanceStore

    db_config = dict(getattr(settings, "DB_CONFIG"))
    if getattr(settings, "AUTO_INIT_DB", False):
        apply_schema(db_config)
    return MySQLAttendanceStore(DatabaseConnection(DBConfig.from_dict(db_config)))


def build_container(
    settings: Any,
    *,
    store: Optional[AttendanceStore] = None,
    clock: Callable[[], datetime] = utc_now,
) -> Container:
    catalog = SlotCatalog.from_config(getattr(settings, "TICK_SLOTS", ""))
    normalizer = TimeNormalizer(getattr(settings, "APP_TZ", DEFAULT_TIME_ZONE))
    rule = TickEligibilityRule(
        catalog,
        normalizer,
        date_policy=DatePolicyFactory().create(getattr(settings, "DATE_POLICY", "every_day")),
        early_minutes=int(getattr(settings, "EARLY_MINUTES", DEFAULT_EARLY_MINUTES)),
    )

    store = store if store is not None else build_store(settings)

    tick_service = TickService(store, rule, normalizer, catalog, clock=clock)
    report_service = ReportService(store)

    logger.info(
        "Container ready: backend=%s tz=%s early=%s slots=%s",
        getattr(store, "backend", type(store).__name__),
        normalizer.tz_name,
        rule.early_minutes,
        ",".join(catalog.keys()),
    )

    return Container(
        store=store,
        catalog=catalog,
        normalizer=normalizer,
        rule=rule,
        tick_service=tick_service,
        report_service=report_service,
        admin_key=str(getattr(settings, "ADMIN_KEY", "") or ""),
        default_employees=tuple(getattr(settings, "DEFAULT_EMPLOYEES", DEFAULT_EMPLOYEES)),
    )
