from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..core.enums import TickOutcome
from ..core.exceptions import StoreUnavailable, ValidationError
from ..container import Container
from .schemas import HistoryQuery, TickRequest, TodayQuery

logger = logging.getLogger(__name__)

STATUS_BY_OUTCOME = {
    TickOutcome.OK: 200,
    TickOutcome.INVALID_INPUT: 400,
    TickOutcome.UNKNOWN_SLOT: 400,
    TickOutcome.UNKNOWN_EMPLOYEE: 400,
    TickOutcome.DATE_NOT_ALLOWED: 403,
    TickOutcome.TOO_EARLY: 403,
    TickOutcome.DUPLICATE: 409,
    TickOutcome.STORE_UNAVAILABLE: 503,
}


def client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For", "")
    first = forwarded.split(",")[0].strip()
    return first or request.remote_addr or ""


def register(app: Flask, container: Container) -> None:
    service = container.tick_service

    def _store_down(exc: StoreUnavailable):
        logger.error("Store unavailable on %s: %s", request.path, exc)
        return jsonify({"error": "Storage unavailable, try again later"}), 503

    @app.route("/healthz", methods=["GET"], endpoint="healthz")
    def healthz():
        return jsonify({"ok": True})

    @app.route("/api/meta", methods=["GET"], endpoint="api_meta")
    def api_meta():
        return jsonify(service.meta())

    @app.route("/api/employees", methods=["GET"], endpoint="api_employees")
    def api_employees():
        try:
            return jsonify({"employees": list(service.list_employees())})
        except StoreUnavailable as e:
            return _store_down(e)

    @app.route("/api/ticks/today", methods=["GET"], endpoint="api_ticks_today")
    def api_ticks_today():
        try:
            query = TodayQuery.from_args(request.args)
            date, ticks = service.ticks_today(query.employee)
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400
        except StoreUnavailable as e:
            return _store_down(e)
        return jsonify({"date": date, "employee": query.employee, "ticks": [t.to_dict() for t in ticks]})

    @app.route("/api/ticks/history", methods=["GET"], endpoint="api_ticks_history")
    def api_ticks_history():
        try:
            query = HistoryQuery.from_args(request.args)
            ticks = service.history(query.employee, date=query.date, limit=query.limit)
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400
        except StoreUnavailable as e:
            return _store_down(e)
        return jsonify(
            {
                "employee": query.employee,
                "date": query.date,
                "limit": query.limit,
                "ticks": [t.to_dict() for t in ticks],
            }
        )

    @app.route("/api/tick", methods=["POST"], endpoint="api_tick")
    def api_tick():
        try:
            body = TickRequest.from_payload(request.get_json(silent=True))
        except ValidationError as e:
            return jsonify({"ok": False, "error": str(e), "code": TickOutcome.INVALID_INPUT.value}), 400

        result = service.record_tick(
            body.employee,
            body.slot,
            client_ip=client_ip(),
            user_agent=request.headers.get("User-Agent", ""),
        )
        return jsonify(result.to_dict()), STATUS_BY_OUTCOME[result.outcome]
