from __future__ import annotations

import hmac
from functools import wraps

from flask import Flask, jsonify, render_template, request, url_for

from ..core.constants import EXPORT_FILENAME
from ..core.exceptions import StoreUnavailable
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def admin_required(view):
        """Gate on the optional shared ADMIN_KEY; open when it is unset."""

        @wraps(view)
        def wrapper(*args, **kwargs):
            if container.admin_key:
                given = request.args.get("key") or request.headers.get("X-Admin-Key") or ""
                if not hmac.compare_digest(given.encode(), container.admin_key.encode()):
                    return "Unauthorized", 401
            return view(*args, **kwargs)

        return wrapper

    @app.route("/admin", methods=["GET"], endpoint="admin")
    @admin_required
    def admin():
        try:
            total = container.report_service.total_ticks()
        except StoreUnavailable:
            return "Storage unavailable, try again later", 503

        key = request.args.get("key", "")
        export_url = url_for("api_export_csv", key=key) if container.admin_key else url_for("api_export_csv")
        return render_template(
            "admin.html",
            total=total,
            export_url=export_url,
            has_admin_key=bool(container.admin_key),
        )

    @app.route("/api/export.csv", methods=["GET"], endpoint="api_export_csv")
    @admin_required
    def api_export_csv():
        try:
            body = container.report_service.export_csv()
        except StoreUnavailable:
            return jsonify({"error": "Storage unavailable, try again later"}), 503

        return app.response_class(
            body,
            mimetype="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
        )
