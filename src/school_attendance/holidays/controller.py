from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import admin_required, current_context, date_arg, json_body, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    calendar = container.calendar_service

    @app.route("/api/admin/holidays", methods=["GET"], endpoint="admin_holidays")
    @login_required
    def admin_holidays():
        return jsonify(calendar.list_holidays(current_context(), academic_year=request.args.get("academic_year")))

    @app.route("/api/admin/holidays", methods=["POST"], endpoint="admin_holidays_add")
    @admin_required
    def admin_holidays_add():
        body = json_body()
        holiday_id = calendar.add_holiday(
            current_context(),
            holiday_date=date_arg("holiday_date", source=body),
            description=body.get("description"),
            academic_year=body.get("academic_year"),
        )
        return jsonify({"message": "Holiday added successfully", "id": holiday_id}), 201

    @app.route("/api/admin/holidays/<int:holiday_id>", methods=["DELETE"], endpoint="admin_holidays_delete")
    @admin_required
    def admin_holidays_delete(holiday_id: int):
        calendar.delete_holiday(current_context(), holiday_id)
        return jsonify({"message": "Holiday deleted successfully"})
