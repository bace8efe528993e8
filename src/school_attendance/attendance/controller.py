from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import parse_iso_date
from ..common.http import admin_required, current_context, json_body, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    ledger = container.ledger_service

    @app.route("/api/teacher/attendance/<day>", methods=["GET"], endpoint="teacher_attendance_sheet")
    @login_required
    def teacher_attendance_sheet(day: str):
        rows = ledger.class_day_sheet(current_context(), attendance_date=parse_iso_date(day))
        return jsonify(rows)

    @app.route("/api/teacher/attendance", methods=["POST"], endpoint="teacher_mark_attendance")
    @login_required
    def teacher_mark_attendance():
        body = json_body()
        day = body.get("attendance_date")
        records = body.get("attendance_records")
        if not day or not isinstance(records, list):
            return jsonify({"error": "Date and attendance records are required"}), 400

        ledger.mark_class_day(
            current_context(),
            attendance_date=parse_iso_date(day),
            marks=records,
            class_id=body.get("class_id"),
        )
        return jsonify({"message": "Attendance marked successfully"})

    @app.route("/api/admin/attendance/edit", methods=["POST"], endpoint="admin_edit_attendance")
    @admin_required
    def admin_edit_attendance():
        body = json_body()
        day = body.get("attendance_date")
        ledger.mark_day(
            current_context(),
            student_id=body.get("student_id"),
            attendance_date=parse_iso_date(day) if day else None,
            status=body.get("status"),
        )
        return jsonify({"message": "Attendance updated successfully"})
