from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_context, date_arg, int_arg, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    reports = container.report_service

    @app.route("/api/reports/student/<int:student_id>", methods=["GET"], endpoint="report_student")
    @login_required
    def report_student(student_id: int):
        data = reports.student_attendance(
            current_context(),
            student_id=student_id,
            start=date_arg("start_date"),
            end=date_arg("end_date"),
            academic_year=request.args.get("academic_year"),
        )
        return jsonify(data)

    @app.route("/api/reports/class/monthly", methods=["GET"], endpoint="report_class_monthly")
    @login_required
    def report_class_monthly():
        data = reports.class_monthly_report(
            current_context(),
            class_id=int_arg("class_id"),
            month=int_arg("month"),
            year=int_arg("year"),
        )
        return jsonify(data)

    @app.route("/api/reports/student/yearly", methods=["GET"], endpoint="report_student_yearly")
    @login_required
    def report_student_yearly():
        data = reports.student_yearly_report(
            current_context(),
            student_id=int_arg("student_id"),
            academic_year=request.args.get("academic_year"),
        )
        return jsonify(data)

    @app.route("/api/reports/class/daily", methods=["GET"], endpoint="report_class_daily")
    @login_required
    def report_class_daily():
        data = reports.class_daily_report(current_context(), class_id=int_arg("class_id"), day=date_arg("date"))
        return jsonify(data)

    @app.route("/api/reports/class/yearly", methods=["GET"], endpoint="report_class_yearly")
    @login_required
    def report_class_yearly():
        data = reports.class_yearly_report(
            current_context(),
            class_id=int_arg("class_id"),
            academic_year=request.args.get("academic_year"),
        )
        return jsonify(data)
