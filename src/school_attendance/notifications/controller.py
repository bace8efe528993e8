from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_context, date_arg, int_arg, json_body, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    notifications = container.notification_service

    @app.route("/api/messaging/absent-students", methods=["GET"], endpoint="messaging_absent_students")
    @login_required
    def messaging_absent_students():
        data = notifications.absent_students(current_context(), day=date_arg("date"), class_id=int_arg("class_id"))
        return jsonify(data)

    @app.route("/api/messaging/send", methods=["POST"], endpoint="messaging_send")
    @login_required
    def messaging_send():
        body = json_body()
        data = notifications.send_absence_notices(
            current_context(),
            student_ids=body.get("student_ids"),
            day=date_arg("date", source=body),
        )
        return jsonify(data)

    @app.route("/api/messaging/history", methods=["GET"], endpoint="messaging_history")
    @login_required
    def messaging_history():
        data = notifications.message_history(
            current_context(),
            start=date_arg("start_date"),
            end=date_arg("end_date"),
            student_id=int_arg("student_id"),
            status=request.args.get("status"),
        )
        return jsonify(data)
