from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import admin_required, current_context, json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/students/promote", methods=["POST"], endpoint="admin_promote_students")
    @admin_required
    def admin_promote_students():
        body = json_body()
        result = container.promotion_service.promote(
            current_context(),
            source_class_id=body.get("current_class_id"),
            student_ids=body.get("student_ids"),
        )
        return jsonify(result.to_dict())
