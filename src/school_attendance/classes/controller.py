from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import admin_required, current_context, int_arg, json_body, login_required
from ..container import Container
from .service import class_to_dict

_STUDENT_FIELDS = (
    "roll_number",
    "name",
    "class_id",
    "academic_year",
    "gender",
    "parent_email",
    "parent_contact",
    "admission_no",
)


def _class_fields(body: dict) -> dict:
    return {
        "standard": body.get("standard"),
        "section": body.get("section"),
        "academic_year": body.get("academic_year"),
        "teacher_id": body.get("teacher_id"),
    }


def register(app: Flask, container: Container) -> None:
    roster = container.roster_service

    @app.route("/api/admin/classes", methods=["GET"], endpoint="admin_classes")
    @admin_required
    def admin_classes():
        return jsonify(roster.list_classes(current_context()))

    @app.route("/api/admin/classes", methods=["POST"], endpoint="admin_classes_add")
    @admin_required
    def admin_classes_add():
        class_id = roster.add_class(current_context(), **_class_fields(json_body()))
        return jsonify({"message": "Class added successfully", "id": class_id}), 201

    @app.route("/api/admin/classes/<int:class_id>", methods=["PUT"], endpoint="admin_classes_update")
    @admin_required
    def admin_classes_update(class_id: int):
        roster.update_class(current_context(), class_id, **_class_fields(json_body()))
        return jsonify({"message": "Class updated successfully"})

    @app.route("/api/admin/classes/<int:class_id>", methods=["DELETE"], endpoint="admin_classes_delete")
    @admin_required
    def admin_classes_delete(class_id: int):
        roster.delete_class(current_context(), class_id)
        return jsonify({"message": "Class deleted successfully"})

    @app.route("/api/admin/students", methods=["GET"], endpoint="admin_students")
    @login_required
    def admin_students():
        rows = roster.list_students(
            current_context(),
            academic_year=request.args.get("academic_year"),
            class_id=int_arg("class_id"),
        )
        return jsonify(rows)

    @app.route("/api/admin/students", methods=["POST"], endpoint="admin_students_add")
    @admin_required
    def admin_students_add():
        body = json_body()
        student_id = roster.add_student(current_context(), **{f: body.get(f) for f in _STUDENT_FIELDS})
        return jsonify({"message": "Student added successfully", "id": student_id}), 201

    @app.route("/api/admin/students/<int:student_id>", methods=["PUT"], endpoint="admin_students_update")
    @admin_required
    def admin_students_update(student_id: int):
        body = json_body()
        roster.update_student(current_context(), student_id, **{f: body.get(f) for f in _STUDENT_FIELDS})
        return jsonify({"message": "Student updated successfully"})

    @app.route("/api/admin/students/<int:student_id>", methods=["DELETE"], endpoint="admin_students_delete")
    @admin_required
    def admin_students_delete(student_id: int):
        roster.delete_student(current_context(), student_id)
        return jsonify({"message": "Student deleted successfully"})

    @app.route("/api/admin/students/bulk-delete", methods=["POST"], endpoint="admin_students_bulk_delete")
    @admin_required
    def admin_students_bulk_delete():
        year = json_body().get("academic_year")
        count = roster.bulk_delete_students(current_context(), academic_year=year)
        return jsonify({"message": f"Deleted {count} students from academic year {year}", "count": count})

    @app.route("/api/teacher/class", methods=["GET"], endpoint="teacher_class")
    @login_required
    def teacher_class():
        return jsonify(class_to_dict(roster.teacher_class(current_context())))
