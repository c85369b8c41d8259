from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.web import admin_required, current_role, login_required, request_data, to_json
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        data = request_data()
        user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))

        session.clear()
        session["user_id"] = user.user_id
        session["name"] = user.name
        session["role"] = user.role.value
        return jsonify(to_json(user))

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"ok": True})

    @app.route("/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        user = container.user_service.get_user(int(session["user_id"]))
        return jsonify(to_json(user))

    @app.route("/admin/users", methods=["GET"], endpoint="list_users")
    @admin_required
    def list_users():
        return jsonify(to_json(container.user_service.list_users()))

    @app.route("/admin/users", methods=["POST"], endpoint="create_user")
    @admin_required
    def create_user():
        data = request_data()
        try:
            role = Role(data.get("role") or Role.EMPLOYEE.value)
        except ValueError:
            raise ValidationError("Role must be 'admin' or 'employee'")

        user = container.user_service.create_user(
            current_role=current_role(),
            name=data.get("name", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            role=role,
            avatar=data.get("avatar"),
        )
        return jsonify(to_json(user)), 201

    @app.route("/admin/users/<int:user_id>/disable", methods=["POST"], endpoint="disable_user")
    @admin_required
    def disable_user(user_id: int):
        container.user_service.disable_user(current_role=current_role(), user_id=int(user_id))
        return jsonify(to_json(container.user_service.get_user(int(user_id))))
