from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.validators import parse_int
from ..common.web import admin_required, current_role, current_user_id, login_required, request_data, to_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    requests_svc = container.change_request_service

    @app.route("/change-requests", methods=["POST"], endpoint="create_change_request")
    @login_required
    def create_change_request():
        data = request_data()
        req = requests_svc.create(
            record_id=parse_int(data.get("record_id"), "Record id"),
            user_id=current_user_id(),
            user_name=session.get("name", ""),
            suggested_check_in=data.get("suggested_check_in", ""),
            suggested_check_out=data.get("suggested_check_out"),
            reason=data.get("reason", ""),
            current_role=current_role(),
        )
        return jsonify(to_json(req)), 201

    @app.route("/change-requests/mine", methods=["GET"], endpoint="my_change_requests")
    @login_required
    def my_change_requests():
        return jsonify(to_json(requests_svc.list_for_user(current_user_id())))

    @app.route("/admin/change-requests", methods=["GET"], endpoint="pending_change_requests")
    @admin_required
    def pending_change_requests():
        return jsonify(to_json(requests_svc.list_pending()))

    @app.route(
        "/admin/change-requests/<int:request_id>/approve",
        methods=["POST"],
        endpoint="approve_change_request",
    )
    @admin_required
    def approve_change_request(request_id: int):
        req = requests_svc.approve(int(request_id), admin_user_id=current_user_id(), current_role=current_role())
        return jsonify(to_json(req))

    @app.route(
        "/admin/change-requests/<int:request_id>/reject",
        methods=["POST"],
        endpoint="reject_change_request",
    )
    @admin_required
    def reject_change_request(request_id: int):
        req = requests_svc.reject(int(request_id), admin_user_id=current_user_id(), current_role=current_role())
        return jsonify(to_json(req))
