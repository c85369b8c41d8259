from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import current_role, current_user_id, login_required, request_data, to_json
from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    records = container.record_service

    @app.route("/records/check-in", methods=["POST"], endpoint="check_in")
    @login_required
    def check_in():
        data = request_data()
        record = records.check_in(current_user_id(), data.get("notes"))
        return jsonify(to_json(record)), 201

    @app.route("/records/<int:record_id>/check-out", methods=["POST"], endpoint="check_out")
    @login_required
    def check_out(record_id: int):
        data = request_data()
        record = records.check_out(
            current_user_id(),
            int(record_id),
            data.get("notes"),
            current_role=current_role(),
        )
        return jsonify(to_json(record))

    @app.route("/records", methods=["GET"], endpoint="list_records")
    @login_required
    def list_records():
        """Own records by default; admins may pass `user_id` or `all=1`.

        Optional `start` / `end` (YYYY-MM-DD) restrict the date range.
        """
        args = request.args
        is_admin = current_role() == Role.ADMIN
        wants_all = args.get("all") in {"1", "true"}
        user_id = args.get("user_id", type=int)

        if (wants_all or (user_id is not None and user_id != current_user_id())) and not is_admin:
            raise AuthorizationError("Administrator access required")

        start, end = args.get("start"), args.get("end")
        ranged = bool(start or end)
        if ranged:
            start_date = parse_iso_date(start) if start else parse_iso_date(end)
            end_date = parse_iso_date(end) if end else start_date

        if wants_all:
            rows = records.get_all_records_between(start_date, end_date) if ranged else records.get_all_records()
        else:
            target = user_id if user_id is not None else current_user_id()
            if ranged:
                rows = records.get_user_records_between(target, start_date, end_date)
            else:
                rows = records.get_user_records(target)
        return jsonify(to_json(rows))

    @app.route("/records/today", methods=["GET"], endpoint="today_records")
    @login_required
    def today_records():
        return jsonify(to_json(records.get_today_records(current_user_id())))

    @app.route("/records/active", methods=["GET"], endpoint="active_record")
    @login_required
    def active_record():
        return jsonify({"record": to_json(records.get_active_record(current_user_id()))})
