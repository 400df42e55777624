from __future__ import annotations

from dataclasses import asdict
from datetime import timedelta

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..core.exceptions import (
    CapacityExceededError,
    DomainError,
    DuplicateCheckinError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from ..container import Container
from .codec import instance_to_dict
from .identity import InstanceKey
from .state_machine import summarize

_STATUS_BY_ERROR = (
    (NotFoundError, 404),
    (DuplicateCheckinError, 409),
    (CapacityExceededError, 409),
    (InvalidTransitionError, 409),
    (ValidationError, 400),
)


def _status_for(error: DomainError) -> int:
    for kind, status in _STATUS_BY_ERROR:
        if isinstance(error, kind):
            return status
    return 400


def register(app: Flask, container: Container) -> None:
    service = container.roster_service

    def _payload(instance, now):
        data = instance_to_dict(instance)
        data["summary"] = asdict(summarize(instance, now=now))
        return data

    def _body() -> dict:
        return request.get_json(silent=True) or {}

    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return jsonify({"success": False, "error": type(e).__name__, "message": str(e)}), _status_for(e)

    @app.route("/api/roster", methods=["GET"], endpoint="roster_day")
    def roster_day():
        now = container.clock()
        day = parse_iso_date(request.args.get("date") or now.date().isoformat())
        window_start, window_end = service.window()
        instances = service.get_instances_for_date(day)
        return jsonify(
            {
                "date": day.isoformat(),
                "window": {"start": window_start.isoformat(), "end": window_end.isoformat()},
                "instances": [_payload(i, now) for i in instances],
            }
        )

    @app.route("/api/roster/week", methods=["GET"], endpoint="roster_week")
    def roster_week():
        now = container.clock()
        start = parse_iso_date(request.args.get("start") or now.date().isoformat())
        grouped = service.get_instances_for_range(start, start + timedelta(days=6))
        return jsonify(
            {
                "start": start.isoformat(),
                "days": [
                    {"date": d.isoformat(), "instances": [_payload(i, now) for i in items]}
                    for d, items in grouped.items()
                ],
            }
        )

    @app.route("/api/roster/<identity>", methods=["GET"], endpoint="roster_instance")
    def roster_instance(identity: str):
        instance = service.get_instance(InstanceKey.parse(identity))
        return jsonify(_payload(instance, container.clock()))

    @app.route("/api/roster/<identity>/checkins", methods=["POST"], endpoint="roster_checkin")
    def roster_checkin(identity: str):
        body = _body()
        instance = service.add_pre_checkin(
            InstanceKey.parse(identity),
            student_id=body.get("student_id"),
            student_name=body.get("student_name") or "",
        )
        return jsonify(_payload(instance, container.clock())), 201

    @app.route("/api/roster/<identity>/checkins/<int:checkin_id>/cancel", methods=["POST"], endpoint="roster_checkin_cancel")
    def roster_checkin_cancel(identity: str, checkin_id: int):
        instance = service.cancel_pre_checkin(
            InstanceKey.parse(identity),
            checkin_id=checkin_id,
            reason=_body().get("reason"),
        )
        return jsonify(_payload(instance, container.clock()))

    @app.route("/api/roster/<identity>/attendance", methods=["POST"], endpoint="roster_attendance")
    def roster_attendance(identity: str):
        body = _body()
        if not isinstance(body.get("present"), bool):
            raise ValidationError("present must be true or false")
        instance = service.confirm_attendance(
            InstanceKey.parse(identity),
            student_id=body.get("student_id"),
            present=body["present"],
            student_name=body.get("student_name"),
            staff_id=body.get("staff_id"),
            note=body.get("note"),
        )
        return jsonify(_payload(instance, container.clock()))

    @app.route("/api/roster/<identity>/confirm", methods=["POST"], endpoint="roster_confirm")
    def roster_confirm(identity: str):
        instance = service.confirm_presences(InstanceKey.parse(identity))
        return jsonify(_payload(instance, container.clock()))

    @app.route("/api/roster/<identity>/close", methods=["POST"], endpoint="roster_close")
    def roster_close(identity: str):
        instance = service.close_instance(InstanceKey.parse(identity))
        return jsonify(_payload(instance, container.clock()))

    @app.route("/api/roster/<identity>", methods=["DELETE"], endpoint="roster_delete")
    def roster_delete(identity: str):
        service.delete_instance(InstanceKey.parse(identity))
        return jsonify({"success": True})
