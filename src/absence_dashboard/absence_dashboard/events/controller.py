from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..access.guards import login_required, requires
from ..common.datetime_utils import parse_iso_date
from ..common.serialization import to_json
from ..core.enums import EventStatus
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    policy = container.policy

    def _events():
        return container.scoped(session.get("access_token")).event_service

    def _parse_status(value):
        if not value:
            return None
        try:
            return EventStatus(value)
        except ValueError:
            raise ValidationError("Invalid status")

    def _with_permissions(actor, event) -> dict:
        data = to_json(event)
        data["permissions"] = {
            "edit": policy.can_edit_event(actor, event),
            "delete": policy.can_delete_event(actor, event),
            "approve": policy.can_approve_event(actor, event),
            "reject": policy.can_reject_event(actor, event),
        }
        return data

    @app.route("/events", methods=["GET"], endpoint="list_events")
    @login_required
    def list_events(actor):
        status = _parse_status(request.args.get("status"))
        events = _events().list_visible(actor, status=status)
        return jsonify([_with_permissions(actor, e) for e in events])

    @app.route("/approvals", methods=["GET"], endpoint="approvals")
    @requires(policy.can_access_approvals)
    def approvals(actor):
        events = _events().list_pending_approvals(actor)
        return jsonify([_with_permissions(actor, e) for e in events])

    @app.route("/events", methods=["POST"], endpoint="create_event")
    @login_required
    def create_event(actor):
        body = request.get_json(silent=True) or {}
        event = _events().create(
            actor,
            owner_id=body.get("owner_id") or actor.actor_id,
            start_date=parse_iso_date(body.get("start_date")),
            end_date=parse_iso_date(body.get("end_date")),
            absence_type_id=body.get("absence_type_id"),
            uf=body.get("uf", ""),
        )
        return jsonify(_with_permissions(actor, event)), 201

    @app.route("/events/<int:event_id>", methods=["GET"], endpoint="get_event")
    @login_required
    def get_event(actor, event_id: int):
        return jsonify(_with_permissions(actor, _events().get(actor, event_id)))

    @app.route("/events/<int:event_id>", methods=["PUT"], endpoint="update_event")
    @login_required
    def update_event(actor, event_id: int):
        body = request.get_json(silent=True) or {}
        event = _events().update(
            actor,
            event_id,
            start_date=parse_iso_date(body.get("start_date")),
            end_date=parse_iso_date(body.get("end_date")),
            absence_type_id=body.get("absence_type_id"),
            uf=body.get("uf", ""),
        )
        return jsonify(_with_permissions(actor, event))

    @app.route("/events/<int:event_id>", methods=["DELETE"], endpoint="delete_event")
    @login_required
    def delete_event(actor, event_id: int):
        _events().delete(actor, event_id)
        return jsonify(message="Event deleted")

    @app.route("/events/<int:event_id>/approve", methods=["POST"], endpoint="approve_event")
    @login_required
    def approve_event(actor, event_id: int):
        body = request.get_json(silent=True) or {}
        event = _events().approve(actor, event_id, note=body.get("note", ""))
        return jsonify(_with_permissions(actor, event))

    @app.route("/events/<int:event_id>/reject", methods=["POST"], endpoint="reject_event")
    @login_required
    def reject_event(actor, event_id: int):
        body = request.get_json(silent=True) or {}
        event = _events().reject(actor, event_id, note=body.get("note", ""))
        return jsonify(_with_permissions(actor, event))
