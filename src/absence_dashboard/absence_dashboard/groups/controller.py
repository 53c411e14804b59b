from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..access.guards import login_required, requires
from ..common.serialization import to_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    policy = container.policy

    def _groups():
        return container.scoped(session.get("access_token")).group_service

    @app.route("/groups", methods=["GET"], endpoint="list_groups")
    @login_required
    def list_groups(actor):
        return jsonify(to_json(_groups().list_visible(actor)))

    @app.route("/groups", methods=["POST"], endpoint="create_group")
    @requires(policy.can_manage_group)
    def create_group(actor):
        group = _groups().create(actor, request.get_json(silent=True) or {})
        return jsonify(to_json(group)), 201

    @app.route("/groups/<int:group_id>", methods=["GET"], endpoint="get_group")
    @login_required
    def get_group(actor, group_id: int):
        return jsonify(to_json(_groups().get(actor, group_id)))

    @app.route("/groups/<int:group_id>", methods=["PUT"], endpoint="update_group")
    @requires(policy.can_manage_group)
    def update_group(actor, group_id: int):
        group = _groups().update(actor, group_id, request.get_json(silent=True) or {})
        return jsonify(to_json(group))

    @app.route("/groups/<int:group_id>/active", methods=["POST"], endpoint="set_group_active")
    @requires(policy.can_manage_group)
    def set_group_active(actor, group_id: int):
        body = request.get_json(silent=True) or {}
        group = _groups().set_active(actor, group_id, bool(body.get("active", True)))
        return jsonify(to_json(group))

    @app.route("/groups/<int:group_id>", methods=["DELETE"], endpoint="delete_group")
    @requires(policy.can_manage_group)
    def delete_group(actor, group_id: int):
        _groups().delete(actor, group_id)
        return jsonify(message="Group deleted")
