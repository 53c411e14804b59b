from __future__ import annotations

from datetime import timedelta

from flask import Flask, current_app, jsonify, request, session

from ..access.guards import login_required
from ..access.navigation import navigation_as_dicts, visible_navigation
from ..common.datetime_utils import parse_iso_date
from ..common.serialization import to_json
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _scope():
        return container.scoped(session.get("access_token"))

    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        body = request.get_json(silent=True) or {}
        s_user = container.auth_service.authenticate(body.get("email", ""), body.get("password", ""))

        session.clear()
        session.permanent = bool(body.get("remember_me"))
        current_app.permanent_session_lifetime = timedelta(
            days=int(current_app.config.get("SESSION_DAYS", DEFAULT_SESSION_DAYS))
        )

        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value if s_user.role else None
        session["is_manager"] = s_user.is_manager
        session["group_id"] = s_user.group_id
        session["group_name"] = s_user.group_name
        session["access_token"] = s_user.access_token

        return jsonify(
            user_id=s_user.user_id,
            name=s_user.full_name,
            role=session["role"],
            is_manager=s_user.is_manager,
            group_id=s_user.group_id,
        )

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        container.auth_service.logout(session.get("access_token"))
        session.clear()
        return jsonify(message="Logged out")

    @app.route("/me", endpoint="me")
    @login_required
    def me(actor):
        return jsonify(
            user_id=actor.actor_id,
            name=session.get("name"),
            role=actor.role.value if actor.role else None,
            is_manager=actor.is_manager,
            group_id=actor.group_id,
            group_name=session.get("group_name"),
        )

    @app.route("/navigation", endpoint="navigation")
    @login_required
    def navigation(actor):
        return jsonify(navigation_as_dicts(visible_navigation(container.policy, actor)))

    @app.route("/users", methods=["GET"], endpoint="list_users")
    @login_required
    def list_users(actor):
        users = _scope().user_service.list_visible(actor)
        return jsonify(to_json(users))

    @app.route("/users/groups", methods=["GET"], endpoint="user_selectable_groups")
    @login_required
    def user_selectable_groups(actor):
        return jsonify(to_json(_scope().user_service.selectable_groups(actor)))

    @app.route("/users", methods=["POST"], endpoint="create_user")
    @login_required
    def create_user(actor):
        body = request.get_json(silent=True) or {}
        role = Role.parse(body.get("role") or Role.REGULAR.value)
        if role is None:
            raise ValidationError("Invalid role")
        started_at = parse_iso_date(body["started_at"]) if body.get("started_at") else None

        user = _scope().user_service.create_account(
            actor,
            cpf=body.get("cpf"),
            name=body.get("name", ""),
            email=body.get("email", ""),
            password=body.get("password", ""),
            group_id=body.get("group_id"),
            role=role,
            is_manager=bool(body.get("is_manager", False)),
            uf=body.get("uf"),
            started_at=started_at,
        )
        return jsonify(to_json(user)), 201

    @app.route("/users/<int:cpf>", methods=["GET"], endpoint="get_user")
    @login_required
    def get_user(actor, cpf: int):
        return jsonify(to_json(_scope().user_service.get(actor, cpf)))

    @app.route("/users/<int:cpf>", methods=["PUT"], endpoint="update_user")
    @login_required
    def update_user(actor, cpf: int):
        changes = dict(request.get_json(silent=True) or {})
        if changes.get("started_at"):
            changes["started_at"] = parse_iso_date(changes["started_at"])
        user = _scope().user_service.update(actor, cpf, changes)
        return jsonify(to_json(user))

    @app.route("/users/<int:cpf>/active", methods=["POST"], endpoint="set_user_active")
    @login_required
    def set_user_active(actor, cpf: int):
        body = request.get_json(silent=True) or {}
        user = _scope().user_service.set_active(actor, cpf, bool(body.get("active", True)))
        return jsonify(to_json(user))

    @app.route("/users/<int:cpf>", methods=["DELETE"], endpoint="delete_user")
    @login_required
    def delete_user(actor, cpf: int):
        _scope().user_service.delete_user(actor, cpf)
        return jsonify(message="User deleted")
