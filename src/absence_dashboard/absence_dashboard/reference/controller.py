from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..access.guards import login_required, requires
from ..common.datetime_utils import parse_iso_date
from ..common.serialization import to_json
from ..core.enums import HolidayScope
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    policy = container.policy

    def _reference():
        return container.scoped(session.get("access_token")).reference_service

    def _scope_arg(value) -> HolidayScope:
        try:
            return HolidayScope(value or HolidayScope.NATIONAL.value)
        except ValueError:
            raise ValidationError("Invalid holiday scope")

    @app.route("/config/absence-types", methods=["GET"], endpoint="list_absence_types")
    @login_required
    def list_absence_types(actor):
        return jsonify(to_json(_reference().list_absence_types(actor)))

    @app.route("/config/absence-types", methods=["POST"], endpoint="create_absence_type")
    @requires(policy.can_manage_config)
    def create_absence_type(actor):
        body = request.get_json(silent=True) or {}
        created = _reference().create_absence_type(
            actor, description=body.get("description", ""), uses_shift=bool(body.get("uses_shift", False))
        )
        return jsonify(to_json(created)), 201

    @app.route("/config/shifts", methods=["GET"], endpoint="list_shifts")
    @login_required
    def list_shifts(actor):
        return jsonify(to_json(_reference().list_shifts(actor)))

    @app.route("/config/shifts", methods=["POST"], endpoint="create_shift")
    @requires(policy.can_manage_config)
    def create_shift(actor):
        body = request.get_json(silent=True) or {}
        return jsonify(to_json(_reference().create_shift(actor, description=body.get("description", "")))), 201

    @app.route("/config/ufs", methods=["GET"], endpoint="list_ufs")
    @login_required
    def list_ufs(actor):
        return jsonify(to_json(_reference().list_ufs(actor)))

    @app.route("/config/ufs", methods=["POST"], endpoint="create_uf")
    @requires(policy.can_manage_config)
    def create_uf(actor):
        body = request.get_json(silent=True) or {}
        return jsonify(to_json(_reference().create_uf(actor, code=body.get("code"), uf=body.get("uf", "")))), 201

    @app.route("/config/holidays", methods=["GET"], endpoint="list_holidays")
    @login_required
    def list_holidays(actor):
        holidays = _reference().list_holidays(
            actor, scope=_scope_arg(request.args.get("scope")), uf=request.args.get("uf") or None
        )
        return jsonify(to_json(holidays))

    @app.route("/config/holidays", methods=["POST"], endpoint="create_holiday")
    @requires(policy.can_manage_config)
    def create_holiday(actor):
        body = request.get_json(silent=True) or {}
        created = _reference().create_holiday(
            actor,
            holiday_date=parse_iso_date(body.get("date")),
            uf=body.get("uf", ""),
            description=body.get("description", ""),
            scope=_scope_arg(body.get("scope")),
        )
        return jsonify(to_json(created)), 201

    @app.route("/company", methods=["GET"], endpoint="get_company")
    @login_required
    def get_company(actor):
        cnpj = request.args.get("cnpj", type=int)
        return jsonify(to_json(_reference().get_company(actor, cnpj)))

    @app.route("/company/<int:cnpj>", methods=["PUT"], endpoint="update_company")
    @requires(policy.can_manage_empresa)
    def update_company(actor, cnpj: int):
        company = _reference().update_company(actor, cnpj, request.get_json(silent=True) or {})
        return jsonify(to_json(company))
