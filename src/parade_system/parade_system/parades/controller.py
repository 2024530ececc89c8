from __future__ import annotations

from flask import Flask, request

from ..common.web import current_actor, ok, payload, role_required
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/parades/open", methods=["GET"], endpoint="parade_open")
    @role_required(Role.ANO, Role.SENIOR)
    def parade_open():
        parade = container.parade_service.get_open_parade()
        return ok(parade.to_dict() if parade else None)

    @app.route("/api/parades/review", methods=["GET"], endpoint="parade_under_review")
    @role_required(Role.ANO)
    def parade_under_review():
        """The open parade once attendance is submitted; null while still active."""

        parade = container.parade_service.get_review_parade()
        return ok(parade.to_dict() if parade else None)

    @app.route("/api/parades/latest", methods=["GET"], endpoint="parade_latest")
    @role_required(Role.ANO, Role.SENIOR)
    def parade_latest():
        """Latest parade for the senior dashboard, with the ANO remarks once completed."""

        parade = container.parade_service.get_latest_parade()
        return ok(parade.to_dict() if parade else None)

    @app.route("/api/parades/defaults", methods=["GET"], endpoint="parade_defaults")
    @role_required(Role.ANO)
    def parade_defaults():
        defaults = container.parade_service.default_parade_types()
        return ok({c: t.value for c, t in defaults.items()})

    @app.route("/api/parades", methods=["POST"], endpoint="parade_create")
    @role_required(Role.ANO)
    def parade_create():
        actor = current_actor()
        data = payload()
        parade_id = container.parade_service.create_parade(
            current_role=actor.role,
            actor_id=actor.user_id,
            parade_date=data.get("parade_date"),
            session=data.get("session"),
            categories=data.get("categories") or [],
            parade_types=data.get("parade_types") or {},
        )
        return ok({"parade_id": parade_id}, message="Parade created", status=201)

    @app.route("/api/parades/<int:parade_id>/review", methods=["GET"], endpoint="parade_review")
    @role_required(Role.ANO)
    def parade_review(parade_id: int):
        review = container.parade_service.build_review(
            parade_id=parade_id,
            category=request.args.get("category"),
            division=request.args.get("division"),
            status=request.args.get("status"),
        )
        return ok(review.to_dict())

    @app.route("/api/parades/<int:parade_id>/remarks", methods=["PUT"], endpoint="parade_remarks")
    @role_required(Role.ANO)
    def parade_remarks(parade_id: int):
        container.parade_service.save_remarks(
            current_role=current_actor().role,
            parade_id=parade_id,
            remarks=payload().get("remarks", ""),
        )
        return ok(message="Remarks saved")

    @app.route("/api/parades/<int:parade_id>/close", methods=["POST"], endpoint="parade_close")
    @role_required(Role.ANO)
    def parade_close(parade_id: int):
        actor = current_actor()
        container.parade_service.close_parade(
            current_role=actor.role,
            actor_id=actor.user_id,
            parade_id=parade_id,
            remarks=payload().get("remarks"),
        )
        return ok(message="Parade closed successfully")
