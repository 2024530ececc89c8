from __future__ import annotations

from flask import Flask

from ..common.web import current_actor, ok, payload, role_required
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/parades/<int:parade_id>/reports/<category>", methods=["GET"], endpoint="report_draft")
    @role_required(Role.SENIOR, Role.ANO)
    def report_draft(parade_id: int, category: str):
        draft = container.report_service.get_draft(parade_id=parade_id, category=category)
        return ok(draft.to_dict())

    @app.route("/api/parades/<int:parade_id>/reports/<category>", methods=["PUT"], endpoint="report_save")
    @role_required(Role.SENIOR)
    def report_save(parade_id: int, category: str):
        actor = current_actor()
        container.report_service.save(
            current_role=actor.role,
            actor_id=actor.user_id,
            parade_id=parade_id,
            category=category,
            report_text=payload().get("report_text", ""),
        )
        return ok(message="Report submitted successfully")
