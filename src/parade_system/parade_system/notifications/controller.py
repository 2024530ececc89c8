from __future__ import annotations

from flask import Flask, request

from ..common.web import current_actor, ok, role_required
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route(
        "/api/parades/<int:parade_id>/notifications/pending",
        methods=["POST"],
        endpoint="notify_pending",
    )
    @role_required(Role.ANO)
    def notify_pending(parade_id: int):
        parade = container.parade_service.get_parade(parade_id)
        slots = container.parade_service.pending_slots(parade)
        sent = container.notification_dispatcher.notify_pending(
            current_role=current_actor().role,
            parade_id=parade_id,
            pending_slots=slots,
        )
        return ok({"sent": sent}, message="Notifications sent to seniors")

    @app.route("/api/parades/<int:parade_id>/notifications", methods=["GET"], endpoint="notifications_list")
    @role_required(Role.SENIOR)
    def notifications_list(parade_id: int):
        actor = current_actor()
        notices = container.notification_dispatcher.list_for_senior(
            parade_id=parade_id,
            division=actor.division,
            category=request.args.get("category"),
        )
        return ok([n.to_dict() for n in notices])
