from __future__ import annotations

from flask import Flask, request

from ..common.web import current_actor, ok, payload, role_required
from ..core.enums import Role
from ..common.validators import parse_bool
from ..core.exceptions import ValidationError
from ..container import Container


def _present_marks(raw) -> dict[int, bool]:
    """Accept either a list of present cadet ids or a {cadet_id: bool} mapping."""

    if raw is None:
        return {}
    try:
        if isinstance(raw, dict):
            return {int(k): parse_bool(v, "present") for k, v in raw.items()}
        return {int(cid): True for cid in raw}
    except (TypeError, ValueError):
        raise ValidationError("present must be a list of cadet ids")


def register(app: Flask, container: Container) -> None:
    @app.route(
        "/api/parades/<int:parade_id>/attendance/<category>",
        methods=["GET"],
        endpoint="attendance_sheet",
    )
    @role_required(Role.SENIOR)
    def attendance_sheet(parade_id: int, category: str):
        actor = current_actor()
        sheet = container.attendance_service.load_sheet(
            parade_id=parade_id,
            category=category,
            division=actor.require_division(),
        )
        return ok(
            {
                "parade": sheet.parade.to_dict(),
                "category": sheet.category,
                "division": sheet.division,
                "parade_type": sheet.parade_type.value if sheet.parade_type else None,
                "has_existing": sheet.has_existing,
                "can_edit": sheet.can_edit,
                "rows": [r.to_dict() for r in sheet.visible_rows(request.args.get("status"))],
            }
        )

    @app.route(
        "/api/parades/<int:parade_id>/attendance/<category>",
        methods=["POST"],
        endpoint="attendance_submit",
    )
    @role_required(Role.SENIOR)
    def attendance_submit(parade_id: int, category: str):
        actor = current_actor()
        data = payload()
        summary = container.attendance_service.submit(
            current_role=actor.role,
            actor_id=actor.user_id,
            parade_id=parade_id,
            category=category,
            division=actor.require_division(),
            present_marks=_present_marks(data.get("present")),
            edit=parse_bool(data.get("edit"), "edit"),
        )
        return ok(summary.to_dict(), message="Attendance submitted")
