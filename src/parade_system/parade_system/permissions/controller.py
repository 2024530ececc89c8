from __future__ import annotations

from flask import Flask, request

from ..common.web import current_actor, ok, payload, role_required
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/parades/<int:parade_id>/permissions", methods=["GET"], endpoint="permission_roster")
    @role_required(Role.ANO)
    def permission_roster(parade_id: int):
        roster = container.permission_ledger.roster(
            parade_id=parade_id,
            category=request.args.get("category"),
            division=request.args.get("division"),
            search=request.args.get("q", ""),
        )
        return ok(
            {
                "locked": roster.locked,
                "total": roster.total,
                "permitted": roster.permitted,
                "rows": [r.to_dict() for r in roster.rows],
            }
        )

    @app.route(
        "/api/parades/<int:parade_id>/permissions/<int:cadet_id>",
        methods=["PUT"],
        endpoint="permission_upsert",
    )
    @role_required(Role.ANO)
    def permission_upsert(parade_id: int, cadet_id: int):
        data = payload()
        permission = container.permission_ledger.upsert(
            current_role=current_actor().role,
            parade_id=parade_id,
            cadet_id=cadet_id,
            reason=data.get("reason", ""),
            to_date=data.get("to_date") or None,
        )
        return ok(permission.to_dict(), message="Permission saved")

    @app.route(
        "/api/parades/<int:parade_id>/permissions/<int:cadet_id>",
        methods=["DELETE"],
        endpoint="permission_remove",
    )
    @role_required(Role.ANO)
    def permission_remove(parade_id: int, cadet_id: int):
        removed = container.permission_ledger.remove(
            current_role=current_actor().role,
            parade_id=parade_id,
            cadet_id=cadet_id,
        )
        return ok({"removed": removed})
