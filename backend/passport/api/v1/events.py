"""Membership-change event webhook feeding the auto-issue reconciler."""

from __future__ import annotations

from flask import Blueprint, request

from passport.api.deps import EVENTS_SCOPE, container, json_response, require_scope, timing
from passport.schemas import (
    MemberJoinedEventSchema,
    MembershipEventSchema,
    ReconcileReportSchema,
)

bp = Blueprint("events", __name__)

event_schema = MembershipEventSchema()
joined_schema = MemberJoinedEventSchema()
report_schema = ReconcileReportSchema()


@bp.post("/membership")
@require_scope(EVENTS_SCOPE)
@timing
def membership_changed():
    """
    Apply a membership role change.

    Delivery is at-least-once; replays are harmless. Partial store failures
    answer ``503`` so the sender retries the whole event.
    """

    change = event_schema.load(request.get_json(silent=True) or {})
    report = container().reconciler.handle(change)
    status = 200 if report.ok else 503
    return json_response({"data": report_schema.dump(report)}, status=status)


@bp.post("/member-joined")
@require_scope(EVENTS_SCOPE)
@timing
def member_joined():
    """Issue passports to a new member who already holds trigger roles."""

    payload = joined_schema.load(request.get_json(silent=True) or {})
    report = container().reconciler.handle_member_joined(
        payload["server_id"], payload["user_id"], payload["roles"]
    )
    status = 200 if report.ok else 503
    return json_response({"data": report_schema.dump(report)}, status=status)
