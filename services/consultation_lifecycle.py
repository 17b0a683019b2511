"""
Consultation lifecycle.

    pending --approve--> approved --complete--> completed
    pending --reject---> rejected

``cancelled`` is part of the status vocabulary but no transition leads to it. All
functions here work on in-memory model objects and never touch the session; callers
commit. A rejected request leaves the consultation exactly as it was.
"""
from datetime import datetime

from models.consultation_model import (
    APPROVED,
    CANCELLED,
    COMPLETED,
    CONSULTATION_STATUSES,
    FOLLOWUP_TYPES,
    PENDING,
    REJECTED,
    FollowUp,
)
from utils.errors import InvalidTransitionError, NotFoundError, ValidationError

TRANSITIONS = {
    PENDING: frozenset({APPROVED, REJECTED}),
    APPROVED: frozenset({COMPLETED}),
    REJECTED: frozenset(),
    COMPLETED: frozenset(),
    CANCELLED: frozenset(),
}


def can_transition(current, requested):
    return requested in TRANSITIONS.get(current, frozenset())


def apply_status_change(consultation, new_status, actor_id, notes=None):
    if new_status not in CONSULTATION_STATUSES:
        raise ValidationError(
            f"Invalid status. Choose one of: {', '.join(CONSULTATION_STATUSES)}",
            fields=['status'],
        )
    if notes is not None and not isinstance(notes, str):
        raise ValidationError("notes must be a string", fields=['notes'])
    if not can_transition(consultation.status, new_status):
        raise InvalidTransitionError(consultation.status, new_status)

    consultation.status = new_status
    if notes:
        consultation.notes = notes
    if new_status == APPROVED and consultation.assigned_to_id is None:
        consultation.assigned_to_id = actor_id
    return consultation


def parse_scheduled_date(value):
    if value in (None, ''):
        return None
    if not isinstance(value, str):
        raise ValidationError("scheduledDate must be an ISO 8601 date", fields=['scheduledDate'])
    try:
        parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        raise ValidationError("scheduledDate must be an ISO 8601 date", fields=['scheduledDate'])
    if parsed.tzinfo is not None:
        parsed = parsed.replace(tzinfo=None) - parsed.utcoffset()
    return parsed


def append_follow_up(consultation, message, follow_up_type, actor_id, scheduled_date=None):
    missing = [name for name, value in (('message', message), ('type', follow_up_type)) if not value]
    if missing:
        raise ValidationError("Missing required fields", fields=missing)
    if not isinstance(message, str):
        raise ValidationError("message must be a string", fields=['message'])
    if follow_up_type not in FOLLOWUP_TYPES:
        raise ValidationError(
            f"Invalid follow-up type. Choose one of: {', '.join(FOLLOWUP_TYPES)}",
            fields=['type'],
        )

    follow_up = FollowUp(
        sequence=max((f.sequence for f in consultation.follow_ups), default=0) + 1,
        message=message,
        type=follow_up_type,
        scheduled_date=parse_scheduled_date(scheduled_date),
        completed=False,
        created_by_id=actor_id,
    )
    consultation.follow_ups.append(follow_up)
    return follow_up


def toggle_follow_up(consultation, follow_up_id, completed=None):
    """Set ``completed`` on one follow-up; flip it when no value is given."""
    follow_up = next((f for f in consultation.follow_ups if f.id == follow_up_id), None)
    if follow_up is None:
        raise NotFoundError("Follow-up not found")
    if completed is None:
        follow_up.completed = not follow_up.completed
    elif isinstance(completed, bool):
        follow_up.completed = completed
    else:
        raise ValidationError("completed must be a boolean", fields=['completed'])
    return follow_up
