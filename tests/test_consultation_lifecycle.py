from datetime import datetime

import pytest

from models.consultation_model import (
    APPROVED, CANCELLED, COMPLETED, PENDING, REJECTED, Consultation, FollowUp,
)
from services.consultation_lifecycle import (
    append_follow_up,
    apply_status_change,
    can_transition,
    parse_scheduled_date,
    toggle_follow_up,
)
from utils.errors import InvalidTransitionError, NotFoundError, ValidationError


def consultation(status=PENDING, **extra):
    return Consultation(status=status, **extra)


@pytest.mark.parametrize('current,requested,allowed', [
    (PENDING, APPROVED, True),
    (PENDING, REJECTED, True),
    (APPROVED, COMPLETED, True),
    (PENDING, COMPLETED, False),
    (PENDING, PENDING, False),
    (APPROVED, APPROVED, False),
    (APPROVED, REJECTED, False),
    (REJECTED, APPROVED, False),
    (COMPLETED, APPROVED, False),
    (PENDING, CANCELLED, False),
    (APPROVED, CANCELLED, False),
    (CANCELLED, PENDING, False),
])
def test_transition_table(current, requested, allowed):
    assert can_transition(current, requested) is allowed


class TestApplyStatusChange:
    def test_approve_assigns_actor_and_notes(self):
        c = consultation()
        apply_status_change(c, APPROVED, actor_id=7, notes='ok')
        assert c.status == APPROVED
        assert c.assigned_to_id == 7
        assert c.notes == 'ok'

    def test_existing_assignee_is_kept(self):
        c = consultation(assigned_to_id=3)
        apply_status_change(c, APPROVED, actor_id=7)
        assert c.assigned_to_id == 3

    def test_reject_does_not_assign(self):
        c = consultation()
        apply_status_change(c, REJECTED, actor_id=7)
        assert c.status == REJECTED
        assert c.assigned_to_id is None

    def test_empty_notes_keep_previous(self):
        c = consultation(status=APPROVED, notes='first call went well')
        apply_status_change(c, COMPLETED, actor_id=7, notes='')
        assert c.status == COMPLETED
        assert c.notes == 'first call went well'

    def test_non_string_notes_rejected_before_any_change(self):
        c = consultation()
        with pytest.raises(ValidationError):
            apply_status_change(c, APPROVED, actor_id=7, notes=['ok'])
        assert c.status == PENDING
        assert c.assigned_to_id is None

    def test_invalid_transition_leaves_record_untouched(self):
        c = consultation(status=REJECTED, notes='spam')
        with pytest.raises(InvalidTransitionError) as excinfo:
            apply_status_change(c, APPROVED, actor_id=7, notes='changed my mind')
        assert excinfo.value.status_code == 409
        assert c.status == REJECTED
        assert c.notes == 'spam'
        assert c.assigned_to_id is None

    @pytest.mark.parametrize('status', [None, '', 'archived', 'APPROVED'])
    def test_unknown_status_is_validation_error(self, status):
        c = consultation()
        with pytest.raises(ValidationError):
            apply_status_change(c, status, actor_id=7)
        assert c.status == PENDING


class TestScheduledDate:
    def test_blank_is_none(self):
        assert parse_scheduled_date(None) is None
        assert parse_scheduled_date('') is None

    def test_naive_iso(self):
        assert parse_scheduled_date('2025-02-01T09:30:00') == datetime(2025, 2, 1, 9, 30)

    def test_zulu_is_normalised_to_naive_utc(self):
        assert parse_scheduled_date('2025-02-01T09:30:00Z') == datetime(2025, 2, 1, 9, 30)

    def test_offset_is_converted(self):
        assert parse_scheduled_date('2025-02-01T10:30:00+01:00') == datetime(2025, 2, 1, 9, 30)

    @pytest.mark.parametrize('value', ['next tuesday', 20250201])
    def test_rejects_garbage(self, value):
        with pytest.raises(ValidationError):
            parse_scheduled_date(value)


class TestFollowUps:
    def test_append_keeps_order(self):
        c = consultation()
        first = append_follow_up(c, 'Called client', 'phone', actor_id=2)
        second = append_follow_up(c, 'Sent proposal', 'email', actor_id=2,
                                  scheduled_date='2025-02-01T09:00:00')
        assert [f.sequence for f in c.follow_ups] == [1, 2]
        assert c.follow_ups == [first, second]
        assert first.completed is False
        assert first.created_by_id == 2
        assert second.scheduled_date == datetime(2025, 2, 1, 9, 0)

    def test_append_does_not_change_status(self):
        c = consultation(status=REJECTED)
        append_follow_up(c, 'Closed out', 'note', actor_id=2)
        assert c.status == REJECTED

    @pytest.mark.parametrize('message,follow_up_type', [
        ('', 'email'),
        ('Hello', None),
        ('Hello', 'fax'),
        (['Hello'], 'email'),
    ])
    def test_append_validates(self, message, follow_up_type):
        c = consultation()
        with pytest.raises(ValidationError):
            append_follow_up(c, message, follow_up_type, actor_id=2)
        assert c.follow_ups == []

    def _with_follow_up(self, completed=False):
        c = consultation()
        c.follow_ups.append(FollowUp(id=11, sequence=1, message='m', type='note',
                                     completed=completed, created_by_id=2))
        return c

    def test_toggle_flips_without_value(self):
        c = self._with_follow_up()
        toggle_follow_up(c, 11)
        assert c.follow_ups[0].completed is True
        toggle_follow_up(c, 11)
        assert c.follow_ups[0].completed is False

    def test_toggle_sets_explicit_value(self):
        c = self._with_follow_up(completed=True)
        toggle_follow_up(c, 11, True)
        assert c.follow_ups[0].completed is True
        toggle_follow_up(c, 11, False)
        assert c.follow_ups[0].completed is False

    def test_toggle_rejects_non_boolean(self):
        c = self._with_follow_up()
        with pytest.raises(ValidationError):
            toggle_follow_up(c, 11, 'yes')
        assert c.follow_ups[0].completed is False

    def test_toggle_unknown_follow_up(self):
        c = self._with_follow_up()
        with pytest.raises(NotFoundError):
            toggle_follow_up(c, 99)
