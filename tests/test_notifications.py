"""Tests for the notification center."""

from __future__ import annotations

import pytest

from placementdesk.exceptions import NotFoundError, ValidationError


def _admin_note(**kw):
    data = {
        "type": "deadline_reminder",
        "title": "Deadline",
        "message": "Applications for Data Engineer close on Friday.",
        "recipient": "student",
        "recipient_id": 1,
        "priority": "low",
    }
    data.update(kw)
    return data


def test_create_and_list_for_recipient(portal, clock):
    direct = portal.create_notification(_admin_note())
    clock.advance(minutes=1)
    broadcast = portal.create_notification(
        _admin_note(recipient="all_students", recipient_id=None, priority="high")
    )
    portal.create_notification(_admin_note(recipient_id=2))
    portal.create_notification(_admin_note(recipient="all_employers", recipient_id=None))

    listed = portal.notifications.notifications_for("student", 1)
    assert [n.id for n in listed] == [broadcast.id, direct.id]

    only_direct = portal.notifications.notifications_for("student", 1, include_broadcast=False)
    assert [n.id for n in only_direct] == [direct.id]


def test_admin_can_not_create_system_types(portal):
    with pytest.raises(ValidationError, match="Invalid notification type"):
        portal.create_notification(_admin_note(type="profile_created"))


def test_mark_as_read_and_unread_count(portal):
    note = portal.create_notification(_admin_note())
    assert portal.notifications.unread_count("student", 1) == 1
    read = portal.mark_notification_read(note.id)
    assert read.is_read is True
    assert portal.notifications.unread_count("student", 1) == 0
    with pytest.raises(NotFoundError, match="Notification not found"):
        portal.mark_notification_read(999)


def test_emit_clips_long_messages(portal):
    note = portal.notifications.emit(
        type="job_posting",
        title="New Job Posted",
        message="x" * 700,
        recipient="all_students",
    )
    assert len(note.message) == 500
    assert note.priority == "medium"
