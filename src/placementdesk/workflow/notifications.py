"""Notification sink: creation, per-recipient listing and read receipts."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from placementdesk.models import SYSTEM_NOTIFICATION_TYPES, Notification
from placementdesk.storage.base import Store
from placementdesk.validation.rules import (
    NOTIFICATION_MESSAGE_MAX,
    as_int,
    is_missing,
    validate_notification,
)

logger = logging.getLogger(__name__)

_BROADCAST = {"student": "all_students", "employer": "all_employers"}


def _optional_id(data: Mapping[str, Any], name: str) -> int | None:
    value = data.get(name)
    return None if is_missing(value) else as_int(value, name)


class NotificationCenter:
    """Creates and reads notifications through the store."""

    def __init__(self, store: Store) -> None:
        self._store = store

    def emit(
        self,
        type: str,
        title: str,
        message: str,
        recipient: str,
        priority: str = "medium",
        recipient_id: int | None = None,
        related_job_id: int | None = None,
        related_application_id: int | None = None,
    ) -> Notification:
        """Create a notification on behalf of a workflow.

        Messages longer than the limit are clipped rather than rejected, since
        they are built from user-supplied titles.
        """
        message = message[:NOTIFICATION_MESSAGE_MAX]
        validate_notification(
            {
                "type": type,
                "title": title,
                "message": message,
                "recipient": recipient,
                "priority": priority,
            },
            allowed_types=SYSTEM_NOTIFICATION_TYPES,
        )
        created = self._store.notifications.create(
            Notification(
                type=type,
                title=title,
                message=message,
                recipient=recipient,
                recipient_id=recipient_id,
                priority=priority,
                related_job_id=related_job_id,
                related_application_id=related_application_id,
            )
        )
        logger.info(
            "Notification %d (%s) -> %s%s.",
            created.id,
            type,
            recipient,
            f" {recipient_id}" if recipient_id is not None else "",
        )
        return created

    def create_notification(self, data: Mapping[str, Any]) -> Notification:
        """Create an administrator-authored notification after validation."""
        validate_notification(data)
        return self._store.notifications.create(
            Notification(
                type=data["type"],
                title=str(data["title"]),
                message=str(data["message"]),
                recipient=data["recipient"],
                recipient_id=_optional_id(data, "recipient_id"),
                priority=data["priority"],
                related_job_id=_optional_id(data, "related_job_id"),
                related_application_id=_optional_id(data, "related_application_id"),
            )
        )

    def all_notifications(self) -> list[Notification]:
        return self._store.notifications.get_all()

    def notifications_for(
        self,
        recipient: str,
        recipient_id: int | None = None,
        include_broadcast: bool = True,
    ) -> list[Notification]:
        """Notifications addressed to *recipient*, newest first.

        With *recipient_id* set only that user's direct notifications match;
        role broadcasts (``all_students``/``all_employers``) are included
        unless *include_broadcast* is false.
        """
        broadcast = _BROADCAST.get(recipient) if include_broadcast else None
        matches = [
            n
            for n in self._store.notifications.get_all()
            if (
                n.recipient == recipient
                and (recipient_id is None or n.recipient_id == recipient_id)
            )
            or (broadcast is not None and n.recipient == broadcast)
        ]
        # id breaks ties between notifications created in the same instant
        matches.sort(key=lambda n: (n.created_at, n.id), reverse=True)
        return matches

    def mark_as_read(self, notification_id: int) -> Notification:
        return self._store.notifications.update(notification_id, is_read=True)

    def unread_count(self, recipient: str, recipient_id: int | None = None) -> int:
        return sum(1 for n in self.notifications_for(recipient, recipient_id) if not n.is_read)
