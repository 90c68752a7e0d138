"""
Collaborator protocols for subject profiles and notification storage.

Why Protocol over ABC: Structural typing, easier mocking, less coupling.
The in-memory implementations here back the tests and the demo runner; the
SQL implementation lives in ``adapters.sql``.
"""

import asyncio
import uuid
from collections.abc import Iterable, Mapping
from typing import Any, Protocol

import structlog

from core.domain.errors import DuplicateNotificationError, SubjectNotFoundError
from core.domain.models import (
    NOTIFICATION_TYPE,
    Notification,
    NotificationDraft,
    NotificationStatus,
    Subject,
)

logger = structlog.get_logger(__name__)


class SubjectDirectory(Protocol):
    """Read access to the profile / family-member subsystem."""

    async def get_subject(self, subject_id: str) -> Subject:
        """
        Fetch one subject.

        Raises:
            SubjectNotFoundError: no subject with this id.
            InvalidInputError: the stored birth date cannot be parsed.
        """
        ...

    async def list_subject_ids(self, with_birth_date: bool = True) -> list[str]:
        """Ids of all subjects, optionally only those with a birth date on file."""
        ...


class NotificationStore(Protocol):
    """
    Persistence for materialized notifications.

    Implementations must reject a second active row for the same
    ``(subject_id, event_code)`` by raising ``DuplicateNotificationError``.
    """

    async def list_active_event_codes(
        self, subject_id: str, type: str = NOTIFICATION_TYPE
    ) -> set[str]: ...

    async def insert_notifications(
        self, drafts: list[NotificationDraft]
    ) -> list[Notification]: ...

    async def update_status(self, notification_id: str, status: NotificationStatus) -> None: ...

    async def list_notifications(self, subject_id: str) -> list[Notification]: ...


class InMemorySubjectDirectory:
    """Subject directory backed by raw profile records."""

    def __init__(self, records: Iterable[Mapping[str, Any]] = ()) -> None:
        self._records: dict[str, dict[str, Any]] = {}
        for record in records:
            self.add(record)

    def add(self, record: Mapping[str, Any]) -> None:
        self._records[str(record["id"])] = dict(record)

    async def get_subject(self, subject_id: str) -> Subject:
        record = self._records.get(subject_id)
        if record is None:
            raise SubjectNotFoundError(f"subject {subject_id} not found")
        return Subject.from_record(record)

    async def list_subject_ids(self, with_birth_date: bool = True) -> list[str]:
        return [
            subject_id
            for subject_id, record in self._records.items()
            if not with_birth_date or record.get("birth_date")
        ]


class InMemoryNotificationStore:
    """
    Dict-backed notification store.

    Inserts are all-or-nothing and enforce the active-uniqueness invariant,
    mirroring the partial unique index of the SQL store.
    """

    def __init__(self) -> None:
        self._rows: dict[str, Notification] = {}
        self._lock = asyncio.Lock()
        self.logger = logger.bind(component="in_memory_notification_store")

    def _active_codes(self, subject_id: str, type: str = NOTIFICATION_TYPE) -> set[str]:
        return {
            n.event_code
            for n in self._rows.values()
            if n.subject_id == subject_id and n.type == type and n.status.is_active
        }

    async def list_active_event_codes(
        self, subject_id: str, type: str = NOTIFICATION_TYPE
    ) -> set[str]:
        return self._active_codes(subject_id, type)

    async def insert_notifications(self, drafts: list[NotificationDraft]) -> list[Notification]:
        async with self._lock:
            by_subject: dict[str, set[str]] = {}
            for draft in drafts:
                if not draft.status.is_active:
                    continue
                active = by_subject.setdefault(
                    draft.subject_id, self._active_codes(draft.subject_id, draft.type)
                )
                if draft.event_code in active:
                    raise DuplicateNotificationError(draft.subject_id, {draft.event_code})
                active.add(draft.event_code)

            created = [
                Notification(id=str(uuid.uuid4()), **draft.model_dump()) for draft in drafts
            ]
            for notification in created:
                self._rows[notification.id] = notification

        self.logger.debug("notifications_inserted", count=len(created))
        return created

    async def update_status(self, notification_id: str, status: NotificationStatus) -> None:
        async with self._lock:
            current = self._rows.get(notification_id)
            if current is None:
                raise KeyError(notification_id)
            if status.is_active and not current.status.is_active:
                if current.event_code in self._active_codes(current.subject_id, current.type):
                    raise DuplicateNotificationError(current.subject_id, {current.event_code})
            self._rows[notification_id] = current.model_copy(update={"status": status})

    async def list_notifications(self, subject_id: str) -> list[Notification]:
        return sorted(
            (n for n in self._rows.values() if n.subject_id == subject_id),
            key=lambda n: n.created_at,
        )
