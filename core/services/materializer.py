"""
Deduplication and persistence of scheduled events.

A subject's pass does exactly one read (active event codes) and one bulk
write in the happy path. Both calls carry a timeout and a bounded retry:
- reads are idempotent and are simply retried
- an insert that fails or times out is ambiguous (it may have landed), so the
  active codes are re-read before retrying; rows that landed are reported as
  created and are not written again
- the store's active-uniqueness constraint is the backstop against concurrent
  passes for the same subject
"""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import timedelta
from typing import TypeVar

import structlog

from core.config import EngineConfig
from core.domain.errors import DuplicateNotificationError, PersistenceError
from core.domain.models import (
    NOTIFICATION_TYPE,
    CheckupContext,
    EventType,
    MaterializationResult,
    Notification,
    NotificationDraft,
    ScheduledEvent,
    Subject,
    VaccinationContext,
)
from core.domain.result import Result
from core.services.notification_store import NotificationStore

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def notification_title(subject: Subject, event_name: str) -> str:
    return f"{subject.name}님의 {event_name}"


def build_draft(
    subject: Subject, candidate: ScheduledEvent, catalog_version: str
) -> NotificationDraft:
    """Turn a scheduled event into an insertable notification row."""
    event = candidate.event
    remind_on = (
        candidate.scheduled_at - timedelta(days=event.notification_lead_days)
        if candidate.scheduled_at is not None
        else None
    )

    context_cls = VaccinationContext if event.event_type == EventType.VACCINATION else CheckupContext
    context = context_cls(
        event_code=event.event_code,
        event_name=event.event_name,
        member_name=subject.name,
        days_until=candidate.days_until,
        remind_on=remind_on,
        catalog_version=catalog_version,
        importance=event.importance,
        has_professional_info=event.has_professional_info,
        requires_user_choice=event.requires_user_choice,
    )

    return NotificationDraft(
        subject_id=subject.id,
        category=event.category,
        title=notification_title(subject, event.event_name),
        message=event.description,
        priority=candidate.priority,
        scheduled_at=candidate.scheduled_at,
        context_data=context,
    )


class Materializer:
    """Deduplicates candidates against active notifications and bulk-inserts the rest."""

    def __init__(
        self,
        store: NotificationStore,
        config: EngineConfig | None = None,
        catalog_version: str = "unversioned",
    ) -> None:
        self.store = store
        self.config = config or EngineConfig()
        self.catalog_version = catalog_version
        self.logger = logger.bind(component="materializer")

    async def _backoff(self, attempt: int) -> None:
        delay = self.config.retry_backoff_seconds * (2**attempt)
        if delay > 0:
            await asyncio.sleep(delay)

    async def _call(self, operation: Callable[[], Awaitable[T]]) -> T:
        try:
            return await asyncio.wait_for(operation(), timeout=self.config.io_timeout_seconds)
        except TimeoutError as e:
            raise PersistenceError(
                f"store call timed out after {self.config.io_timeout_seconds}s"
            ) from e

    async def _read(self, subject_id: str, what: str, operation: Callable[[], Awaitable[T]]) -> T:
        """Idempotent store read with timeout and bounded retries."""
        attempts = self.config.read_retry_attempts
        for attempt in range(1, attempts + 1):
            try:
                return await self._call(operation)
            except PersistenceError as e:
                error = e
            except Exception as e:
                error = PersistenceError(f"{what} failed: {e}")

            self.logger.warning(
                "store_read_failed",
                subject_id=subject_id,
                read=what,
                attempt=attempt,
                error=str(error),
            )
            if attempt == attempts:
                raise error
            await self._backoff(attempt - 1)

        raise PersistenceError(f"{what} was not attempted")

    async def _read_active_codes(self, subject_id: str) -> set[str]:
        return await self._read(
            subject_id,
            "active notification read",
            lambda: self.store.list_active_event_codes(subject_id),
        )

    async def _read_active_rows(self, subject_id: str, codes: set[str]) -> list[Notification]:
        rows = await self._read(
            subject_id,
            "notification listing",
            lambda: self.store.list_notifications(subject_id),
        )
        return [
            n
            for n in rows
            if n.type == NOTIFICATION_TYPE and n.status.is_active and n.event_code in codes
        ]

    async def _insert(self, drafts: list[NotificationDraft]) -> list[Notification]:
        try:
            return await self._call(lambda: self.store.insert_notifications(drafts))
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"notification insert failed: {e}") from e

    async def materialize(
        self, subject: Subject, candidates: list[ScheduledEvent]
    ) -> Result[MaterializationResult, PersistenceError]:
        """
        Persist candidates that have no active notification yet.

        Only codes already active at the first read, or claimed by a
        concurrent pass whose insert beat ours, count as skipped. Rows that
        landed from one of our own ambiguous inserts are reported as created.

        Returns:
            Result with the created rows and the number of candidates suppressed
            as duplicates, or the PersistenceError that aborted this subject.
        """
        log = self.logger.bind(subject_id=subject.id)

        # Collapse repeated event codes within this call
        unique: dict[str, ScheduledEvent] = {}
        for candidate in candidates:
            unique.setdefault(candidate.event.event_code, candidate)
        skipped = len(candidates) - len(unique)

        if not unique:
            return Result.ok(MaterializationResult(skipped=skipped))

        try:
            initial_active = await self._read_active_codes(subject.id)
        except PersistenceError as e:
            log.error("materialize_failed", stage="read", error=str(e))
            return Result.err(e)

        pending = {code: c for code, c in unique.items() if code not in initial_active}
        skipped += len(unique) - len(pending)

        created: list[Notification] = []
        attempt = 0
        # Set once an insert failed without a clean rejection: it may have committed
        maybe_landed = False
        while pending:
            drafts = [build_draft(subject, c, self.catalog_version) for c in pending.values()]
            try:
                created.extend(await self._insert(drafts))
                break
            except PersistenceError as e:
                attempt += 1
                duplicate = isinstance(e, DuplicateNotificationError)
                maybe_landed = maybe_landed or not duplicate
                log.warning(
                    "notification_insert_failed", attempt=attempt, duplicate=duplicate, error=str(e)
                )

                # The write may have landed or raced another pass: re-check first
                try:
                    active = await self._read_active_codes(subject.id)
                    now_active = {code for code in pending if code in active}
                    recovered = (
                        await self._read_active_rows(subject.id, now_active)
                        if now_active and maybe_landed
                        else []
                    )
                except PersistenceError as read_error:
                    log.error("materialize_failed", stage="recheck", error=str(read_error))
                    return Result.err(read_error)

                created.extend(recovered)
                skipped += len(now_active - {n.event_code for n in recovered})
                if recovered:
                    log.info("ambiguous_insert_recovered", count=len(recovered))
                pending = {code: c for code, c in pending.items() if code not in now_active}

                if pending and attempt >= self.config.write_retry_attempts:
                    log.error("materialize_failed", stage="write", error=str(e))
                    return Result.err(e)
                if pending:
                    await self._backoff(attempt - 1)

        if skipped:
            log.debug("duplicates_suppressed", count=skipped)
        log.info("notifications_materialized", created=len(created), skipped=skipped)
        return Result.ok(MaterializationResult(created=created, skipped=skipped))
