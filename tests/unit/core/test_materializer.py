"""
Tests for deduplication and persistence in `core/services/materializer.py`.

These tests drive the materializer against the in-memory store, with small
store subclasses that inject read failures, ambiguous writes, timeouts and
concurrent-pass races.
"""

import asyncio
from datetime import date, timedelta

import pytest

from core.config import EngineConfig
from core.domain.catalog import load_default_catalog
from core.domain.errors import PersistenceError
from core.domain.models import (
    CheckupContext,
    Gender,
    Notification,
    NotificationDraft,
    NotificationPriority,
    NotificationStatus,
    ScheduledEvent,
    Subject,
    VaccinationContext,
)
from core.services.materializer import Materializer, build_draft
from core.services.notification_store import InMemoryNotificationStore
from core.services.scheduler import plan_subject, schedule_event

TODAY = date(2026, 10, 18)
FAST = EngineConfig(retry_backoff_seconds=0, io_timeout_seconds=1.0)

INFANT = Subject(id="baby", name="이서준", birth_date=date(2026, 8, 18), gender=Gender.MALE)
INFANT_CODES = {"hepatitis_b_1st", "hepatitis_b_2nd", "dtap_2months"}


def _candidates(subject: Subject = INFANT) -> list[ScheduledEvent]:
    return plan_subject(subject, load_default_catalog(), TODAY)


def _candidate(subject: Subject, event_code: str) -> ScheduledEvent:
    event = load_default_catalog().get(event_code)
    assert event is not None
    scheduled = schedule_event(subject, event, TODAY)
    assert scheduled is not None
    return scheduled


class FailingReadStore(InMemoryNotificationStore):
    def __init__(self, failures: int, error: Exception | None = None) -> None:
        super().__init__()
        self.failures = failures
        self.error = error or PersistenceError("connection refused")
        self.read_calls = 0

    async def list_active_event_codes(self, subject_id: str, type: str = "lifecycle_event") -> set[str]:
        self.read_calls += 1
        if self.read_calls <= self.failures:
            raise self.error
        return await super().list_active_event_codes(subject_id, type)


class AmbiguousWriteStore(InMemoryNotificationStore):
    """The first insert lands but the caller only sees an error."""

    def __init__(self) -> None:
        super().__init__()
        self.insert_calls = 0

    async def insert_notifications(self, drafts: list[NotificationDraft]) -> list[Notification]:
        self.insert_calls += 1
        created = await super().insert_notifications(drafts)
        if self.insert_calls == 1:
            raise PersistenceError("connection reset after commit")
        return created


class SlowFirstWriteStore(InMemoryNotificationStore):
    def __init__(self) -> None:
        super().__init__()
        self.insert_calls = 0

    async def insert_notifications(self, drafts: list[NotificationDraft]) -> list[Notification]:
        self.insert_calls += 1
        if self.insert_calls == 1:
            await asyncio.sleep(5)
        return await super().insert_notifications(drafts)


class LateCommitStore(InMemoryNotificationStore):
    """The first insert commits in the background after the caller gave up waiting."""

    def __init__(self, commit_delay: float) -> None:
        super().__init__()
        self.commit_delay = commit_delay
        self.insert_calls = 0
        self.background: asyncio.Task[list[Notification]] | None = None

    async def _commit_later(self, drafts: list[NotificationDraft]) -> list[Notification]:
        await asyncio.sleep(self.commit_delay)
        return await super().insert_notifications(drafts)

    async def insert_notifications(self, drafts: list[NotificationDraft]) -> list[Notification]:
        self.insert_calls += 1
        if self.insert_calls == 1:
            self.background = asyncio.create_task(self._commit_later(drafts))
            await asyncio.sleep(5)
        return await super().insert_notifications(drafts)


class BrokenWriteStore(InMemoryNotificationStore):
    def __init__(self) -> None:
        super().__init__()
        self.insert_calls = 0

    async def insert_notifications(self, drafts: list[NotificationDraft]) -> list[Notification]:
        self.insert_calls += 1
        raise RuntimeError("disk full")


class RacingStore(InMemoryNotificationStore):
    """Another pass inserts ``race_code`` between our read and our write."""

    def __init__(self, competitor: NotificationDraft) -> None:
        super().__init__()
        self.competitor = competitor
        self.raced = False

    async def insert_notifications(self, drafts: list[NotificationDraft]) -> list[Notification]:
        if not self.raced:
            self.raced = True
            await super().insert_notifications([self.competitor])
        return await super().insert_notifications(drafts)


class TestDrafts:
    def test_title_message_and_context(self) -> None:
        subject = Subject(id="s1", name="홍길동", birth_date=date(1961, 10, 18))
        candidate = _candidate(subject, "pneumococcal_65years")
        event = candidate.event

        draft = build_draft(subject, candidate, catalog_version="2024.1")

        assert draft.title == f"홍길동님의 {event.event_name}"
        assert draft.message == event.description
        assert draft.type == "lifecycle_event"
        assert draft.status == NotificationStatus.PENDING
        assert draft.channel == "in_app"
        assert draft.priority == NotificationPriority.HIGH
        assert draft.scheduled_at == TODAY
        assert isinstance(draft.context_data, VaccinationContext)
        assert draft.context_data.event_code == "pneumococcal_65years"
        assert draft.context_data.member_name == "홍길동"
        assert draft.context_data.days_until == 0
        assert draft.context_data.catalog_version == "2024.1"
        assert draft.context_data.remind_on == TODAY - timedelta(
            days=event.notification_lead_days
        )

    def test_checkup_context_is_tagged(self) -> None:
        subject = Subject(id="s2", name="박지현", birth_date=date(1985, 8, 18), gender=Gender.FEMALE)
        draft = build_draft(subject, _candidate(subject, "national_checkup_40years"), "v")

        assert isinstance(draft.context_data, CheckupContext)
        assert draft.context_data.event_type == "health_checkup"
        assert draft.event_code == "national_checkup_40years"


class TestMaterialize:
    @pytest.mark.asyncio
    async def test_first_pass_creates_every_candidate(self) -> None:
        store = InMemoryNotificationStore()
        result = await Materializer(store, FAST).materialize(INFANT, _candidates())

        assert result.is_ok()
        materialized = result.unwrap()
        assert {n.event_code for n in materialized.created} == INFANT_CODES
        assert materialized.skipped == 0
        assert await store.list_active_event_codes("baby") == INFANT_CODES

    @pytest.mark.asyncio
    async def test_second_pass_is_idempotent(self) -> None:
        store = InMemoryNotificationStore()
        materializer = Materializer(store, FAST)

        await materializer.materialize(INFANT, _candidates())
        second = (await materializer.materialize(INFANT, _candidates())).unwrap()

        assert second.created == []
        assert second.skipped == len(INFANT_CODES)
        assert len(await store.list_notifications("baby")) == len(INFANT_CODES)

    @pytest.mark.asyncio
    async def test_resolved_notification_can_recur(self) -> None:
        subject = Subject(id="elder", name="김순자", birth_date=date(1950, 3, 1))
        candidate = _candidate(subject, "flu_annual")
        store = InMemoryNotificationStore()
        materializer = Materializer(store, FAST)

        first = (await materializer.materialize(subject, [candidate])).unwrap()
        await store.update_status(first.created[0].id, NotificationStatus.CONFIRMED)
        second = (await materializer.materialize(subject, [candidate])).unwrap()

        assert len(second.created) == 1
        statuses = [n.status for n in await store.list_notifications("elder")]
        assert statuses == [NotificationStatus.CONFIRMED, NotificationStatus.PENDING]

    @pytest.mark.asyncio
    async def test_repeated_codes_in_one_call_are_collapsed(self) -> None:
        candidate = _candidate(INFANT, "dtap_2months")
        store = InMemoryNotificationStore()

        result = (await Materializer(store, FAST).materialize(INFANT, [candidate, candidate])).unwrap()

        assert len(result.created) == 1
        assert result.skipped == 1

    @pytest.mark.asyncio
    async def test_no_candidates_touches_nothing(self) -> None:
        store = FailingReadStore(failures=99)
        result = (await Materializer(store, FAST).materialize(INFANT, [])).unwrap()

        assert result.created == []
        assert store.read_calls == 0


class TestResilience:
    @pytest.mark.asyncio
    async def test_transient_read_failure_is_retried(self) -> None:
        store = FailingReadStore(failures=2)
        result = await Materializer(store, FAST).materialize(INFANT, _candidates())

        assert result.is_ok()
        assert store.read_calls == 3
        assert len(result.unwrap().created) == len(INFANT_CODES)

    @pytest.mark.asyncio
    async def test_persistent_read_failure_aborts_without_writes(self) -> None:
        store = FailingReadStore(failures=99, error=RuntimeError("socket closed"))
        result = await Materializer(store, FAST).materialize(INFANT, _candidates())

        assert result.is_err()
        assert isinstance(result.unwrap_err(), PersistenceError)
        assert store.read_calls == FAST.read_retry_attempts
        assert await store.list_notifications("baby") == []

    @pytest.mark.asyncio
    async def test_ambiguous_write_is_not_duplicated(self) -> None:
        store = AmbiguousWriteStore()
        result = await Materializer(store, FAST).materialize(INFANT, _candidates())

        assert result.is_ok()
        materialized = result.unwrap()
        assert {n.event_code for n in materialized.created} == INFANT_CODES
        assert materialized.skipped == 0
        assert store.insert_calls == 1
        assert len(await store.list_notifications("baby")) == len(INFANT_CODES)

    @pytest.mark.asyncio
    async def test_timed_out_write_is_retried(self) -> None:
        store = SlowFirstWriteStore()
        config = EngineConfig(retry_backoff_seconds=0, io_timeout_seconds=0.05)

        result = await Materializer(store, config).materialize(INFANT, _candidates())

        assert result.is_ok()
        assert store.insert_calls == 2
        assert len(await store.list_notifications("baby")) == len(INFANT_CODES)

    @pytest.mark.asyncio
    async def test_late_commit_after_timeout_counts_as_created(self) -> None:
        store = LateCommitStore(commit_delay=0.1)
        config = EngineConfig(io_timeout_seconds=0.05, retry_backoff_seconds=0.3)

        result = await Materializer(store, config).materialize(INFANT, _candidates())

        assert store.background is not None
        await store.background
        materialized = result.unwrap()
        # The retry hit the rows committed late and must not double count them
        assert store.insert_calls == 2
        assert {n.event_code for n in materialized.created} == INFANT_CODES
        assert materialized.skipped == 0
        assert len(await store.list_notifications("baby")) == len(INFANT_CODES)

    @pytest.mark.asyncio
    async def test_ambiguous_write_keeps_preexisting_codes_skipped(self) -> None:
        store = AmbiguousWriteStore()
        existing = build_draft(INFANT, _candidate(INFANT, "hepatitis_b_1st"), "2024.1")
        await InMemoryNotificationStore.insert_notifications(store, [existing])

        result = (await Materializer(store, FAST).materialize(INFANT, _candidates())).unwrap()

        assert {n.event_code for n in result.created} == INFANT_CODES - {"hepatitis_b_1st"}
        assert result.skipped == 1

    @pytest.mark.asyncio
    async def test_persistent_write_failure_reports_error(self) -> None:
        store = BrokenWriteStore()
        result = await Materializer(store, FAST).materialize(INFANT, _candidates())

        assert result.is_err()
        assert "disk full" in str(result.unwrap_err())
        assert store.insert_calls == FAST.write_retry_attempts

    @pytest.mark.asyncio
    async def test_concurrent_pass_race_is_absorbed(self) -> None:
        competitor = build_draft(INFANT, _candidate(INFANT, "dtap_2months"), "other-pass")
        store = RacingStore(competitor)

        result = (await Materializer(store, FAST).materialize(INFANT, _candidates())).unwrap()

        assert {n.event_code for n in result.created} == INFANT_CODES - {"dtap_2months"}
        assert result.skipped == 1
        active = [n for n in await store.list_notifications("baby") if n.status.is_active]
        assert sorted(n.event_code for n in active) == sorted(INFANT_CODES)
