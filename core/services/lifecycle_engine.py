"""
Lifecycle notification engine: the per-subject pass and the batch runner.

Pipeline per subject:
1. Fetch the subject from the profile directory
2. Classify life stage and match catalog events (pure computation)
3. Schedule each match: due date, days until due, priority
4. Deduplicate against active notifications and bulk-insert the rest

Subjects share no mutable state, so a batch runs them concurrently (bounded
by configuration) and isolates every failure to the subject that caused it.
Stopping a batch is safe between subjects.
"""

import asyncio
from datetime import UTC, date, datetime

import structlog

from core.config import AppConfig, get_config
from core.domain.catalog import EventCatalog, load_default_catalog
from core.domain.errors import InvalidInputError
from core.domain.models import BatchSummary, Subject, SubjectOutcome
from core.services.materializer import Materializer
from core.services.notification_store import NotificationStore, SubjectDirectory
from core.services.scheduler import plan_subject

logger = structlog.get_logger(__name__)


class LifecycleNotificationEngine:
    """
    Orchestrates scheduling passes over one subject or a whole population.

    Design principles:
    - Stateless passes (safe to re-run; materialization is idempotent)
    - Graceful degradation (one subject's failure never aborts a batch)
    - Observable (structured logging per subject and per batch)
    """

    def __init__(
        self,
        directory: SubjectDirectory,
        store: NotificationStore,
        catalog: EventCatalog | None = None,
        config: AppConfig | None = None,
    ) -> None:
        self.config = config or get_config()
        self.directory = directory
        self.catalog = catalog or load_default_catalog()
        self.materializer = Materializer(
            store, self.config.engine, catalog_version=self.catalog.version
        )
        self.logger = logger.bind(component="lifecycle_engine")
        self._stop_requested = False

    def request_stop(self) -> None:
        """Stop the running (or next) batch after the subjects already in progress."""
        self._stop_requested = True
        self.logger.info("batch_stop_requested")

    async def refresh(self, subject: Subject, today: date | None = None) -> SubjectOutcome:
        """Run one scheduling pass for an already-loaded subject."""
        today = today or date.today()
        log = self.logger.bind(subject_id=subject.id)

        if subject.birth_date is None:
            log.warning("subject_invalid_input", reason="missing_birth_date")
            return SubjectOutcome(
                subject_id=subject.id, status="invalid_input", error="missing birth date"
            )
        if subject.birth_date > today:
            log.warning("subject_invalid_input", reason="birth_date_in_future")
            return SubjectOutcome(
                subject_id=subject.id, status="invalid_input", error="birth date is in the future"
            )

        try:
            candidates = plan_subject(subject, self.catalog, today, self.config.scheduling)
            result = await self.materializer.materialize(subject, candidates)
        except Exception as e:
            log.exception("subject_pass_crashed", error=str(e))
            return SubjectOutcome(subject_id=subject.id, status="failed", error=str(e))

        if result.is_err():
            return SubjectOutcome(
                subject_id=subject.id, status="failed", error=str(result.unwrap_err())
            )

        materialized = result.unwrap()
        return SubjectOutcome(
            subject_id=subject.id,
            created=len(materialized.created),
            skipped=materialized.skipped,
            notifications=materialized.created,
        )

    async def refresh_subject(self, subject_id: str, today: date | None = None) -> SubjectOutcome:
        """On-demand pass ("refresh my schedule") for one subject id. Never raises."""
        try:
            subject = await asyncio.wait_for(
                self.directory.get_subject(subject_id),
                timeout=self.config.engine.io_timeout_seconds,
            )
        except InvalidInputError as e:
            self.logger.warning("subject_invalid_input", subject_id=subject_id, reason=str(e))
            return SubjectOutcome(subject_id=subject_id, status="invalid_input", error=str(e))
        except Exception as e:
            self.logger.error("subject_fetch_failed", subject_id=subject_id, error=str(e))
            return SubjectOutcome(subject_id=subject_id, status="failed", error=str(e))

        return await self.refresh(subject, today)

    async def run_batch(
        self, subject_ids: list[str] | None = None, today: date | None = None
    ) -> BatchSummary:
        """
        Run a pass for every subject (default: all with a birth date on file).

        Key pattern: TaskGroup for structured concurrency, a semaphore to bound
        how many subjects hit the store at once.
        """
        today = today or date.today()
        summary = BatchSummary()
        try:
            return await self._run_batch(summary, subject_ids, today)
        finally:
            # A stop applies to one batch; the next run starts fresh
            self._stop_requested = False

    async def _run_batch(
        self, summary: BatchSummary, subject_ids: list[str] | None, today: date
    ) -> BatchSummary:
        if subject_ids is None:
            try:
                subject_ids = await self.directory.list_subject_ids(with_birth_date=True)
            except Exception as e:
                self.logger.error("batch_subject_listing_failed", error=str(e))
                summary.finished_at = datetime.now(UTC)
                return summary

        self.logger.info("batch_started", subjects=len(subject_ids), today=today.isoformat())
        semaphore = asyncio.Semaphore(self.config.engine.max_concurrent_subjects)

        async def _run_one(subject_id: str) -> None:
            async with semaphore:
                # Checkpoint: one subject is the unit of cancellation
                if self._stop_requested:
                    summary.not_started.append(subject_id)
                    return
                summary.outcomes.append(await self.refresh_subject(subject_id, today))

        async with asyncio.TaskGroup() as task_group:
            for subject_id in subject_ids:
                task_group.create_task(_run_one(subject_id), name=f"subject:{subject_id}")

        summary.finished_at = datetime.now(UTC)
        self.logger.info(
            "batch_completed",
            subjects=len(subject_ids),
            created=summary.created,
            skipped=summary.skipped,
            failed=summary.failed,
            invalid=summary.invalid,
            not_started=len(summary.not_started),
            duration_seconds=round((summary.finished_at - summary.started_at).total_seconds(), 3),
        )
        return summary
