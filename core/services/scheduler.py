"""
Matching and scheduling of catalog events for a single subject.

Everything in this module is pure in-memory computation:
Calculator -> Matcher -> Scheduler. No I/O, no shared state, safe to run for
many subjects concurrently.
"""

from datetime import date

import structlog

from core.domain.catalog import EventCatalog
from core.domain.errors import InvalidInputError
from core.domain.lifecycle import calculate_age, classify_stage, shift_date
from core.domain.models import EventDefinition, NotificationPriority, ScheduledEvent, Subject
from core.domain.policy import SchedulingPolicy

logger = structlog.get_logger(__name__)


def priority_for(
    days_until: int | None, policy: SchedulingPolicy | None = None
) -> NotificationPriority:
    """Bucket an event by how soon it is due. Overdue events are urgent."""
    policy = policy or SchedulingPolicy()

    if days_until is None:
        return NotificationPriority.LOW
    if days_until < 0:
        return NotificationPriority.URGENT
    if days_until <= policy.high_priority_days:
        return NotificationPriority.HIGH
    if days_until <= policy.normal_priority_days:
        return NotificationPriority.NORMAL
    return NotificationPriority.LOW


def due_date(birth_date: date, event: EventDefinition) -> date | None:
    """Birth date shifted by the event's target age, or None when it has none."""
    if event.target_age_months is not None:
        return shift_date(birth_date, months=event.target_age_months)
    if event.target_age_years is not None:
        return shift_date(birth_date, years=event.target_age_years)
    return None


def is_applicable(
    event: EventDefinition, age_months: int, age_years: int, policy: SchedulingPolicy
) -> bool:
    """
    Age gate for a single event.

    Month-targeted events are one-time: offered from the due age until the
    grace window closes, then never again. Year-targeted events have no
    cutoff and may recur once the previous instance is resolved.
    """
    if event.target_age_months is not None:
        if age_months < event.target_age_months:
            return False
        return age_months <= event.target_age_months + policy.grace_months

    if event.target_age_years is not None:
        return age_years >= event.target_age_years

    return True


def schedule_event(
    subject: Subject,
    event: EventDefinition,
    today: date,
    policy: SchedulingPolicy | None = None,
) -> ScheduledEvent | None:
    """
    Compute due date, days until due and priority for one event.

    Returns None when the event does not currently apply. A subject without a
    birth date is a caller precondition violation: it is logged and yields
    None rather than raising into a batch loop.
    """
    policy = policy or SchedulingPolicy()
    log = logger.bind(subject_id=subject.id, event_code=event.event_code)

    if subject.birth_date is None:
        log.warning("schedule_precondition_violated", reason="missing_birth_date")
        return None

    try:
        age = calculate_age(subject.birth_date, today)
    except InvalidInputError as e:
        log.warning("schedule_precondition_violated", reason=str(e))
        return None

    if not is_applicable(event, age.total_months, age.years, policy):
        return None

    scheduled_at = due_date(subject.birth_date, event)
    days_until = (scheduled_at - today).days if scheduled_at is not None else None

    return ScheduledEvent(
        event=event,
        scheduled_at=scheduled_at,
        days_until=days_until,
        priority=priority_for(days_until, policy),
    )


def plan_subject(
    subject: Subject,
    catalog: EventCatalog,
    today: date,
    policy: SchedulingPolicy | None = None,
) -> list[ScheduledEvent]:
    """Match the subject's current stage against the catalog and schedule each hit."""
    log = logger.bind(subject_id=subject.id)

    if subject.birth_date is None:
        log.warning("subject_skipped", reason="missing_birth_date")
        return []

    try:
        stage_info = classify_stage(subject.birth_date, today)
    except InvalidInputError as e:
        log.warning("subject_skipped", reason=str(e))
        return []

    matched = catalog.events_for_stage(stage_info.stage, subject.gender)

    planned: list[ScheduledEvent] = []
    for event in matched:
        scheduled = schedule_event(subject, event, today, policy)
        if scheduled is not None:
            planned.append(scheduled)

    log.debug(
        "subject_planned",
        stage=stage_info.stage.value,
        age_years=stage_info.age.years,
        age_months=stage_info.age.total_months,
        matched=len(matched),
        planned=len(planned),
    )
    return planned
