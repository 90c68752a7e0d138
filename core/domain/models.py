"""
Domain models for lifecycle health-event scheduling.

These models represent the core business concepts and are framework-agnostic.
They use Pydantic for validation but could be swapped to dataclasses if needed.
"""

from datetime import UTC, date, datetime
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from core.domain.errors import InvalidInputError

NOTIFICATION_TYPE = "lifecycle_event"


class LifecycleStage(str, Enum):
    """Coarse age bands, ordered youngest first."""

    INFANT = "infant"
    ADOLESCENT = "adolescent"
    ADULT = "adult"
    ELDERLY = "elderly"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class TargetGender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    BOTH = "both"


class EventType(str, Enum):
    VACCINATION = "vaccination"
    HEALTH_CHECKUP = "health_checkup"


class NotificationPriority(str, Enum):
    URGENT = "urgent"
    HIGH = "high"
    NORMAL = "normal"
    LOW = "low"


class NotificationStatus(str, Enum):
    """Lifecycle of a materialized notification.

    Only ``pending`` and ``sent`` count as active; every other status is
    terminal and set by the delivery subsystem, never by this engine.
    """

    PENDING = "pending"
    SENT = "sent"
    DISMISSED = "dismissed"
    CONFIRMED = "confirmed"
    MISSED = "missed"
    CANCELLED = "cancelled"

    @property
    def is_active(self) -> bool:
        return self in ACTIVE_STATUSES


ACTIVE_STATUSES = frozenset({NotificationStatus.PENDING, NotificationStatus.SENT})


class AgeBreakdown(BaseModel):
    """Calendar-correct age at a reference date."""

    model_config = ConfigDict(frozen=True)

    years: int = Field(ge=0)
    months: int = Field(ge=0, le=11)
    days: int = Field(ge=0, le=30)
    total_days: int = Field(ge=0, description="Elapsed days, for reporting only")
    total_months: int = Field(ge=0)


class NextStage(BaseModel):
    model_config = ConfigDict(frozen=True)

    stage: LifecycleStage
    starts_on: date
    days_remaining: int = Field(ge=0)


class StageInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    stage: LifecycleStage
    age: AgeBreakdown
    next_stage: NextStage | None = None


class Subject(BaseModel):
    """A person whose schedule is computed. Owned by the profile subsystem."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    birth_date: date | None = None
    gender: Gender | None = None
    relation: str = "self"

    @field_validator("gender", mode="before")
    @classmethod
    def _normalize_gender(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().lower()
            return v if v in {g.value for g in Gender} else None
        return v

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Subject":
        """Build a subject from a raw profile record.

        Raises:
            InvalidInputError: the birth date is present but cannot be parsed.
        """
        raw_birth = record.get("birth_date")
        try:
            birth_date = parse_birth_date(raw_birth) if raw_birth not in (None, "") else None
        except ValueError as e:
            raise InvalidInputError(
                f"unparseable birth date {raw_birth!r} for subject {record.get('id')}"
            ) from e

        return cls(
            id=str(record["id"]),
            name=record.get("name") or "본인",
            birth_date=birth_date,
            gender=record.get("gender"),
            relation=record.get("relation") or "self",
        )


def parse_birth_date(value: str | date | datetime) -> date:
    """Accept ISO strings, dates and datetimes; return a plain date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        # Timestamps like 1990-05-01T00:00:00Z keep only the date part
        return date.fromisoformat(text[:10])
    raise ValueError(f"unsupported birth date type: {type(value).__name__}")


class EventDefinition(BaseModel):
    """One catalog row: a one-time or recurring health milestone."""

    model_config = ConfigDict(frozen=True)

    event_code: str = Field(min_length=1)
    event_name: str = Field(min_length=1)
    event_type: EventType
    category: str
    target_age_years: int | None = Field(default=None, ge=0)
    target_age_months: int | None = Field(default=None, ge=0)
    target_gender: TargetGender = TargetGender.BOTH
    applicable_stages: frozenset[LifecycleStage] = Field(min_length=1)
    notification_lead_days: int = Field(default=7, ge=0)
    description: str
    importance: Literal["high", "medium", "low"] = "medium"
    has_professional_info: bool = False
    requires_user_choice: bool = False

    def applies_to_gender(self, gender: Gender | None) -> bool:
        # Unknown gender does not suppress gender-specific events
        if gender is None or self.target_gender == TargetGender.BOTH:
            return True
        return self.target_gender.value == gender.value


class ScheduledEvent(BaseModel):
    """A catalog event that currently applies to a subject."""

    model_config = ConfigDict(frozen=True)

    event: EventDefinition
    scheduled_at: date | None
    days_until: int | None
    priority: NotificationPriority


class _EventContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    event_code: str
    event_name: str
    member_name: str
    days_until: int | None
    remind_on: date | None = None
    catalog_version: str
    importance: Literal["high", "medium", "low"]
    has_professional_info: bool = False
    requires_user_choice: bool = False


class VaccinationContext(_EventContext):
    event_type: Literal["vaccination"] = "vaccination"


class CheckupContext(_EventContext):
    event_type: Literal["health_checkup"] = "health_checkup"


NotificationContext = Annotated[
    VaccinationContext | CheckupContext, Field(discriminator="event_type")
]


class NotificationDraft(BaseModel):
    """A notification row ready to be inserted."""

    model_config = ConfigDict(frozen=True)

    subject_id: str
    type: Literal["lifecycle_event"] = NOTIFICATION_TYPE
    category: str
    title: str
    message: str
    priority: NotificationPriority
    status: NotificationStatus = NotificationStatus.PENDING
    channel: str = "in_app"
    scheduled_at: date | None = None
    context_data: NotificationContext

    @property
    def event_code(self) -> str:
        return self.context_data.event_code


class Notification(NotificationDraft):
    """A persisted notification. Status is mutated externally after insert."""

    id: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class MaterializationResult(BaseModel):
    created: list[Notification] = Field(default_factory=list)
    skipped: int = Field(default=0, ge=0, description="Suppressed by an active duplicate")


class SubjectOutcome(BaseModel):
    """Per-subject tally reported by a scheduling pass."""

    subject_id: str
    status: Literal["ok", "invalid_input", "failed"] = "ok"
    created: int = 0
    skipped: int = 0
    error: str | None = None
    notifications: list[Notification] = Field(default_factory=list)

    @property
    def failed(self) -> bool:
        return self.status == "failed"


class BatchSummary(BaseModel):
    outcomes: list[SubjectOutcome] = Field(default_factory=list)
    not_started: list[str] = Field(default_factory=list)
    started_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    finished_at: datetime | None = None

    @computed_field(return_type=int)
    def created(self) -> int:
        return sum(o.created for o in self.outcomes)

    @computed_field(return_type=int)
    def skipped(self) -> int:
        return sum(o.skipped for o in self.outcomes)

    @computed_field(return_type=int)
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.status == "failed")

    @computed_field(return_type=int)
    def invalid(self) -> int:
        return sum(1 for o in self.outcomes if o.status == "invalid_input")
