"""Named scheduling thresholds: the grace window and the priority buckets."""

from pydantic import BaseModel, Field, model_validator

# Months past a one-time event's due age during which it is still offered.
DEFAULT_GRACE_MONTHS = 3
# Upper bounds (inclusive, in days until due) of the high and normal priority buckets.
DEFAULT_HIGH_PRIORITY_DAYS = 7
DEFAULT_NORMAL_PRIORITY_DAYS = 30


class SchedulingPolicy(BaseModel):
    """Tunable thresholds for the applicability gate and priority buckets."""

    grace_months: int = Field(
        default=DEFAULT_GRACE_MONTHS,
        ge=0,
        description="Months after a month-targeted event's due age before it is skipped for good",
    )
    high_priority_days: int = Field(
        default=DEFAULT_HIGH_PRIORITY_DAYS,
        ge=0,
        description="Events due within this many days are high priority",
    )
    normal_priority_days: int = Field(
        default=DEFAULT_NORMAL_PRIORITY_DAYS,
        gt=0,
        description="Events due within this many days are normal priority",
    )

    @model_validator(mode="after")
    def thresholds_are_ordered(self) -> "SchedulingPolicy":
        if self.high_priority_days >= self.normal_priority_days:
            raise ValueError("high_priority_days must be smaller than normal_priority_days")
        return self
