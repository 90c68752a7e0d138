"""
Age and life-stage calculation.

Pure functions only: birth date + reference date in, calendar-correct age and
life stage out. Ages are computed by calendar borrowing, never by dividing a
day count, so they do not drift across month lengths or leap years.

End-of-month policy: an anniversary that falls on a day the target month
does not have is clamped to that month's last day. A Feb 29 birthday is
therefore observed on Feb 28 in non-leap years, and Jan 31 + 1 month is
Feb 28/29. ``shift_date`` (used for due dates) follows the same rule, so an
event due "at N months" is due on exactly the day ``total_months`` reaches N.
"""

import calendar
from datetime import date

from dateutil.relativedelta import relativedelta

from core.domain.errors import InvalidInputError
from core.domain.models import AgeBreakdown, LifecycleStage, NextStage, StageInfo

# Lower bound (inclusive) in whole years of each stage; upper bound is the next entry.
STAGE_LOWER_BOUNDS: tuple[tuple[LifecycleStage, int], ...] = (
    (LifecycleStage.INFANT, 0),
    (LifecycleStage.ADOLESCENT, 7),
    (LifecycleStage.ADULT, 19),
    (LifecycleStage.ELDERLY, 65),
)


def _days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def shift_date(base: date, *, years: int = 0, months: int = 0) -> date:
    """Shift by calendar years/months, clamping to the end of short months."""
    return base + relativedelta(years=years, months=months)


def calculate_age(birth_date: date, today: date) -> AgeBreakdown:
    """
    Calendar-correct age of someone born on ``birth_date`` as of ``today``.

    Raises:
        InvalidInputError: ``today`` is before ``birth_date``.
    """
    if today < birth_date:
        raise InvalidInputError(f"reference date {today} is before birth date {birth_date}")

    years = today.year - birth_date.year
    months = today.month - birth_date.month

    anniversary_day = min(birth_date.day, _days_in_month(today.year, today.month))
    days = today.day - anniversary_day

    if days < 0:
        # Borrow the month preceding today
        months -= 1
        prev_year, prev_month = (today.year, today.month - 1) if today.month > 1 else (today.year - 1, 12)
        prev_length = _days_in_month(prev_year, prev_month)
        days = prev_length - min(birth_date.day, prev_length) + today.day

    if months < 0:
        months += 12
        years -= 1

    return AgeBreakdown(
        years=years,
        months=months,
        days=days,
        total_days=(today - birth_date).days,
        total_months=years * 12 + months,
    )


def stage_for_years(years: int) -> LifecycleStage:
    """Exactly one stage matches any non-negative age in whole years."""
    if years < 0:
        raise InvalidInputError(f"age cannot be negative: {years}")

    current = STAGE_LOWER_BOUNDS[0][0]
    for stage, lower_bound in STAGE_LOWER_BOUNDS:
        if years >= lower_bound:
            current = stage
    return current


def _next_stage(stage: LifecycleStage, birth_date: date, today: date) -> NextStage | None:
    stages = [s for s, _ in STAGE_LOWER_BOUNDS]
    index = stages.index(stage)
    if index + 1 >= len(STAGE_LOWER_BOUNDS):
        return None

    next_stage, lower_bound = STAGE_LOWER_BOUNDS[index + 1]
    starts_on = shift_date(birth_date, years=lower_bound)
    return NextStage(
        stage=next_stage,
        starts_on=starts_on,
        days_remaining=max(0, (starts_on - today).days),
    )


def classify_stage(birth_date: date, today: date) -> StageInfo:
    """Life stage, age breakdown and the date the next stage begins."""
    age = calculate_age(birth_date, today)
    stage = stage_for_years(age.years)
    return StageInfo(stage=stage, age=age, next_stage=_next_stage(stage, birth_date, today))
