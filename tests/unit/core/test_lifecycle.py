"""
Tests for the age/stage calculator in `core/domain/lifecycle.py`.

Covers:
- Calendar borrow across every month length (28/29/30/31 days)
- Leap-day birthdays in non-leap years
- Stage boundaries and the next-stage date
- Property: age components always recombine to the reference date
"""

from datetime import date, timedelta

import pytest
from dateutil.relativedelta import relativedelta
from hypothesis import given
from hypothesis import strategies as st

from core.domain.errors import InvalidInputError
from core.domain.lifecycle import calculate_age, classify_stage, shift_date, stage_for_years
from core.domain.models import LifecycleStage


def _ymd(birth: date, today: date) -> tuple[int, int, int]:
    age = calculate_age(birth, today)
    return age.years, age.months, age.days


class TestCalculateAge:
    def test_same_day_is_zero(self) -> None:
        age = calculate_age(date(2024, 5, 1), date(2024, 5, 1))
        assert (age.years, age.months, age.days, age.total_days, age.total_months) == (
            0,
            0,
            0,
            0,
            0,
        )

    def test_simple_borrow_uses_preceding_month_length(self) -> None:
        # Feb 2023 has 28 days: 28 - 15 + 10
        assert _ymd(date(2023, 1, 15), date(2023, 3, 10)) == (0, 1, 23)

    def test_borrow_from_thirty_day_month(self) -> None:
        # April has 30 days: 30 - 20 + 5
        assert _ymd(date(2023, 4, 20), date(2023, 5, 5)) == (0, 0, 15)

    def test_borrow_from_thirty_one_day_month(self) -> None:
        assert _ymd(date(2023, 3, 20), date(2023, 4, 5)) == (0, 0, 16)

    def test_borrow_from_leap_february(self) -> None:
        # Feb 2024 has 29 days: 29 - 15 + 10
        assert _ymd(date(2024, 1, 15), date(2024, 3, 10)) == (0, 1, 24)

    @pytest.mark.parametrize(
        ("birth", "today", "expected"),
        [
            (date(2023, 1, 31), date(2023, 2, 28), (0, 1, 0)),
            (date(2024, 1, 31), date(2024, 2, 29), (0, 1, 0)),
            (date(2024, 1, 31), date(2024, 2, 28), (0, 0, 28)),
            (date(2023, 1, 31), date(2023, 3, 1), (0, 1, 1)),
            (date(2024, 1, 31), date(2024, 3, 1), (0, 1, 1)),
            (date(2023, 3, 31), date(2023, 4, 30), (0, 1, 0)),
            (date(2023, 3, 31), date(2023, 4, 29), (0, 0, 29)),
            (date(2023, 5, 31), date(2023, 7, 1), (0, 1, 1)),
        ],
    )
    def test_end_of_month_birthdays(
        self, birth: date, today: date, expected: tuple[int, int, int]
    ) -> None:
        assert _ymd(birth, today) == expected

    @pytest.mark.parametrize(
        ("today", "expected"),
        [
            (date(2021, 2, 27), (0, 11, 29)),
            (date(2021, 2, 28), (1, 0, 0)),
            (date(2021, 3, 1), (1, 0, 1)),
            (date(2024, 2, 28), (3, 11, 30)),
            (date(2024, 2, 29), (4, 0, 0)),
        ],
    )
    def test_leap_day_birthday_observed_on_feb_28(
        self, today: date, expected: tuple[int, int, int]
    ) -> None:
        assert _ymd(date(2020, 2, 29), today) == expected

    def test_year_borrow(self) -> None:
        assert _ymd(date(1990, 11, 20), date(2026, 10, 18)) == (35, 10, 28)

    def test_total_days_is_elapsed_days(self) -> None:
        birth, today = date(2000, 1, 1), date(2026, 10, 18)
        assert calculate_age(birth, today).total_days == (today - birth).days

    def test_reference_before_birth_is_invalid_input(self) -> None:
        with pytest.raises(InvalidInputError):
            calculate_age(date(2024, 5, 2), date(2024, 5, 1))

    @given(
        birth=st.dates(min_value=date(1900, 1, 1), max_value=date(2100, 12, 31)),
        elapsed=st.integers(min_value=0, max_value=45_000),
    )
    def test_components_recombine_to_reference_date(self, birth: date, elapsed: int) -> None:
        """Property-based test: birth + years/months + days lands exactly on today."""
        today = birth + timedelta(days=elapsed)
        age = calculate_age(birth, today)

        assert age.total_months == age.years * 12 + age.months
        assert 0 <= age.months <= 11
        assert 0 <= age.days <= 30
        assert birth + relativedelta(years=age.years, months=age.months) + timedelta(
            days=age.days
        ) == today


class TestStages:
    @pytest.mark.parametrize(
        ("years", "stage"),
        [
            (0, LifecycleStage.INFANT),
            (6, LifecycleStage.INFANT),
            (7, LifecycleStage.ADOLESCENT),
            (18, LifecycleStage.ADOLESCENT),
            (19, LifecycleStage.ADULT),
            (64, LifecycleStage.ADULT),
            (65, LifecycleStage.ELDERLY),
            (120, LifecycleStage.ELDERLY),
        ],
    )
    def test_stage_is_a_pure_function_of_years(self, years: int, stage: LifecycleStage) -> None:
        assert stage_for_years(years) == stage

    def test_negative_years_rejected(self) -> None:
        with pytest.raises(InvalidInputError):
            stage_for_years(-1)

    def test_stage_changes_on_the_birthday(self) -> None:
        birth = date(2000, 6, 15)
        assert classify_stage(birth, date(2019, 6, 14)).stage == LifecycleStage.ADOLESCENT
        assert classify_stage(birth, date(2019, 6, 15)).stage == LifecycleStage.ADULT

    def test_next_stage_date_for_leap_day_birth(self) -> None:
        today = date(2026, 10, 18)
        info = classify_stage(date(2020, 2, 29), today)

        assert info.stage == LifecycleStage.INFANT
        assert info.next_stage is not None
        assert info.next_stage.stage == LifecycleStage.ADOLESCENT
        assert info.next_stage.starts_on == date(2027, 2, 28)
        assert info.next_stage.days_remaining == (date(2027, 2, 28) - today).days

    def test_elderly_has_no_next_stage(self) -> None:
        info = classify_stage(date(1950, 1, 1), date(2026, 10, 18))
        assert info.stage == LifecycleStage.ELDERLY
        assert info.next_stage is None

    def test_shift_date_clamps_to_month_end(self) -> None:
        assert shift_date(date(2024, 1, 31), months=1) == date(2024, 2, 29)
        assert shift_date(date(2020, 2, 29), years=1) == date(2021, 2, 28)
        assert shift_date(date(1961, 10, 18), years=65) == date(2026, 10, 18)
