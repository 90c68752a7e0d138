"""Tests for the explicit success/failure container in `core/domain/result.py`."""

import pytest

from core.domain.errors import PersistenceError
from core.domain.result import Result


def test_ok_result_unwraps_value() -> None:
    result: Result[int, PersistenceError] = Result.ok(0)

    assert result.is_ok()
    assert not result.is_err()
    assert result.unwrap() == 0


def test_err_result_reraises_stored_error() -> None:
    error = PersistenceError("store unavailable")
    result: Result[int, PersistenceError] = Result.err(error)

    assert result.is_err()
    assert result.unwrap_err() is error
    with pytest.raises(PersistenceError, match="store unavailable"):
        result.unwrap()


def test_err_requires_an_exception() -> None:
    with pytest.raises(ValueError):
        Result.err(None)  # type: ignore[arg-type]


def test_unwrap_err_on_ok_result_raises() -> None:
    with pytest.raises(ValueError, match="ok result"):
        Result.ok("value").unwrap_err()
