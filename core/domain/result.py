"""Explicit success/failure container used across service boundaries."""

from typing import Generic, TypeVar

ValueT = TypeVar("ValueT")
ErrorT = TypeVar("ErrorT", bound=BaseException)


class Result(Generic[ValueT, ErrorT]):
    """
    Outcome of an operation whose failure is an expected business case.

    Store outages and rejected writes come back as ``Result.err`` so the
    engine can turn them into a per-subject outcome instead of unwinding the
    whole batch. Programming errors still raise.
    """

    __slots__ = ("_is_ok", "_value", "_error")

    def __init__(self, is_ok: bool, value: ValueT | None, error: ErrorT | None) -> None:
        self._is_ok = is_ok
        self._value = value
        self._error = error

    @classmethod
    def ok(cls, value: ValueT) -> "Result[ValueT, ErrorT]":
        return cls(True, value, None)

    @classmethod
    def err(cls, error: ErrorT) -> "Result[ValueT, ErrorT]":
        if error is None:
            raise ValueError("Result.err requires an exception")
        return cls(False, None, error)

    def is_ok(self) -> bool:
        return self._is_ok

    def is_err(self) -> bool:
        return not self._is_ok

    def unwrap(self) -> ValueT:
        """Return the value, re-raising the stored error on failure."""
        if not self._is_ok:
            raise self._error  # type: ignore[misc]
        return self._value  # type: ignore[return-value]

    def unwrap_err(self) -> ErrorT:
        if self._is_ok:
            raise ValueError("called unwrap_err() on an ok result")
        return self._error  # type: ignore[return-value]

    def __repr__(self) -> str:
        if self._is_ok:
            return f"Result.ok({self._value!r})"
        return f"Result.err({self._error!r})"
