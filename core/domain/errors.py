"""
Error taxonomy for the scheduling engine.

Nothing here is fatal at process level: the engine converts every one of
these into a per-subject outcome so that a batch run always completes.
"""


class LifecycleError(Exception):
    """Base class for expected scheduling failures."""


class InvalidInputError(LifecycleError):
    """Missing or unparseable birth date, or another caller precondition."""


class SubjectNotFoundError(InvalidInputError):
    """The profile subsystem has no subject with the requested id."""


class CatalogMismatchError(LifecycleError):
    """A catalog row references an unsupported stage/gender combination."""

    def __init__(self, event_code: str | None, reason: str) -> None:
        super().__init__(f"{event_code or '<unknown>'}: {reason}")
        self.event_code = event_code
        self.reason = reason


class PersistenceError(LifecycleError):
    """Read or write failure against the notification store."""


class DuplicateNotificationError(PersistenceError):
    """The store rejected a row that would create a second active notification."""

    def __init__(self, subject_id: str, event_codes: set[str]) -> None:
        super().__init__(
            f"active notification already exists for {subject_id}: {sorted(event_codes)}"
        )
        self.subject_id = subject_id
        self.event_codes = event_codes
