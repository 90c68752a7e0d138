"""
Event catalog: immutable, versioned reference data plus the stage/gender matcher.

The catalog is built once (``load_default_catalog``) and injected into the
services that need it. Rows are validated on load; a row that references an
unsupported stage or gender is skipped on its own without affecting the rest.
"""

from collections.abc import Iterable, Iterator, Mapping
from functools import lru_cache
from typing import Any

import structlog
from pydantic import ValidationError

from core.domain.catalog_data import CATALOG_VERSION, DEFAULT_CATALOG_ROWS
from core.domain.errors import CatalogMismatchError
from core.domain.models import EventDefinition, EventType, Gender, LifecycleStage

logger = structlog.get_logger(__name__)

EVENT_TYPE_LABELS: dict[EventType, str] = {
    EventType.VACCINATION: "예방접종",
    EventType.HEALTH_CHECKUP: "건강검진",
}


def event_type_label(event_type: EventType | str) -> str:
    """Korean display label for an event type, falling back to the raw value."""
    try:
        return EVENT_TYPE_LABELS[EventType(event_type)]
    except ValueError:
        return str(event_type)


def parse_definition(row: Mapping[str, Any]) -> EventDefinition:
    """
    Validate one raw catalog row.

    Raises:
        CatalogMismatchError: the row cannot be represented as an event definition.
    """
    event_code = row.get("event_code")
    try:
        definition = EventDefinition.model_validate(dict(row))
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise CatalogMismatchError(event_code, f"invalid fields: {fields}") from e

    if definition.target_age_years is not None and definition.target_age_months is not None:
        raise CatalogMismatchError(event_code, "both target_age_years and target_age_months set")

    return definition


class EventCatalog:
    """Read-only collection of event definitions, keyed by event code."""

    def __init__(self, definitions: Iterable[EventDefinition], version: str) -> None:
        self._definitions: tuple[EventDefinition, ...] = tuple(definitions)
        self._by_code: dict[str, EventDefinition] = {d.event_code: d for d in self._definitions}
        if len(self._by_code) != len(self._definitions):
            raise ValueError("event codes must be unique within a catalog")
        self.version = version

    @classmethod
    def from_rows(cls, rows: Iterable[Mapping[str, Any]], version: str) -> "EventCatalog":
        """Build a catalog, skipping (and logging) rows that fail validation."""
        definitions: list[EventDefinition] = []
        seen: set[str] = set()

        for row in rows:
            try:
                definition = parse_definition(row)
                if definition.event_code in seen:
                    raise CatalogMismatchError(definition.event_code, "duplicate event code")
            except CatalogMismatchError as e:
                logger.warning(
                    "catalog_row_skipped",
                    event_code=e.event_code,
                    reason=e.reason,
                    catalog_version=version,
                )
                continue

            seen.add(definition.event_code)
            definitions.append(definition)

        logger.info("catalog_loaded", version=version, definitions=len(definitions))
        return cls(definitions, version)

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self) -> Iterator[EventDefinition]:
        return iter(self._definitions)

    def __contains__(self, event_code: object) -> bool:
        return event_code in self._by_code

    def get(self, event_code: str) -> EventDefinition | None:
        return self._by_code.get(event_code)

    def events_for_stage(
        self, stage: LifecycleStage, gender: Gender | None = None
    ) -> list[EventDefinition]:
        """Definitions applicable to ``stage``; an unknown gender matches every row."""
        return [
            d
            for d in self._definitions
            if stage in d.applicable_stages and d.applies_to_gender(gender)
        ]


@lru_cache
def load_default_catalog() -> EventCatalog:
    """Process-wide catalog built from the bundled reference data."""
    return EventCatalog.from_rows(DEFAULT_CATALOG_ROWS, version=CATALOG_VERSION)
