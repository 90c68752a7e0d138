"""
End-to-end demonstration of the lifecycle scheduling pipeline.

This script:
1. Loads and validates configuration
2. Seeds a small family of subjects (including one with bad data)
3. Runs a batch pass against the SQL notification store
4. Resolves one recurring notification and re-runs to show recurrence
5. Re-runs again to show idempotence

Run with: uv run python run_schedule.py
"""

import asyncio
from datetime import date

from dateutil.relativedelta import relativedelta
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from adapters.sql.store import SqlNotificationStore
from core.config import DatabaseConfig, get_config, print_config_summary, validate_config
from core.domain.catalog import event_type_label, load_default_catalog
from core.domain.lifecycle import classify_stage
from core.domain.models import BatchSummary, NotificationStatus
from core.observability import configure_logging
from core.services.lifecycle_engine import LifecycleNotificationEngine
from core.services.notification_store import InMemorySubjectDirectory

console = Console()


def _sample_family(today: date) -> list[dict]:
    return [
        {
            "id": "grandma",
            "name": "김순자",
            "birth_date": (today - relativedelta(years=65)).isoformat(),
            "gender": None,
            "relation": "grandparent",
        },
        {
            "id": "dad",
            "name": "이민호",
            "birth_date": (today - relativedelta(years=52, days=10)).isoformat(),
            "gender": "male",
            "relation": "self",
        },
        {
            "id": "mom",
            "name": "박지현",
            "birth_date": (today - relativedelta(years=41, months=2)).isoformat(),
            "gender": "female",
            "relation": "spouse",
        },
        {
            "id": "baby",
            "name": "이서준",
            "birth_date": (today - relativedelta(months=2)).isoformat(),
            "gender": "male",
            "relation": "child",
        },
        {
            "id": "cousin",
            "name": "최유나",
            "birth_date": "not-a-date",
            "gender": "female",
            "relation": "other",
        },
    ]


def print_summary(title: str, summary: BatchSummary) -> None:
    table = Table(title=title)
    table.add_column("Subject")
    table.add_column("Status")
    table.add_column("Created", justify="right")
    table.add_column("Skipped", justify="right")
    table.add_column("Error")

    for outcome in sorted(summary.outcomes, key=lambda o: o.subject_id):
        style = {"ok": "green", "invalid_input": "yellow", "failed": "red"}[outcome.status]
        table.add_row(
            outcome.subject_id,
            f"[{style}]{outcome.status}[/{style}]",
            str(outcome.created),
            str(outcome.skipped),
            outcome.error or "",
        )

    console.print(table)
    console.print(
        f"Totals: created={summary.created} skipped={summary.skipped} "
        f"failed={summary.failed} invalid={summary.invalid}"
    )


def print_notifications(outcome_notifications: list) -> None:
    table = Table(title="New notifications")
    table.add_column("Title")
    table.add_column("Type")
    table.add_column("Due")
    table.add_column("Days", justify="right")
    table.add_column("Priority")

    for n in outcome_notifications:
        table.add_row(
            n.title,
            event_type_label(n.context_data.event_type),
            n.scheduled_at.isoformat() if n.scheduled_at else "-",
            str(n.context_data.days_until),
            n.priority.value,
        )
    console.print(table)


async def main() -> None:
    console.print(Panel.fit("Lifecycle Health-Event Scheduler", style="bold blue"))

    validate_config()
    print_config_summary()
    config = get_config()
    configure_logging(config.logging)

    today = date.today()
    family = _sample_family(today)
    directory = InMemorySubjectDirectory(family)

    store = SqlNotificationStore.from_config(DatabaseConfig(url="sqlite://"))
    store.create_schema()

    catalog = load_default_catalog()
    console.print(f"Catalog version {catalog.version}: {len(catalog)} events")

    for record in family[:-1]:
        info = classify_stage(date.fromisoformat(record["birth_date"]), today)
        next_label = (
            f"{info.next_stage.stage.value} on {info.next_stage.starts_on}"
            if info.next_stage
            else "-"
        )
        console.print(
            f"  {record['name']}: {info.stage.value}, "
            f"{info.age.years}y {info.age.months}m {info.age.days}d (next: {next_label})"
        )

    engine = LifecycleNotificationEngine(directory, store, catalog=catalog, config=config)

    # Batch ids include the subject with a bad birth date on purpose
    subject_ids = [record["id"] for record in family]
    first = await engine.run_batch(subject_ids, today=today)
    print_summary("First pass", first)
    print_notifications([n for o in first.outcomes for n in o.notifications])

    # Delivery subsystem confirms grandma's flu shot; the annual event may fire again
    grandma = await store.list_notifications("grandma")
    flu = next(n for n in grandma if n.event_code == "flu_annual")
    await store.update_status(flu.id, NotificationStatus.CONFIRMED)

    second = await engine.run_batch(subject_ids, today=today)
    print_summary("Second pass (after confirming a recurring event)", second)

    third = await engine.run_batch(subject_ids, today=today)
    print_summary("Third pass (idempotent)", third)


if __name__ == "__main__":
    asyncio.run(main())
