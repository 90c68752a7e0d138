"""
SQL-backed notification store.

Uses synchronous SQLAlchemy sessions; each call runs in a worker thread via
``asyncio.to_thread`` so the engine's event loop is never blocked.
"""

import asyncio
import uuid

import structlog
from sqlalchemy import create_engine, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from adapters.sql.models import Base, NotificationRow
from core.config import DatabaseConfig
from core.domain.errors import DuplicateNotificationError, PersistenceError
from core.domain.models import (
    ACTIVE_STATUSES,
    NOTIFICATION_TYPE,
    Notification,
    NotificationDraft,
    NotificationStatus,
)

logger = structlog.get_logger(__name__)

_ACTIVE_VALUES = [s.value for s in ACTIVE_STATUSES]


def build_engine(config: DatabaseConfig) -> Engine:
    """Create an engine; in-memory SQLite shares one connection across threads."""
    if config.url == "sqlite://" or (config.url.startswith("sqlite") and ":memory:" in config.url):
        return create_engine(
            config.url,
            echo=config.echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if config.url.startswith("sqlite"):
        return create_engine(config.url, echo=config.echo)
    return create_engine(
        config.url,
        echo=config.echo,
        pool_size=config.pool_size,
        pool_pre_ping=True,
    )


def _to_model(row: NotificationRow) -> Notification:
    return Notification(
        id=row.id,
        subject_id=row.subject_id,
        type=row.type,
        category=row.category,
        title=row.title,
        message=row.message,
        priority=row.priority,
        status=row.status,
        channel=row.channel,
        scheduled_at=row.scheduled_at,
        context_data=row.context_data,
        created_at=row.created_at,
    )


class SqlNotificationStore:
    """NotificationStore implementation over any SQLAlchemy-supported database."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._session_factory = sessionmaker(
            bind=engine, autocommit=False, autoflush=False, expire_on_commit=False
        )
        self.logger = logger.bind(component="sql_notification_store")

    @classmethod
    def from_config(cls, config: DatabaseConfig) -> "SqlNotificationStore":
        return cls(build_engine(config))

    def create_schema(self) -> None:
        Base.metadata.create_all(self.engine)

    def _session(self) -> Session:
        return self._session_factory()

    # Synchronous implementations, run in worker threads

    def _list_active_event_codes(self, subject_id: str, type: str) -> set[str]:
        stmt = (
            select(NotificationRow.event_code)
            .where(NotificationRow.subject_id == subject_id)
            .where(NotificationRow.type == type)
            .where(NotificationRow.status.in_(_ACTIVE_VALUES))
        )
        with self._session() as db:
            return set(db.execute(stmt).scalars())

    def _insert_notifications(self, drafts: list[NotificationDraft]) -> list[Notification]:
        rows = [
            NotificationRow(
                id=str(uuid.uuid4()),
                subject_id=draft.subject_id,
                type=draft.type,
                event_code=draft.event_code,
                category=draft.category,
                title=draft.title,
                message=draft.message,
                priority=draft.priority.value,
                status=draft.status.value,
                channel=draft.channel,
                scheduled_at=draft.scheduled_at,
                context_data=draft.context_data.model_dump(mode="json"),
            )
            for draft in drafts
        ]
        with self._session() as db:
            try:
                db.add_all(rows)
                db.commit()
            except IntegrityError as e:
                db.rollback()
                subject_ids = {d.subject_id for d in drafts}
                raise DuplicateNotificationError(
                    ",".join(sorted(subject_ids)), {d.event_code for d in drafts}
                ) from e
            return [_to_model(row) for row in rows]

    def _update_status(self, notification_id: str, status: NotificationStatus) -> None:
        with self._session() as db:
            try:
                result = db.execute(
                    update(NotificationRow)
                    .where(NotificationRow.id == notification_id)
                    .values(status=status.value)
                )
                db.commit()
            except IntegrityError as e:
                db.rollback()
                raise PersistenceError(f"status change would duplicate an active row: {e}") from e
            if result.rowcount == 0:
                raise KeyError(notification_id)

    def _list_notifications(self, subject_id: str) -> list[Notification]:
        stmt = (
            select(NotificationRow)
            .where(NotificationRow.subject_id == subject_id)
            .order_by(NotificationRow.created_at.asc())
        )
        with self._session() as db:
            return [_to_model(row) for row in db.execute(stmt).scalars()]

    # NotificationStore protocol

    async def list_active_event_codes(
        self, subject_id: str, type: str = NOTIFICATION_TYPE
    ) -> set[str]:
        try:
            return await asyncio.to_thread(self._list_active_event_codes, subject_id, type)
        except SQLAlchemyError as e:
            raise PersistenceError(f"active notification read failed: {e}") from e

    async def insert_notifications(self, drafts: list[NotificationDraft]) -> list[Notification]:
        if not drafts:
            return []
        try:
            created = await asyncio.to_thread(self._insert_notifications, drafts)
        except SQLAlchemyError as e:
            raise PersistenceError(f"notification insert failed: {e}") from e
        self.logger.debug("notifications_inserted", count=len(created))
        return created

    async def update_status(self, notification_id: str, status: NotificationStatus) -> None:
        try:
            await asyncio.to_thread(self._update_status, notification_id, status)
        except SQLAlchemyError as e:
            raise PersistenceError(f"status update failed: {e}") from e

    async def list_notifications(self, subject_id: str) -> list[Notification]:
        try:
            return await asyncio.to_thread(self._list_notifications, subject_id)
        except SQLAlchemyError as e:
            raise PersistenceError(f"notification listing failed: {e}") from e
