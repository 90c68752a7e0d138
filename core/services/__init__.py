"""
Core services for the application.

This package contains the scheduling pipeline: matching and scheduling,
deduplication and persistence, and the engine that runs them per subject.
"""

from .lifecycle_engine import LifecycleNotificationEngine
from .materializer import Materializer
from .notification_store import (
    InMemoryNotificationStore,
    InMemorySubjectDirectory,
    NotificationStore,
    SubjectDirectory,
)
from .scheduler import SchedulingPolicy, plan_subject, priority_for, schedule_event

__all__ = [
    "LifecycleNotificationEngine",
    "Materializer",
    "NotificationStore",
    "SubjectDirectory",
    "InMemoryNotificationStore",
    "InMemorySubjectDirectory",
    "SchedulingPolicy",
    "plan_subject",
    "priority_for",
    "schedule_event",
]
