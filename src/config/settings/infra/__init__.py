"""Agregador de settings de infraestrutura."""

from __future__ import annotations

from config.settings.infra.cloud_tasks import (
    CloudTasksSettings,
    QueueBackend,
    get_cloud_tasks_settings,
)
from config.settings.infra.firestore import (
    FirestoreSettings,
    get_firestore_settings,
)

__all__ = [
    "CloudTasksSettings",
    "FirestoreSettings",
    "QueueBackend",
    "get_cloud_tasks_settings",
    "get_firestore_settings",
]
