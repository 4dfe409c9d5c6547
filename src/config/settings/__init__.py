"""Agregador de settings do reeva-ingest.

Re-exporta todas as settings e funções de cada módulo.
"""

from __future__ import annotations

# Base settings
from config.settings.base import (
    BaseSettings,
    Environment,
    StoreBackend,
    StoreSettings,
    get_base_settings,
    get_store_settings,
)

# Infrastructure settings
from config.settings.infra import (
    CloudTasksSettings,
    FirestoreSettings,
    QueueBackend,
    get_cloud_tasks_settings,
    get_firestore_settings,
)

# Channel-specific settings
from config.settings.instagram import (
    GRAPH_API_BASE_URL,
    GRAPH_API_VERSION,
    InstagramSettings,
    get_instagram_settings,
)

__all__ = [
    "GRAPH_API_BASE_URL",
    "GRAPH_API_VERSION",
    "BaseSettings",
    "CloudTasksSettings",
    "Environment",
    "FirestoreSettings",
    "InstagramSettings",
    "QueueBackend",
    "StoreBackend",
    "StoreSettings",
    "get_base_settings",
    "get_cloud_tasks_settings",
    "get_firestore_settings",
    "get_instagram_settings",
    "get_store_settings",
]
