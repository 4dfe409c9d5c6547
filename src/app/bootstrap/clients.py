"""Factories de clientes externos: Firestore e Cloud Tasks."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from google.cloud.firestore import Client as FirestoreClient
    from google.cloud.tasks_v2 import CloudTasksAsyncClient

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────────────────
# Firestore Client Factory
# ──────────────────────────────────────────────────────────────────────────────


@lru_cache(maxsize=1)
def create_firestore_client(project_id: str, database: str = "(default)") -> FirestoreClient:
    """Cria cliente Firestore (singleton por projeto/database).

    Args:
        project_id: Projeto GCP
        database: Database Firestore

    Returns:
        Cliente Firestore
    """
    from google.cloud import firestore

    client = firestore.Client(project=project_id or None, database=database)
    logger.info("firestore_client_created", extra={"project": project_id, "database": database})
    return client


# ──────────────────────────────────────────────────────────────────────────────
# Cloud Tasks Client Factory
# ──────────────────────────────────────────────────────────────────────────────


def create_cloud_tasks_client() -> CloudTasksAsyncClient:
    """Cria cliente assíncrono do Cloud Tasks.

    Deve ser chamado com o event loop rodando (lifespan), pois o canal
    gRPC assíncrono se associa ao loop corrente.
    """
    from google.cloud import tasks_v2

    client = tasks_v2.CloudTasksAsyncClient()
    logger.info("cloud_tasks_client_created")
    return client
