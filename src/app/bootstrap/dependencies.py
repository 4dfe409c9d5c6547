"""Factories de stores e publisher: criação de implementações concretas.

Este módulo centraliza a escolha de backend (memória ou GCP) a partir
das settings. Clientes externos são recebidos prontos, nunca criados aqui.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from app.infra.queue import CloudTasksEventPublisher, InMemoryEventPublisher
from app.infra.stores import (
    FirestoreMediaStore,
    FirestoreMessageStore,
    FirestoreOutboundMessageStore,
    FirestoreProfileStore,
    FirestoreVerificationTokenStore,
    MemoryMediaStore,
    MemoryMessageStore,
    MemoryOutboundMessageStore,
    MemoryProfileStore,
    MemoryVerificationTokenStore,
)

if TYPE_CHECKING:
    from app.protocols.queue import EventPublisherProtocol
    from app.protocols.stores import (
        MediaStoreProtocol,
        MessageStoreProtocol,
        OutboundMessageStoreProtocol,
        ProfileStoreProtocol,
        VerificationTokenStoreProtocol,
    )
    from config.settings import CloudTasksSettings, FirestoreSettings, StoreSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StoreBundle:
    """Conjunto de stores de um mesmo backend."""

    profiles: ProfileStoreProtocol
    messages: MessageStoreProtocol
    tokens: VerificationTokenStoreProtocol
    outbound: OutboundMessageStoreProtocol
    media: MediaStoreProtocol


# ──────────────────────────────────────────────────────────────────────────────
# Store Factory
# ──────────────────────────────────────────────────────────────────────────────


def create_stores(
    store_settings: StoreSettings,
    firestore_settings: FirestoreSettings,
    firestore_client: Any | None = None,
) -> StoreBundle:
    """Cria os stores conforme STORE_BACKEND.

    - "memory": stores em memória (dev only)
    - "firestore": stores Firestore (staging/production)

    Raises:
        ValueError: Backend firestore sem cliente configurado
    """
    if store_settings.backend == "firestore":
        if firestore_client is None:
            raise ValueError("STORE_BACKEND=firestore exige cliente Firestore")
        timeout = store_settings.timeout_seconds
        bundle = StoreBundle(
            profiles=FirestoreProfileStore(
                firestore_client, firestore_settings.collection_profiles, timeout
            ),
            messages=FirestoreMessageStore(
                firestore_client, firestore_settings.collection_messages, timeout
            ),
            tokens=FirestoreVerificationTokenStore(
                firestore_client, firestore_settings.collection_tokens, timeout
            ),
            outbound=FirestoreOutboundMessageStore(
                firestore_client, firestore_settings.collection_outbound, timeout
            ),
            media=FirestoreMediaStore(
                firestore_client, firestore_settings.collection_media, timeout
            ),
        )
        logger.info("stores_created", extra={"backend": "firestore"})
        return bundle

    bundle = StoreBundle(
        profiles=MemoryProfileStore(),
        messages=MemoryMessageStore(),
        tokens=MemoryVerificationTokenStore(),
        outbound=MemoryOutboundMessageStore(),
        media=MemoryMediaStore(),
    )
    logger.info("stores_created", extra={"backend": "memory"})
    return bundle


# ──────────────────────────────────────────────────────────────────────────────
# Publisher Factory
# ──────────────────────────────────────────────────────────────────────────────


def create_event_publisher(
    cloud_tasks_settings: CloudTasksSettings,
    gcp_project: str,
    cloud_tasks_client: Any | None = None,
) -> EventPublisherProtocol:
    """Cria o publisher conforme QUEUE_BACKEND.

    - "memory": entrega inline ao consumidor (dev only)
    - "cloud_tasks": task HTTP com token OIDC

    Raises:
        ValueError: Backend cloud_tasks sem cliente configurado
    """
    if cloud_tasks_settings.backend == "cloud_tasks":
        if cloud_tasks_client is None:
            raise ValueError("QUEUE_BACKEND=cloud_tasks exige cliente Cloud Tasks")
        project_id = cloud_tasks_settings.project_id or gcp_project
        publisher = CloudTasksEventPublisher(cloud_tasks_client, cloud_tasks_settings, project_id)
        logger.info(
            "event_publisher_created",
            extra={"backend": "cloud_tasks", "queue": cloud_tasks_settings.queue_ingestion},
        )
        return publisher

    logger.info("event_publisher_created", extra={"backend": "memory"})
    return InMemoryEventPublisher()
