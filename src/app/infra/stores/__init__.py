"""Stores: implementações concretas de persistência.

Módulos disponíveis:
    - firestore_*_store: Stores Firestore (staging/production)
    - memory_stores: Stores em memória para desenvolvimento/testes
"""

from __future__ import annotations

from app.infra.stores.firestore_media_store import FirestoreMediaStore
from app.infra.stores.firestore_message_store import FirestoreMessageStore
from app.infra.stores.firestore_outbound_store import FirestoreOutboundMessageStore
from app.infra.stores.firestore_profile_store import FirestoreProfileStore
from app.infra.stores.firestore_token_store import FirestoreVerificationTokenStore
from app.infra.stores.memory_stores import (
    MemoryMediaStore,
    MemoryMessageStore,
    MemoryOutboundMessageStore,
    MemoryProfileStore,
    MemoryVerificationTokenStore,
)

__all__ = [
    # Firestore
    "FirestoreMediaStore",
    "FirestoreMessageStore",
    "FirestoreOutboundMessageStore",
    "FirestoreProfileStore",
    "FirestoreVerificationTokenStore",
    # Memory (dev/test)
    "MemoryMediaStore",
    "MemoryMessageStore",
    "MemoryOutboundMessageStore",
    "MemoryProfileStore",
    "MemoryVerificationTokenStore",
]
