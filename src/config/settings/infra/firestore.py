"""Settings do Firestore.

Configurações para Google Cloud Firestore.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class FirestoreSettings:
    """Configurações do Firestore.

    Attributes:
        project_id: ID do projeto GCP (usa GCP_PROJECT se não definido)
        database: ID do database Firestore
        collection_profiles: Collection de perfis Instagram
        collection_messages: Collection de mensagens recebidas
        collection_tokens: Collection de tokens de verificação
        collection_outbound: Collection de DMs enviadas
        collection_media: Collection de mídias salvas
    """

    project_id: str = ""
    database: str = "(default)"
    collection_profiles: str = "instagram_profiles"
    collection_messages: str = "messages"
    collection_tokens: str = "verification_tokens"
    collection_outbound: str = "outbound_messages"
    collection_media: str = "media_items"

    def validate(self, gcp_project: str) -> list[str]:
        """Valida configurações do Firestore.

        Args:
            gcp_project: Projeto GCP padrão para fallback.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if not (self.project_id or gcp_project):
            errors.append("FIRESTORE_PROJECT_ID ou GCP_PROJECT deve estar configurado")

        collections = (
            self.collection_profiles,
            self.collection_messages,
            self.collection_tokens,
            self.collection_outbound,
            self.collection_media,
        )
        if len(set(collections)) != len(collections):
            errors.append("FIRESTORE_COLLECTION_* devem ser distintas")

        return errors


def _load_firestore_from_env() -> FirestoreSettings:
    """Carrega FirestoreSettings de variáveis de ambiente."""
    return FirestoreSettings(
        project_id=os.getenv("FIRESTORE_PROJECT_ID", ""),
        database=os.getenv("FIRESTORE_DATABASE", "(default)"),
        collection_profiles=os.getenv(
            "FIRESTORE_COLLECTION_PROFILES", "instagram_profiles"
        ),
        collection_messages=os.getenv("FIRESTORE_COLLECTION_MESSAGES", "messages"),
        collection_tokens=os.getenv(
            "FIRESTORE_COLLECTION_TOKENS", "verification_tokens"
        ),
        collection_outbound=os.getenv(
            "FIRESTORE_COLLECTION_OUTBOUND", "outbound_messages"
        ),
        collection_media=os.getenv("FIRESTORE_COLLECTION_MEDIA", "media_items"),
    )


@lru_cache(maxsize=1)
def get_firestore_settings() -> FirestoreSettings:
    """Retorna instância cacheada de FirestoreSettings."""
    return _load_firestore_from_env()
