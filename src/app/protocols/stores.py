"""Protocolos de domínio para os stores de persistência.

Interfaces leves (ABCs) dependidas por services e use cases. As
implementações (memória e Firestore) ficam em app/infra/stores.

Invariantes comuns:
    - Unicidade garantida pelo store (id do documento), não por leitura prévia
    - Falhas de infraestrutura sobem como InfrastructureError
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.protocols.models import (
        InstagramProfile,
        MediaItemRecord,
        MessageRecord,
        MessagingEvent,
        OutboundMessageRecord,
        OutboundStatus,
        ProfileMetadata,
        VerificationTokenRecord,
    )


class ProfileStoreProtocol(ABC):
    """Contrato para perfis Instagram."""

    @abstractmethod
    async def upsert(
        self,
        ig_id: str,
        metadata: ProfileMetadata | None = None,
    ) -> InstagramProfile:
        """Cria o perfil se ausente; senão mescla apenas campos não vazios.

        Nunca altera `connected_user_id`. Sempre atualiza `updated_at`.
        """

    @abstractmethod
    async def get(self, ig_id: str) -> InstagramProfile | None: ...

    @abstractmethod
    async def link_user(self, ig_id: str, user_id: str) -> InstagramProfile:
        """Vincula o perfil a um usuário do app (no máximo uma vez).

        Vincular de novo ao mesmo usuário é idempotente.

        Raises:
            ProfileAlreadyLinkedError: Perfil já vinculado a outro usuário.
        """


class MessageStoreProtocol(ABC):
    """Contrato para mensagens recebidas."""

    @abstractmethod
    async def insert_if_absent(
        self,
        event: MessagingEvent,
    ) -> tuple[MessageRecord, bool]:
        """Insere a mensagem se o `mid` for novo.

        Returns:
            (registro, created). Em duplicata retorna o registro existente
            com created=False.

        Raises:
            InvalidTimestampError: Timestamp fora da faixa aceita.
        """

    @abstractmethod
    async def get(self, mid: str) -> MessageRecord | None: ...

    @abstractmethod
    async def mark_processed(self, mid: str) -> None: ...


class VerificationTokenStoreProtocol(ABC):
    """Contrato para tokens de verificação (somente hash)."""

    @abstractmethod
    async def create(self, record: VerificationTokenRecord) -> None: ...

    @abstractmethod
    async def get_active(
        self,
        token_hash: str,
        ig_id: str,
    ) -> VerificationTokenRecord | None:
        """Retorna o token não consumido para o par (hash, ig_id)."""

    @abstractmethod
    async def mark_consumed(self, token_hash: str) -> bool:
        """Compare-and-set consumed=False -> True.

        Returns:
            True se esta chamada consumiu o token; False se já consumido.
        """

    @abstractmethod
    async def exists_for_event(self, ig_id: str, event_id: str) -> bool:
        """Indica se já existe token emitido para o evento."""


class OutboundMessageStoreProtocol(ABC):
    """Contrato para registros de DMs enviadas."""

    @abstractmethod
    async def create(self, record: OutboundMessageRecord) -> None: ...

    @abstractmethod
    async def update(
        self,
        outbound_id: str,
        *,
        status: OutboundStatus,
        attempts: int,
        remote_message_id: str | None = None,
        error: str | None = None,
    ) -> None: ...

    @abstractmethod
    async def get(self, outbound_id: str) -> OutboundMessageRecord | None: ...


class MediaStoreProtocol(ABC):
    """Contrato para mídias salvas, únicas por (owner_user_id, media_id)."""

    @abstractmethod
    async def exists(self, owner_user_id: str, media_id: str) -> bool: ...

    @abstractmethod
    async def insert(self, record: MediaItemRecord) -> bool:
        """Insere a mídia.

        Returns:
            True se inserida; False se já existia (corrida resolvida).
        """
