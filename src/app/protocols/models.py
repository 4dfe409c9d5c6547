"""Modelos de domínio compartilhados entre camadas.

Dataclasses imutáveis trafegadas entre normalizer, use cases, services e
stores. Nenhum modelo conhece Firestore ou HTTP.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime  # noqa: TC003 - usado em runtime nos dataclasses
from enum import Enum
from typing import Any, Literal

from utils.errors import InvalidEventError

OutboundKind = Literal["verification", "acknowledgement", "custom"]
OutboundStatus = Literal["pending", "sent", "failed"]
MediaType = Literal["reel", "post"]

OUTBOUND_KINDS: frozenset[str] = frozenset({"verification", "acknowledgement", "custom"})

# Campos exigidos pelo consumidor da fila
REQUIRED_EVENT_FIELDS = ("mid", "sender_ig_id", "recipient_ig_id", "timestamp")


@dataclass(frozen=True, slots=True)
class MessagingEvent:
    """Evento de DM recebido, já extraído do payload do webhook.

    `timestamp` é mantido como string crua; a normalização para UTC
    acontece na persistência.
    """

    mid: str
    sender_ig_id: str
    recipient_ig_id: str
    timestamp: str
    message_text: str | None = None
    attachments: list[dict[str, Any]] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serializa para o corpo publicado na fila."""
        data: dict[str, Any] = {
            "mid": self.mid,
            "sender_ig_id": self.sender_ig_id,
            "recipient_ig_id": self.recipient_ig_id,
            "timestamp": self.timestamp,
        }
        if self.message_text is not None:
            data["message_text"] = self.message_text
        if self.attachments is not None:
            data["attachments"] = self.attachments
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MessagingEvent:
        """Reconstrói o evento a partir do corpo da fila.

        Raises:
            InvalidEventError: Se algum campo obrigatório estiver ausente.
        """
        missing = [name for name in REQUIRED_EVENT_FIELDS if not data.get(name)]
        if missing:
            raise InvalidEventError(missing)

        attachments = data.get("attachments")
        text = data.get("message_text")
        return cls(
            mid=str(data["mid"]),
            sender_ig_id=str(data["sender_ig_id"]),
            recipient_ig_id=str(data["recipient_ig_id"]),
            timestamp=str(data["timestamp"]),
            message_text=text if isinstance(text, str) else None,
            attachments=attachments if isinstance(attachments, list) else None,
        )


@dataclass(frozen=True, slots=True)
class ProfileMetadata:
    """Metadados opcionais de perfil usados no upsert."""

    username: str | None = None
    display_name: str | None = None
    profile_pic_url: str | None = None

    def non_empty_fields(self) -> dict[str, str]:
        """Retorna apenas os campos preenchidos."""
        values = {
            "username": self.username,
            "display_name": self.display_name,
            "profile_pic_url": self.profile_pic_url,
        }
        return {key: value for key, value in values.items() if value}


@dataclass(frozen=True, slots=True)
class InstagramProfile:
    """Perfil Instagram conhecido pelo sistema.

    `connected_user_id` é definido no máximo uma vez (vínculo de conta).
    """

    ig_id: str
    username: str = ""
    display_name: str = ""
    profile_pic_url: str | None = None
    connected_user_id: str | None = None
    connected_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_connected(self) -> bool:
        return bool(self.connected_user_id)


@dataclass(frozen=True, slots=True)
class MessageRecord:
    """Mensagem persistida, única por `mid`."""

    mid: str
    sender_ig_id: str
    recipient_ig_id: str
    received_at: datetime
    message_text: str | None = None
    attachments: list[dict[str, Any]] | None = None
    processed: bool = False
    created_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class VerificationTokenRecord:
    """Token de verificação persistido (somente o hash)."""

    token_hash: str
    ig_id: str
    expires_at: datetime
    created_by_event_id: str
    consumed: bool = False
    created_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class IssuedToken:
    """Token recém-emitido. `token_plain` só existe em memória."""

    token_plain: str
    token_hash: str
    expires_at: datetime


class LinkResult(Enum):
    """Resultado do consumo de um token de verificação."""

    OK = "ok"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"


@dataclass(frozen=True, slots=True)
class OutboundMessageRecord:
    """Registro de uma DM enviada (ou tentando ser enviada)."""

    id: str
    recipient_ig_id: str
    kind: OutboundKind
    payload: dict[str, Any]
    status: OutboundStatus = "pending"
    attempts: int = 0
    remote_message_id: str | None = None
    error: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class DeliveryResult:
    """Resultado de um envio bem-sucedido."""

    remote_message_id: str | None
    outbound_message_id: str


@dataclass(frozen=True, slots=True)
class MediaAttachment:
    """Reel ou post compartilhado via DM (transiente)."""

    media_type: MediaType
    media_id: str
    url: str
    title: str | None = None


@dataclass(frozen=True, slots=True)
class MediaItemRecord:
    """Mídia salva na biblioteca de um usuário conectado."""

    owner_user_id: str
    owner_ig_id: str
    sender_ig_id: str
    media_type: MediaType
    media_id: str
    url: str
    title: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class HandoffResult:
    """Resposta do processamento downstream."""

    ok: bool
    detail: str = ""


@dataclass(frozen=True, slots=True)
class IngestionResult:
    """Resultado do processamento de um evento pelo orquestrador."""

    success: bool
    message: str
    branch: Literal["unverified", "verified", "duplicate"]


@dataclass(slots=True)
class PublishSummary:
    """Resumo de uma publicação em lote na fila."""

    total: int = 0
    published: int = 0
    deduplicated: int = 0
    failed: int = 0
    failed_mids: list[str] = field(default_factory=list)
