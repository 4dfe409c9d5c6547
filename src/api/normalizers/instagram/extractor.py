"""Extrator de payloads do webhook Instagram Messaging API.

Formatos aceitos:
- Teste do painel Meta: {"field": "messages", "value": {...}}
- Produção: {"object": "instagram", "entry": [{"messaging": [...]}]}

Descartados: echoes (mensagens enviadas pela própria conta), eventos
sem `message.mid` (read receipts, reactions) e nós que não são objetos.

Função pura: nunca levanta exceção.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from app.protocols.models import MessagingEvent

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


def extract_messaging_events(payload: Any) -> list[MessagingEvent]:
    """Extrai eventos de DM do payload do webhook.

    Args:
        payload: Corpo JSON já decodificado (qualquer tipo).

    Returns:
        Eventos na ordem do payload; lista vazia se nada aproveitável.
    """
    if not isinstance(payload, dict):
        return []

    events: list[MessagingEvent] = []

    if payload.get("field") == "messages" and isinstance(payload.get("value"), dict):
        event = _event_from_node(payload["value"])
        if event is not None:
            events.append(event)

    if payload.get("object") == "instagram":
        for node in _iter_messaging_nodes(payload.get("entry")):
            event = _event_from_node(node)
            if event is not None:
                events.append(event)

    return events


def _iter_messaging_nodes(entries: Any) -> Iterable[dict[str, Any]]:
    if not isinstance(entries, list):
        return
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        messaging = entry.get("messaging")
        if not isinstance(messaging, list):
            continue
        for node in messaging:
            if isinstance(node, dict):
                yield node


def _event_from_node(node: dict[str, Any]) -> MessagingEvent | None:
    message = node.get("message")
    if not isinstance(message, dict):
        return None

    mid = message.get("mid")
    if message.get("is_echo") is True:
        logger.debug("instagram_echo_skipped", extra={"mid": mid})
        return None
    if not mid:
        return None

    text = message.get("text")
    attachments = message.get("attachments")
    return MessagingEvent(
        mid=str(mid),
        sender_ig_id=_participant_id(node.get("sender")),
        recipient_ig_id=_participant_id(node.get("recipient")),
        timestamp=_timestamp(node.get("timestamp")),
        message_text=text if isinstance(text, str) and text else None,
        attachments=attachments if isinstance(attachments, list) and attachments else None,
    )


def _participant_id(participant: Any) -> str:
    if isinstance(participant, dict) and participant.get("id"):
        return str(participant["id"])
    return ""


def _timestamp(raw: Any) -> str:
    if raw is None or raw == "":
        return str(int(time.time() * 1000))
    return str(raw)
