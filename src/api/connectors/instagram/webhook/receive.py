"""Parse inicial do corpo do webhook (sem PII)."""

from __future__ import annotations

import json
from typing import Any


class WebhookRequestError(ValueError):
    """Erro base para falhas de webhook."""


class InvalidJsonError(WebhookRequestError):
    """JSON inválido no payload do webhook."""


def parse_webhook_body(raw_body: bytes) -> dict[str, Any]:
    """Parseia o corpo do webhook como objeto JSON.

    Raises:
        InvalidJsonError: Corpo vazio, JSON inválido ou não-objeto.
    """
    if not raw_body:
        raise InvalidJsonError("empty_body")

    try:
        payload = json.loads(raw_body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidJsonError("invalid_json") from exc

    if not isinstance(payload, dict):
        raise InvalidJsonError("payload_not_object")

    return payload
