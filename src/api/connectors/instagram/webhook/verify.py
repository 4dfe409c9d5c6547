"""Verificação de webhook exigida pela Meta (GET com hub.*)."""

from __future__ import annotations

import hmac


class WebhookChallengeError(ValueError):
    """Erro de verificação do desafio do webhook."""


def verify_webhook_challenge(
    hub_mode: str | None,
    hub_verify_token: str | None,
    hub_challenge: str | None,
    expected_token: str | None,
) -> str:
    """Valida o desafio e retorna o conteúdo a ser ecoado.

    Raises:
        WebhookChallengeError: Token não configurado, modo diferente de
            `subscribe` ou token divergente.
    """
    if not expected_token:
        raise WebhookChallengeError("missing_verify_token")

    if hub_mode != "subscribe" or not hmac.compare_digest(
        (hub_verify_token or "").encode(),
        expected_token.encode(),
    ):
        raise WebhookChallengeError("verification_failed")

    return hub_challenge or ""
