"""Webhook Instagram: verificação (GET) e parse do corpo (POST)."""

from api.connectors.instagram.webhook.receive import (
    InvalidJsonError,
    WebhookRequestError,
    parse_webhook_body,
)
from api.connectors.instagram.webhook.verify import (
    WebhookChallengeError,
    verify_webhook_challenge,
)

__all__ = [
    "InvalidJsonError",
    "WebhookChallengeError",
    "WebhookRequestError",
    "parse_webhook_body",
    "verify_webhook_challenge",
]
