"""Serviços de aplicação.

Unidades reutilizáveis de orquestração (sem IO direto).
Implementações concretas de IO ficam em app/infra/.
"""

from app.services.account_link import AccountLinkService
from app.services.media_extraction import MediaStoreService, extract_media
from app.services.outbound_delivery import OutboundDeliveryService, backoff_delay
from app.services.retry_classification import RetryDecision, classify_error, is_retryable
from app.services.verification_tokens import VerificationTokenService, hash_token

__all__ = [
    "AccountLinkService",
    "MediaStoreService",
    "OutboundDeliveryService",
    "RetryDecision",
    "VerificationTokenService",
    "backoff_delay",
    "classify_error",
    "extract_media",
    "hash_token",
    "is_retryable",
]
