"""Connector Instagram: adapter de borda para Instagram Messaging API.

Responsabilidades:
- Webhook (verify, receive)
- HTTP client para a Graph API (envio de DM, perfil público)
- Classificação de erros Meta
"""

from api.connectors.instagram.gateway import InstagramGraphGateway
from api.connectors.instagram.http_client import (
    InstagramHttpClient,
    create_instagram_http_client,
)
from api.connectors.instagram.meta_errors import InstagramApiError, parse_meta_error
from app.infra.http import HttpClient, HttpClientConfig, HttpError

__all__ = [
    "HttpClient",
    "HttpClientConfig",
    "HttpError",
    "InstagramApiError",
    "InstagramGraphGateway",
    "InstagramHttpClient",
    "create_instagram_http_client",
    "parse_meta_error",
]
