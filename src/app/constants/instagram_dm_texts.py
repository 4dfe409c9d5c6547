"""Textos fixos das DMs enviadas pelo serviço.

Conteúdo em inglês: é o idioma do produto exibido ao usuário final.
"""

from __future__ import annotations

from urllib.parse import urlencode

VERIFICATION_DM_TEMPLATE = (
    "Hey — welcome to Reeva! It looks like you haven't connected your "
    "Instagram account to Reeva yet. Click the link below to connect and "
    "view your saved reels and posts:\n\n{url}"
)

ACKNOWLEDGEMENT_DM_TEXT = (
    "Hi! Send your reels and posts here and we'll save them to your Reeva library."
)


def build_verification_url(app_base_url: str, token_plain: str, ig_id: str) -> str:
    """Link de verificação do app web."""
    query = urlencode({"token": token_plain, "ig_id": ig_id})
    return f"{app_base_url.rstrip('/')}/verify?{query}"


def build_verification_dm(app_base_url: str, token_plain: str, ig_id: str) -> str:
    """Texto completo da DM de verificação."""
    return VERIFICATION_DM_TEMPLATE.format(
        url=build_verification_url(app_base_url, token_plain, ig_id)
    )
