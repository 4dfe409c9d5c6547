"""Erros e helpers de parsing para a Graph API do Instagram."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# Códigos Meta de throttling/indisponibilidade temporária
TRANSIENT_META_CODES = frozenset({1, 2, 4, 17, 32, 341, 613})


@dataclass(frozen=True)
class InstagramApiError:
    """Erro retornado pela Graph API."""

    error_type: str
    error_code: int
    error_subcode: int | None
    error_message: str
    is_permanent: bool  # True se erro não é retentável


def is_permanent_error(error_code: int, error_type: str) -> bool:
    """Classifica erro como permanente ou transitório.

    Throttling e erros temporários da Meta são transitórios; OAuth,
    parâmetros inválidos e destinatário fora da janela são permanentes.
    """
    if error_code in TRANSIENT_META_CODES:
        return False
    if error_type in {"OAuthException", "IGApiException", "InvalidRequest"}:
        return True
    return error_code in {10, 100, 190, 200, 551}


def parse_meta_error(response_data: Any) -> InstagramApiError | None:
    """Extrai informações de erro do response da Meta.

    Returns:
        InstagramApiError se houver erro, None se sucesso.
    """
    if not isinstance(response_data, dict):
        return None
    error_obj = response_data.get("error")
    if not error_obj or not isinstance(error_obj, dict):
        return None

    error_type = str(error_obj.get("type", "unknown"))
    raw_code = error_obj.get("code", 0)
    error_code = raw_code if isinstance(raw_code, int) else 0
    subcode = error_obj.get("error_subcode")

    return InstagramApiError(
        error_type=error_type,
        error_code=error_code,
        error_subcode=subcode if isinstance(subcode, int) else None,
        error_message=str(error_obj.get("message", "Erro desconhecido")),
        is_permanent=is_permanent_error(error_code, error_type),
    )
