"""Protocolo de resolução do usuário autenticado do app web."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from starlette.requests import Request


class SessionUserResolverProtocol(Protocol):
    """Resolve o user_id da sessão a partir da requisição.

    Retorna None quando não há usuário autenticado.
    """

    async def resolve(self, request: Request) -> str | None: ...
