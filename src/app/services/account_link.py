"""Vínculo de conta Instagram a um usuário do app web.

Confirmação do link enviado na DM de verificação: consome o token e
grava `connected_user_id` no perfil (uma única vez).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.protocols.models import LinkResult
from utils.errors import ProfileAlreadyLinkedError

if TYPE_CHECKING:
    from app.protocols.stores import ProfileStoreProtocol
    from app.services.verification_tokens import VerificationTokenService

logger = logging.getLogger(__name__)


class AccountLinkService:
    """Consome o token de verificação e vincula o perfil ao usuário."""

    def __init__(
        self,
        tokens: VerificationTokenService,
        profiles: ProfileStoreProtocol,
    ) -> None:
        self._tokens = tokens
        self._profiles = profiles

    async def link(self, user_id: str, token_plain: str, ig_id: str) -> LinkResult:
        """Executa o vínculo.

        Perfil já vinculado a outro usuário é rejeitado antes de consumir
        o token.

        Returns:
            LinkResult.OK, NOT_FOUND ou EXPIRED.

        Raises:
            ProfileAlreadyLinkedError: Perfil pertence a outro usuário.
            InfrastructureError: Falha do store.
        """
        profile = await self._profiles.get(ig_id)
        if profile and profile.connected_user_id and profile.connected_user_id != user_id:
            logger.warning("account_link_conflict", extra={"ig_id": ig_id})
            raise ProfileAlreadyLinkedError(ig_id)

        result = await self._tokens.consume(token_plain, ig_id)
        if result is not LinkResult.OK:
            return result

        await self._profiles.link_user(ig_id, user_id)
        logger.info("account_linked", extra={"ig_id": ig_id, "user_id": user_id})
        return LinkResult.OK
