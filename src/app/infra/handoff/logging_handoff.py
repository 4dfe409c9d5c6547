"""Hand-off padrão: registra a mensagem para processamento posterior.

O processamento downstream é externo a este serviço; esta
implementação apenas aceita a mensagem e deixa o rastro no log.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.protocols.models import HandoffResult

if TYPE_CHECKING:
    from app.protocols.models import InstagramProfile, MessageRecord

logger = logging.getLogger(__name__)


class LoggingHandoff:
    """Aceita toda mensagem e registra o hand-off."""

    async def submit(
        self,
        message: MessageRecord,
        profile: InstagramProfile,
    ) -> HandoffResult:
        logger.info(
            "handoff_submitted",
            extra={
                "mid": message.mid,
                "ig_id": profile.ig_id,
                "user_id": profile.connected_user_id,
                "has_attachments": bool(message.attachments),
            },
        )
        return HandoffResult(ok=True)
