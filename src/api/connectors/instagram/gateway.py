"""Gateway da Graph API do Instagram usado pelos services.

Implementa os contratos de envio de DM e consulta de perfil sobre o
InstagramHttpClient, isolando endpoints e formato de payload.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from api.payload_builders.instagram import TextPayloadBuilder
from app.infra.http import HttpError
from app.protocols.models import ProfileMetadata

if TYPE_CHECKING:
    from app.protocols.http_client import InstagramHttpClientProtocol
    from config.settings import InstagramSettings

logger = logging.getLogger(__name__)

PROFILE_FIELDS = "id,username,name,profile_pic"


class InstagramGraphGateway:
    """Envio de DMs e consulta de perfil público.

    Args:
        http_client: Cliente da Graph API
        settings: InstagramSettings (token, scoped_id, endpoints)
        payload_builder: Builder do corpo da DM
    """

    def __init__(
        self,
        http_client: InstagramHttpClientProtocol,
        settings: InstagramSettings,
        payload_builder: TextPayloadBuilder | None = None,
    ) -> None:
        self._http = http_client
        self._settings = settings
        self._builder = payload_builder or TextPayloadBuilder()

    async def send_text(self, recipient_ig_id: str, text: str) -> str | None:
        """Envia uma DM de texto.

        Returns:
            Id remoto da mensagem (`message_id` ou `id`).

        Raises:
            HttpError: Falha HTTP ou erro Meta.
            ValueError: Payload inválido ou configuração ausente.
        """
        payload = self._builder.build(recipient_ig_id, text)
        data = await self._http.send_message(
            self._settings.get_messages_endpoint(),
            self._settings.access_token,
            payload,
        )
        remote_id = data.get("message_id") or data.get("id")
        return str(remote_id) if remote_id else None

    async def fetch_profile(self, ig_id: str) -> ProfileMetadata:
        """Consulta username, nome e foto do perfil.

        Raises:
            HttpError: Falha HTTP ou erro Meta.
        """
        data: dict[str, Any] = await self._http.get_json(
            self._settings.get_profile_endpoint(ig_id),
            self._settings.access_token,
            params={"fields": PROFILE_FIELDS},
        )
        if str(data.get("id", ig_id)) != ig_id:
            raise HttpError("Graph API retornou perfil de outro id")
        return ProfileMetadata(
            username=data.get("username") or None,
            display_name=data.get("name") or None,
            profile_pic_url=data.get("profile_pic") or None,
        )
