"""Builder para DMs de texto do Instagram."""

from __future__ import annotations

from typing import Any

# Limite da Messaging API: texto UTF-8 com menos de 1000 bytes
MAX_TEXT_BYTES = 1000


class TextPayloadBuilder:
    """Builder para DMs de texto em resposta a uma mensagem recebida."""

    def build(self, recipient_id: str, text: str) -> dict[str, Any]:
        """Constrói o corpo do POST /{scoped_id}/messages.

        Raises:
            ValueError: Destinatário ausente, texto vazio ou acima do limite.
        """
        if not recipient_id:
            raise ValueError("recipient_id é obrigatório")
        if not text or not text.strip():
            raise ValueError("text é obrigatório")
        if len(text.encode("utf-8")) >= MAX_TEXT_BYTES:
            raise ValueError(f"text excede o limite de {MAX_TEXT_BYTES} bytes UTF-8")

        return {
            "recipient": {"id": recipient_id},
            "message": {"text": text},
            "messaging_type": "RESPONSE",
        }
