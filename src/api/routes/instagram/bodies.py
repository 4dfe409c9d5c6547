"""Modelos dos corpos JSON das rotas Instagram.

Campos ausentes viram string vazia; a rota decide o 400 com a mensagem
de campos obrigatórios, em vez do 422 padrão do FastAPI.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from api.connectors.instagram.webhook import InvalidJsonError, parse_webhook_body

if TYPE_CHECKING:
    from starlette.requests import Request

BodyT = TypeVar("BodyT", bound="RequestBody")


class InvalidBodyError(ValueError):
    """Corpo da requisição ausente, não-JSON ou com tipos inválidos."""


class RequestBody(BaseModel):
    """Base: ignora campos extras e aceita ids numéricos."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)


class VerifyInstagramBody(RequestBody):
    token: str = ""
    ig_id: str = ""


class SendDmBody(RequestBody):
    ig_id: str = ""
    message_text: str = ""
    kind: str = "custom"


class SendVerificationDmBody(RequestBody):
    ig_id: str = ""
    token_plain: str = ""


class GenerateVerificationBody(RequestBody):
    ig_id: str = ""
    event_id: str = ""


async def read_body(request: Request, model: type[BodyT]) -> BodyT:
    """Lê e valida o corpo JSON.

    Raises:
        InvalidBodyError: JSON inválido ou tipos incompatíveis.
    """
    try:
        return model.model_validate(parse_webhook_body(await request.body()))
    except (InvalidJsonError, ValidationError) as exc:
        raise InvalidBodyError(str(exc)) from exc
