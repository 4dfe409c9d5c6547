"""Acesso das rotas ao container de serviços montado no lifespan."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from starlette.requests import Request

    from app.bootstrap.instagram_factory import ServiceContainer


def get_container(request: Request) -> ServiceContainer:
    """Retorna o container registrado em `app.state`.

    Raises:
        RuntimeError: App iniciada sem lifespan (container ausente).
    """
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise RuntimeError("ServiceContainer não inicializado")
    return container
