"""Rotas HTTP da API: adapters de entrada.

Responsabilidades:
- Definir endpoints HTTP (webhook, consumidor da fila, internas, health)
- Validação inicial de request (headers, query params, corpo)
- Delegação para use cases e services do container
- Respostas HTTP apropriadas

Estrutura:
- routes/instagram/: endpoints Instagram
- routes/health/: health checks e readiness
- router.py: registra todos os routers no app principal
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
