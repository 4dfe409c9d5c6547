"""Exceções compartilhadas entre camadas (infra, serviços e rotas)."""

from __future__ import annotations


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura transitórias."""


class FirestoreUnavailableError(InfrastructureError):
    """Falha de indisponibilidade ao acessar Firestore."""


class StoreTimeoutError(InfrastructureError):
    """Operação de store excedeu o timeout configurado."""


class QueuePublishError(InfrastructureError):
    """Falha ao publicar evento na fila de entrega."""


class InvalidTimestampError(ValueError):
    """Timestamp inbound não pôde ser convertido para data válida."""


class InvalidEventError(ValueError):
    """Evento normalizado sem campos obrigatórios."""

    def __init__(self, missing_fields: list[str]) -> None:
        super().__init__(f"Invalid event payload: missing {', '.join(missing_fields)}")
        self.missing_fields = missing_fields


class AuthenticationError(PermissionError):
    """Chamada sem credencial válida (token de serviço, OIDC, sessão)."""


class ProfileAlreadyLinkedError(ValueError):
    """Perfil Instagram já vinculado a outro usuário da aplicação."""

    def __init__(self, ig_id: str) -> None:
        super().__init__("Instagram account already linked to another user")
        self.ig_id = ig_id
