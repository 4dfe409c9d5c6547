"""Settings do Cloud Tasks.

Configurações da fila de ingestão (webhook -> consumidor).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

QueueBackend = Literal["memory", "cloud_tasks"]


@dataclass(frozen=True)
class CloudTasksSettings:
    """Configurações do Cloud Tasks.

    Attributes:
        backend: Backend para filas (memory|cloud_tasks)
        project_id: ID do projeto GCP
        location: Região da fila
        queue_ingestion: Nome da fila de ingestão
        consumer_url: URL absoluta do endpoint consumidor
        invoker_service_account: Service account usada no token OIDC
        oidc_audience: Audience do token OIDC (padrão: consumer_url)
        publish_timeout_seconds: Timeout da publicação (abaixo do prazo do Meta)
        max_delivery_attempts: Máximo de entregas por evento
        dispatch_deadline_seconds: Prazo de cada entrega ao consumidor
    """

    backend: QueueBackend = "memory"
    project_id: str = ""
    location: str = "us-central1"
    queue_ingestion: str = "instagram-ingestion"
    consumer_url: str = ""
    invoker_service_account: str = ""
    oidc_audience: str = ""
    publish_timeout_seconds: float = 5.0
    max_delivery_attempts: int = 3
    dispatch_deadline_seconds: int = 30

    @property
    def effective_audience(self) -> str:
        """Audience efetiva do token OIDC."""
        return self.oidc_audience or self.consumer_url

    def validate(self, gcp_project: str, is_development: bool) -> list[str]:
        """Valida configurações do Cloud Tasks.

        Args:
            gcp_project: Projeto GCP padrão.
            is_development: Se está em ambiente de desenvolvimento.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.backend not in ("memory", "cloud_tasks"):
            errors.append(f"QUEUE_BACKEND inválido: {self.backend}")

        if self.backend == "memory" and not is_development:
            errors.append(
                "QUEUE_BACKEND=memory proibido em staging/production. "
                "Use cloud_tasks."
            )

        if self.backend == "cloud_tasks":
            if not (self.project_id or gcp_project):
                errors.append(
                    "QUEUE_BACKEND=cloud_tasks requer "
                    "CLOUD_TASKS_PROJECT_ID ou GCP_PROJECT"
                )
            if not self.location:
                errors.append("CLOUD_TASKS_LOCATION não pode ser vazio")
            if not self.consumer_url:
                errors.append("CLOUD_TASKS_CONSUMER_URL não configurado")
            if not self.invoker_service_account and not is_development:
                errors.append("CLOUD_TASKS_INVOKER_SERVICE_ACCOUNT não configurado")

        if self.publish_timeout_seconds <= 0:
            errors.append("CLOUD_TASKS_PUBLISH_TIMEOUT_SECONDS deve ser > 0")

        if self.max_delivery_attempts < 1:
            errors.append("CLOUD_TASKS_MAX_DELIVERY_ATTEMPTS deve ser >= 1")

        return errors


def _load_cloud_tasks_from_env() -> CloudTasksSettings:
    """Carrega CloudTasksSettings de variáveis de ambiente."""
    backend_str = os.getenv("QUEUE_BACKEND", "memory").lower()
    backend: QueueBackend = "cloud_tasks" if backend_str == "cloud_tasks" else "memory"

    return CloudTasksSettings(
        backend=backend,
        project_id=os.getenv("CLOUD_TASKS_PROJECT_ID", ""),
        location=os.getenv("CLOUD_TASKS_LOCATION", "us-central1"),
        queue_ingestion=os.getenv(
            "CLOUD_TASKS_QUEUE_INGESTION", "instagram-ingestion"
        ),
        consumer_url=os.getenv("CLOUD_TASKS_CONSUMER_URL", ""),
        invoker_service_account=os.getenv("CLOUD_TASKS_INVOKER_SERVICE_ACCOUNT", ""),
        oidc_audience=os.getenv("CLOUD_TASKS_OIDC_AUDIENCE", ""),
        publish_timeout_seconds=float(
            os.getenv("CLOUD_TASKS_PUBLISH_TIMEOUT_SECONDS", "5")
        ),
        max_delivery_attempts=int(os.getenv("CLOUD_TASKS_MAX_DELIVERY_ATTEMPTS", "3")),
        dispatch_deadline_seconds=int(
            os.getenv("CLOUD_TASKS_DISPATCH_DEADLINE_SECONDS", "30")
        ),
    )


@lru_cache(maxsize=1)
def get_cloud_tasks_settings() -> CloudTasksSettings:
    """Retorna instância cacheada de CloudTasksSettings."""
    return _load_cloud_tasks_from_env()
