"""Publisher de eventos no Google Cloud Tasks.

Cada evento vira uma HTTP task para o consumidor, com:
    - nome determinístico derivado de `ig_msg_{mid}` (dedupe nativo:
      nome repetido resulta em AlreadyExists)
    - token OIDC da service account invocadora
    - dispatch_deadline limitado
"""

from __future__ import annotations

import hashlib
import json
import logging
from typing import TYPE_CHECKING

from google.api_core import exceptions as gexc
from google.cloud import tasks_v2
from google.protobuf import duration_pb2

from app.observability import get_correlation_id
from app.protocols.queue import EventPublisherProtocol, PublishOutcome, dedupe_key_for
from utils.errors import QueuePublishError

if TYPE_CHECKING:
    from app.protocols.models import MessagingEvent
    from config.settings import CloudTasksSettings

logger = logging.getLogger(__name__)

TASK_ID_PREFIX = "ig_msg_"


def task_id_for(mid: str) -> str:
    """Id de task válido (letras, números, _ e -) derivado do `mid`."""
    return TASK_ID_PREFIX + hashlib.sha256(mid.encode("utf-8")).hexdigest()


class CloudTasksEventPublisher(EventPublisherProtocol):
    """Publica eventos como HTTP tasks autenticadas por OIDC.

    Args:
        client: tasks_v2.CloudTasksAsyncClient
        settings: CloudTasksSettings
        project_id: Projeto efetivo da fila
    """

    def __init__(
        self,
        client: tasks_v2.CloudTasksAsyncClient,
        settings: CloudTasksSettings,
        project_id: str,
    ) -> None:
        self._client = client
        self._settings = settings
        self._project_id = project_id
        self._parent = client.queue_path(project_id, settings.location, settings.queue_ingestion)

    def build_task(self, event: MessagingEvent) -> tasks_v2.Task:
        """Monta a task HTTP do evento."""
        headers = {
            "Content-Type": "application/json",
            "X-Dedupe-Key": dedupe_key_for(event.mid),
        }
        correlation_id = get_correlation_id()
        if correlation_id:
            headers["X-Correlation-Id"] = correlation_id

        http_request = tasks_v2.HttpRequest(
            http_method=tasks_v2.HttpMethod.POST,
            url=self._settings.consumer_url,
            headers=headers,
            body=json.dumps(event.to_dict()).encode("utf-8"),
        )
        if self._settings.invoker_service_account:
            http_request.oidc_token = tasks_v2.OidcToken(
                service_account_email=self._settings.invoker_service_account,
                audience=self._settings.effective_audience,
            )

        return tasks_v2.Task(
            name=self._client.task_path(
                self._project_id,
                self._settings.location,
                self._settings.queue_ingestion,
                task_id_for(event.mid),
            ),
            http_request=http_request,
            dispatch_deadline=duration_pb2.Duration(
                seconds=self._settings.dispatch_deadline_seconds
            ),
        )

    async def publish(self, event: MessagingEvent) -> PublishOutcome:
        """Cria a task; nome repetido conta como deduplicado.

        Raises:
            QueuePublishError: Falha da API do Cloud Tasks.
        """
        task = self.build_task(event)
        try:
            await self._client.create_task(
                parent=self._parent,
                task=task,
                timeout=self._settings.publish_timeout_seconds,
            )
        except gexc.AlreadyExists:
            logger.info("queue_publish_deduplicated", extra={"mid": event.mid})
            return PublishOutcome.DEDUPLICATED
        except (gexc.GoogleAPICallError, gexc.RetryError) as exc:
            raise QueuePublishError(
                f"Falha ao publicar evento no Cloud Tasks: {type(exc).__name__}"
            ) from exc

        logger.info(
            "queue_published",
            extra={"mid": event.mid, "queue": self._settings.queue_ingestion},
        )
        return PublishOutcome.PUBLISHED
