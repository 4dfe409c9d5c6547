"""Testes do CloudTasksEventPublisher (cliente simulado)."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from google.api_core import exceptions as gexc

from app.infra.queue.cloud_tasks_publisher import CloudTasksEventPublisher, task_id_for
from app.observability import reset_correlation_id, set_correlation_id
from app.protocols.queue import PublishOutcome
from config.settings import CloudTasksSettings
from tests.fakes.fake_instagram import CONSUMER_URL, INVOKER, make_event
from utils.errors import QueuePublishError

SETTINGS = CloudTasksSettings(
    backend="cloud_tasks",
    project_id="reeva-prod",
    consumer_url=CONSUMER_URL,
    invoker_service_account=INVOKER,
    dispatch_deadline_seconds=30,
)
QUEUE_PATH = "projects/reeva-prod/locations/us-central1/queues/instagram-ingestion"


def _task_path(project: str, location: str, queue: str, task: str) -> str:
    return f"projects/{project}/locations/{location}/queues/{queue}/tasks/{task}"


def _client(create_task: AsyncMock | None = None) -> MagicMock:
    client = MagicMock()
    client.queue_path.return_value = QUEUE_PATH
    client.task_path.side_effect = _task_path
    client.create_task = create_task or AsyncMock()
    return client


def test_task_id_is_deterministic_and_valid() -> None:
    first = task_id_for("m_abc/def==")
    assert first == task_id_for("m_abc/def==")
    assert first != task_id_for("other")
    assert first.startswith("ig_msg_")
    assert all(ch.isalnum() or ch in "_-" for ch in first)


def test_build_task() -> None:
    client = _client()
    publisher = CloudTasksEventPublisher(client, SETTINGS, "reeva-prod")

    token = set_correlation_id("corr-1")
    try:
        task = publisher.build_task(make_event())
    finally:
        reset_correlation_id(token)

    client.queue_path.assert_called_once_with("reeva-prod", "us-central1", "instagram-ingestion")
    assert task.name.endswith("/tasks/" + task_id_for("M1"))
    assert task.http_request.url == CONSUMER_URL
    assert json.loads(task.http_request.body) == make_event().to_dict()
    assert task.http_request.headers["X-Dedupe-Key"] == "ig_msg_M1"
    assert task.http_request.headers["X-Correlation-Id"] == "corr-1"
    assert task.http_request.oidc_token.service_account_email == INVOKER
    assert task.http_request.oidc_token.audience == CONSUMER_URL
    assert task.dispatch_deadline.seconds == 30


@pytest.mark.asyncio
async def test_publish_creates_task() -> None:
    client = _client()
    publisher = CloudTasksEventPublisher(client, SETTINGS, "reeva-prod")

    outcome = await publisher.publish(make_event())

    assert outcome is PublishOutcome.PUBLISHED
    kwargs = client.create_task.await_args.kwargs
    assert kwargs["parent"] == client.queue_path.return_value
    assert kwargs["timeout"] == SETTINGS.publish_timeout_seconds


@pytest.mark.asyncio
async def test_existing_task_is_deduplicated() -> None:
    client = _client(AsyncMock(side_effect=gexc.AlreadyExists("task exists")))
    publisher = CloudTasksEventPublisher(client, SETTINGS, "reeva-prod")

    assert await publisher.publish(make_event()) is PublishOutcome.DEDUPLICATED


@pytest.mark.asyncio
async def test_api_failure_raises_publish_error() -> None:
    client = _client(AsyncMock(side_effect=gexc.ServiceUnavailable("down")))
    publisher = CloudTasksEventPublisher(client, SETTINGS, "reeva-prod")

    with pytest.raises(QueuePublishError, match="ServiceUnavailable"):
        await publisher.publish(make_event())
