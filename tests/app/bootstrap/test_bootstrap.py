"""Testes do bootstrap: validação de settings e montagem do container."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from app.bootstrap import create_service_container, validate_runtime_settings
from app.bootstrap.dependencies import create_event_publisher, create_stores
from app.infra.queue import CloudTasksEventPublisher, InMemoryEventPublisher
from app.infra.stores import FirestoreMessageStore, MemoryMessageStore
from config.settings import (
    CloudTasksSettings,
    FirestoreSettings,
    StoreSettings,
    get_base_settings,
    get_cloud_tasks_settings,
    get_firestore_settings,
    get_instagram_settings,
    get_store_settings,
)
from tests.fakes.fake_instagram import build_test_container

_GETTERS = (
    get_base_settings,
    get_cloud_tasks_settings,
    get_firestore_settings,
    get_instagram_settings,
    get_store_settings,
)


@pytest.fixture
def fresh_settings():
    for getter in _GETTERS:
        getter.cache_clear()
    yield
    for getter in _GETTERS:
        getter.cache_clear()


class TestValidateRuntimeSettings:
    """Falha rápida em staging/production."""

    def test_production_with_memory_backends_fails(
        self, monkeypatch: pytest.MonkeyPatch, fresh_settings: None
    ) -> None:
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("STORE_BACKEND", "memory")
        monkeypatch.setenv("QUEUE_BACKEND", "memory")

        with pytest.raises(RuntimeError, match="Configuração inválida para production"):
            validate_runtime_settings()

    def test_development_only_warns(
        self, monkeypatch: pytest.MonkeyPatch, fresh_settings: None
    ) -> None:
        monkeypatch.setenv("ENVIRONMENT", "development")
        monkeypatch.delenv("INSTAGRAM_ACCESS_TOKEN", raising=False)

        validate_runtime_settings()


class TestFactories:
    """Seleção de backend."""

    def test_memory_stores(self) -> None:
        bundle = create_stores(StoreSettings(), FirestoreSettings())
        assert isinstance(bundle.messages, MemoryMessageStore)

    def test_firestore_stores_use_configured_collections(self) -> None:
        client = MagicMock()
        bundle = create_stores(
            StoreSettings(backend="firestore", timeout_seconds=3.0),
            FirestoreSettings(collection_messages="ig_messages"),
            client,
        )

        assert isinstance(bundle.messages, FirestoreMessageStore)
        assert bundle.messages._collection_name == "ig_messages"
        assert bundle.messages._timeout == 3.0

    def test_firestore_without_client(self) -> None:
        with pytest.raises(ValueError, match="Firestore"):
            create_stores(StoreSettings(backend="firestore"), FirestoreSettings())

    def test_memory_publisher(self) -> None:
        assert isinstance(create_event_publisher(CloudTasksSettings(), ""), InMemoryEventPublisher)

    def test_cloud_tasks_publisher_uses_gcp_project_fallback(self) -> None:
        client = MagicMock()
        settings = CloudTasksSettings(backend="cloud_tasks", consumer_url="https://svc/q")

        publisher = create_event_publisher(settings, "reeva-prod", client)

        assert isinstance(publisher, CloudTasksEventPublisher)
        client.queue_path.assert_called_once_with(
            "reeva-prod", "us-central1", "instagram-ingestion"
        )

    def test_cloud_tasks_without_client(self) -> None:
        with pytest.raises(ValueError, match="Cloud Tasks"):
            create_event_publisher(CloudTasksSettings(backend="cloud_tasks"), "p")


class TestContainer:
    """Wiring do container."""

    def test_memory_publisher_delivers_to_use_case(self) -> None:
        container = build_test_container()

        assert isinstance(container.publisher, InMemoryEventPublisher)
        assert container.publisher._handler == container.ingest_use_case.execute
        assert container.queue_bridge._timeout is None
        assert container.profile_lookup is not None
        assert container.firestore_client is None

    def test_create_from_environment_in_development(
        self, monkeypatch: pytest.MonkeyPatch, fresh_settings: None
    ) -> None:
        monkeypatch.setenv("ENVIRONMENT", "development")
        monkeypatch.setenv("STORE_BACKEND", "memory")
        monkeypatch.setenv("QUEUE_BACKEND", "memory")

        container = create_service_container()

        assert container.base_settings.is_development
        assert container.cloud_tasks_client is None
        assert isinstance(container.stores.messages, MemoryMessageStore)
