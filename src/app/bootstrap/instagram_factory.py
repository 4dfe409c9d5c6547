"""Factory do canal Instagram: monta o container de serviços.

O container é criado uma vez no lifespan e guardado em
`app.state.container`; rotas leem dele, nunca de globais de módulo.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from api.connectors.instagram import InstagramGraphGateway, create_instagram_http_client
from app.bootstrap.dependencies import StoreBundle, create_event_publisher, create_stores
from app.coordinators.instagram import QueueBridge
from app.infra.auth import CloudTasksOidcVerifier, TrustedHeaderSessionResolver
from app.infra.handoff import LoggingHandoff
from app.infra.queue import InMemoryEventPublisher
from app.services import (
    AccountLinkService,
    MediaStoreService,
    OutboundDeliveryService,
    VerificationTokenService,
)
from app.use_cases.instagram import IngestMessagingEventUseCase

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    import httpx

    from app.protocols.handoff import DownstreamHandoffProtocol
    from app.protocols.outbound_sender import ProfileLookupProtocol
    from app.protocols.queue import EventPublisherProtocol
    from app.protocols.session_user import SessionUserResolverProtocol
    from config.settings import (
        BaseSettings,
        CloudTasksSettings,
        FirestoreSettings,
        InstagramSettings,
        StoreSettings,
    )

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ServiceContainer:
    """Dependências resolvidas do serviço."""

    base_settings: BaseSettings
    instagram_settings: InstagramSettings
    cloud_tasks_settings: CloudTasksSettings
    stores: StoreBundle
    token_service: VerificationTokenService
    delivery: OutboundDeliveryService
    media_service: MediaStoreService
    account_link: AccountLinkService
    ingest_use_case: IngestMessagingEventUseCase
    publisher: EventPublisherProtocol
    queue_bridge: QueueBridge
    oidc_verifier: CloudTasksOidcVerifier
    session_resolver: SessionUserResolverProtocol
    profile_lookup: ProfileLookupProtocol
    firestore_client: Any | None = None
    cloud_tasks_client: Any | None = None


def build_container(
    *,
    base: BaseSettings,
    instagram: InstagramSettings,
    cloud_tasks: CloudTasksSettings,
    store_settings: StoreSettings,
    firestore_settings: FirestoreSettings,
    firestore_client: Any | None = None,
    cloud_tasks_client: Any | None = None,
    http_transport: httpx.AsyncBaseTransport | None = None,
    handoff: DownstreamHandoffProtocol | None = None,
    session_resolver: SessionUserResolverProtocol | None = None,
    oidc_verify_func: Callable[..., dict[str, Any]] | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> ServiceContainer:
    """Conecta implementações concretas aos protocolos.

    Args:
        base: Settings gerais
        instagram: Settings da Graph API e textos de DM
        cloud_tasks: Settings da fila de ingestão
        store_settings: Backend de persistência
        firestore_settings: Collections Firestore
        firestore_client: Cliente Firestore (obrigatório com backend firestore)
        cloud_tasks_client: Cliente Cloud Tasks (obrigatório com backend cloud_tasks)
        http_transport: Transport httpx alternativo (testes)
        handoff: Processamento downstream (padrão: LoggingHandoff)
        session_resolver: Resolução do usuário do app web
        oidc_verify_func: Verificação de ID token alternativa (testes)
        sleep: Espera entre tentativas de envio

    Returns:
        ServiceContainer pronto para uso pelas rotas.
    """
    stores = create_stores(store_settings, firestore_settings, firestore_client)

    gateway = InstagramGraphGateway(
        create_instagram_http_client(instagram, transport=http_transport),
        instagram,
    )
    token_service = VerificationTokenService(stores.tokens, ttl_seconds=instagram.token_ttl_seconds)
    delivery = OutboundDeliveryService(
        gateway,
        stores.outbound,
        max_attempts=instagram.send_max_attempts,
        backoff_base_seconds=instagram.backoff_base_seconds,
        backoff_max_seconds=instagram.backoff_max_seconds,
        sleep=sleep,
    )
    media_service = MediaStoreService(stores.media)
    ingest_use_case = IngestMessagingEventUseCase(
        profiles=stores.profiles,
        messages=stores.messages,
        tokens=token_service,
        delivery=delivery,
        media=media_service,
        handoff=handoff or LoggingHandoff(),
        app_base_url=instagram.app_base_url,
    )

    publisher = create_event_publisher(cloud_tasks, base.gcp_project, cloud_tasks_client)
    publish_timeout: float | None = cloud_tasks.publish_timeout_seconds
    if isinstance(publisher, InMemoryEventPublisher):
        publisher.set_handler(ingest_use_case.execute)
        # Ingestão inline: limitada pelos timeouts de store e Graph API
        publish_timeout = None

    container = ServiceContainer(
        base_settings=base,
        instagram_settings=instagram,
        cloud_tasks_settings=cloud_tasks,
        stores=stores,
        token_service=token_service,
        delivery=delivery,
        media_service=media_service,
        account_link=AccountLinkService(token_service, stores.profiles),
        ingest_use_case=ingest_use_case,
        publisher=publisher,
        queue_bridge=QueueBridge(publisher, publish_timeout),
        oidc_verifier=CloudTasksOidcVerifier(
            cloud_tasks.effective_audience,
            cloud_tasks.invoker_service_account,
            required=not base.is_development,
            verify_func=oidc_verify_func,
        ),
        session_resolver=session_resolver
        or TrustedHeaderSessionResolver(base.internal_service_token),
        profile_lookup=gateway,
        firestore_client=firestore_client,
        cloud_tasks_client=cloud_tasks_client,
    )
    logger.info(
        "service_container_built",
        extra={
            "store_backend": store_settings.backend,
            "queue_backend": cloud_tasks.backend,
            "environment": base.environment,
        },
    )
    return container
