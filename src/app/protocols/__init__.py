"""Protocolos e contratos do core da aplicação."""

from .handoff import DownstreamHandoffProtocol
from .http_client import InstagramHttpClientProtocol
from .models import (
    DeliveryResult,
    HandoffResult,
    IngestionResult,
    InstagramProfile,
    IssuedToken,
    LinkResult,
    MediaAttachment,
    MediaItemRecord,
    MessageRecord,
    MessagingEvent,
    OutboundMessageRecord,
    ProfileMetadata,
    PublishSummary,
    VerificationTokenRecord,
)
from .outbound_sender import DirectMessageSenderProtocol, ProfileLookupProtocol
from .queue import EventPublisherProtocol, PublishOutcome, dedupe_key_for
from .session_user import SessionUserResolverProtocol
from .stores import (
    MediaStoreProtocol,
    MessageStoreProtocol,
    OutboundMessageStoreProtocol,
    ProfileStoreProtocol,
    VerificationTokenStoreProtocol,
)

__all__ = [
    "DeliveryResult",
    "DirectMessageSenderProtocol",
    "DownstreamHandoffProtocol",
    "EventPublisherProtocol",
    "HandoffResult",
    "IngestionResult",
    "InstagramHttpClientProtocol",
    "InstagramProfile",
    "IssuedToken",
    "LinkResult",
    "MediaAttachment",
    "MediaItemRecord",
    "MediaStoreProtocol",
    "MessageRecord",
    "MessageStoreProtocol",
    "MessagingEvent",
    "OutboundMessageRecord",
    "OutboundMessageStoreProtocol",
    "ProfileLookupProtocol",
    "ProfileMetadata",
    "ProfileStoreProtocol",
    "PublishOutcome",
    "PublishSummary",
    "SessionUserResolverProtocol",
    "VerificationTokenRecord",
    "VerificationTokenStoreProtocol",
    "dedupe_key_for",
]
