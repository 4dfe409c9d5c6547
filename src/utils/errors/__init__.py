"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    AuthenticationError,
    FirestoreUnavailableError,
    InfrastructureError,
    InvalidEventError,
    InvalidTimestampError,
    ProfileAlreadyLinkedError,
    QueuePublishError,
    StoreTimeoutError,
)

__all__ = [
    "AuthenticationError",
    "FirestoreUnavailableError",
    "InfrastructureError",
    "InvalidEventError",
    "InvalidTimestampError",
    "ProfileAlreadyLinkedError",
    "QueuePublishError",
    "StoreTimeoutError",
]
