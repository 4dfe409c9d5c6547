"""Use cases específicos de Instagram."""

from .ingest_messaging_event import IngestMessagingEventUseCase

__all__ = ["IngestMessagingEventUseCase"]
