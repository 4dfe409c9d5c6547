"""Payload builders do Instagram Messaging API."""

from api.payload_builders.instagram.text import MAX_TEXT_BYTES, TextPayloadBuilder

__all__ = ["MAX_TEXT_BYTES", "TextPayloadBuilder"]
