"""Normalizer Instagram: extração de eventos de DM do webhook."""

from api.normalizers.instagram.extractor import extract_messaging_events

__all__ = ["extract_messaging_events"]
