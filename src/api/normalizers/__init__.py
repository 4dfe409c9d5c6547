"""Normalizers por canal: conversão de payloads externos para modelos internos.

Estrutura:
- instagram/: extrator de eventos de DM do Instagram Messaging API
"""

from .instagram import extract_messaging_events

__all__ = ["extract_messaging_events"]
