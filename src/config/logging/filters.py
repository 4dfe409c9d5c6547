"""Filters de logging para contexto e higiene dos records.

- CorrelationIdFilter: injeta correlation_id e service
- SensitiveFieldFilter: mascara campos sensíveis passados via `extra`
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

REDACTED = "[redacted]"

SENSITIVE_FIELDS = frozenset(
    {
        "token",
        "token_plain",
        "access_token",
        "authorization",
        "message_text",
        "text",
        "service_token",
    }
)


class CorrelationIdFilter(logging.Filter):
    """Injeta correlation_id e service em cada record de log.

    correlation_id passado explicitamente via `extra` é preservado.
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_correlation_id = correlation_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        existing = getattr(record, "correlation_id", None)
        record.correlation_id = existing if existing else self._get_correlation_id()
        record.service = self._service_name
        return True


class SensitiveFieldFilter(logging.Filter):
    """Mascara atributos sensíveis do record (tokens, texto de DM).

    Não descarta records; apenas substitui o valor por REDACTED.
    """

    def __init__(self, fields: frozenset[str] = SENSITIVE_FIELDS) -> None:
        super().__init__()
        self._fields = fields

    def filter(self, record: logging.LogRecord) -> bool:
        for field in self._fields:
            if field in record.__dict__ and record.__dict__[field]:
                record.__dict__[field] = REDACTED
        return True
