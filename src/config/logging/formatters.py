"""Formatter JSON dos logs estruturados.

Saída compatível com Cloud Logging: `level` e `logger` no lugar de
`levelname` e `name`, demais campos de `extra` no nível raiz.
"""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

# Ordem estável na linha de log
REQUIRED_LOG_FIELDS = (
    "asctime",
    "levelname",
    "name",
    "message",
    "correlation_id",
    "service",
)

FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}


def create_json_formatter() -> JsonFormatter:
    """Cria formatter JSON com campos padronizados.

    Exemplo:
        {"asctime": "...", "level": "INFO", "logger": "app.services...",
         "message": "dm_sent", "correlation_id": "...",
         "service": "reeva_ingest", "attempt": 1}
    """
    format_string = " ".join(f"%({field})s" for field in REQUIRED_LOG_FIELDS)
    return JsonFormatter(format_string, rename_fields=FIELD_RENAME_MAP)
