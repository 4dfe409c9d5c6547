"""Logging estruturado JSON do reeva-ingest.

Uso:
    from config.logging import configure_logging, get_logger

    configure_logging(level="INFO", service_name="reeva_ingest")
    logger = get_logger(__name__)
    logger.info("dm_sent", extra={"outbound_message_id": "..."})

Todo log carrega correlation_id e service. Tokens em texto claro,
access tokens e texto de mensagens nunca chegam ao handler.
"""

from config.logging.config import (
    DEFAULT_SERVICE_NAME,
    configure_logging,
    get_logger,
    log_best_effort_failure,
)
from config.logging.filters import CorrelationIdFilter, SensitiveFieldFilter
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "DEFAULT_SERVICE_NAME",
    "FIELD_RENAME_MAP",
    "REQUIRED_LOG_FIELDS",
    "CorrelationIdFilter",
    "SensitiveFieldFilter",
    "configure_logging",
    "create_json_formatter",
    "get_logger",
    "log_best_effort_failure",
]
