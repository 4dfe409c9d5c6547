"""Hand-off para processamento downstream."""

from app.infra.handoff.logging_handoff import LoggingHandoff

__all__ = ["LoggingHandoff"]
