"""Coordinators do canal Instagram."""

from .queue_bridge import QueueBridge

__all__ = ["QueueBridge"]
