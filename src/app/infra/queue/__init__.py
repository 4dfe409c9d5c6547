"""Fila de ingestão: publishers concretos."""

from app.infra.queue.cloud_tasks_publisher import CloudTasksEventPublisher, task_id_for
from app.infra.queue.memory_publisher import InMemoryEventPublisher

__all__ = ["CloudTasksEventPublisher", "InMemoryEventPublisher", "task_id_for"]
