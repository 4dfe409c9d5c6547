"""Settings dos stores de persistência.

Seleciona backend (memory|firestore) e o timeout aplicado a cada chamada.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

StoreBackend = Literal["memory", "firestore"]


@dataclass(frozen=True)
class StoreSettings:
    """Configurações de persistência.

    Attributes:
        backend: Backend dos stores (memory|firestore)
        timeout_seconds: Timeout por chamada ao store
    """

    backend: StoreBackend = "memory"
    timeout_seconds: float = 10.0

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações de persistência.

        Args:
            base: BaseSettings para verificar ambiente.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.backend not in ("memory", "firestore"):
            errors.append(f"STORE_BACKEND inválido: {self.backend}")

        if self.backend == "memory" and not base.is_development:
            errors.append(
                "STORE_BACKEND=memory proibido em staging/production. Use firestore."
            )

        if self.timeout_seconds <= 0:
            errors.append("STORE_TIMEOUT_SECONDS deve ser > 0")

        return errors


def _load_store_from_env() -> StoreSettings:
    """Carrega StoreSettings de variáveis de ambiente."""
    backend_str = os.getenv("STORE_BACKEND", "memory").lower()
    backend: StoreBackend = "firestore" if backend_str == "firestore" else "memory"
    return StoreSettings(
        backend=backend,
        timeout_seconds=float(os.getenv("STORE_TIMEOUT_SECONDS", "10")),
    )


@lru_cache(maxsize=1)
def get_store_settings() -> StoreSettings:
    """Retorna instância cacheada de StoreSettings."""
    return _load_store_from_env()
