"""Base comum dos stores Firestore.

O SDK do Firestore é síncrono: toda chamada roda em `asyncio.to_thread`
limitada por `asyncio.wait_for`, e o próprio SDK recebe `timeout=`.

Mapeamento de erros:
    - AlreadyExists, FailedPrecondition, NotFound: repassados ao store
      (fazem parte do protocolo de unicidade/compare-and-set)
    - PermissionDenied, Unauthenticated: repassados (erro permanente)
    - DeadlineExceeded e timeout local: StoreTimeoutError
    - Demais GoogleAPICallError/RetryError: FirestoreUnavailableError
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
from typing import TYPE_CHECKING, Any, TypeVar

from google.api_core import exceptions as gexc

from utils.errors import FirestoreUnavailableError, StoreTimeoutError

if TYPE_CHECKING:
    from collections.abc import Callable

    from google.cloud.firestore import Client as FirestoreClient
    from google.cloud.firestore_v1.collection import CollectionReference

logger = logging.getLogger(__name__)

T = TypeVar("T")

_PASSTHROUGH_ERRORS: tuple[type[Exception], ...] = (
    gexc.AlreadyExists,
    gexc.FailedPrecondition,
    gexc.NotFound,
    gexc.PermissionDenied,
    gexc.Unauthenticated,
)

DEFAULT_TIMEOUT_SECONDS = 10.0

HASHED_ID_PREFIX = "sha256_"
_MAX_DOCUMENT_ID_BYTES = 1500


def document_id_for(value: str) -> str:
    """Id de documento derivado de um id externo opaco (`mid`, `ig_id`).

    Ids aceitos pelo Firestore são usados como estão. Ids com "/",
    reservados (".", "..", "__*__") ou acima de 1500 bytes viram
    `sha256_{hex}`; o valor original fica gravado como campo.
    """
    encoded = value.encode("utf-8")
    if (
        value
        and "/" not in value
        and value not in {".", ".."}
        and not (value.startswith("__") and value.endswith("__"))
        and len(encoded) <= _MAX_DOCUMENT_ID_BYTES
    ):
        return value
    return HASHED_ID_PREFIX + hashlib.sha256(encoded).hexdigest()


class FirestoreStoreBase:
    """Infraestrutura compartilhada: collection, timeout e erros.

    Args:
        firestore_client: Cliente Firestore (síncrono)
        collection: Nome da collection
        timeout_seconds: Timeout por chamada
    """

    def __init__(
        self,
        firestore_client: FirestoreClient,
        collection: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._db = firestore_client
        self._collection_name = collection
        self._timeout = timeout_seconds

    def _collection(self) -> CollectionReference:
        return self._db.collection(self._collection_name)

    async def _run(
        self,
        operation: str,
        func: Callable[..., T],
        *args: Any,
    ) -> T:
        """Executa chamada síncrona do SDK com timeout e mapeamento de erros."""
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(func, *args),
                timeout=self._timeout,
            )
        except _PASSTHROUGH_ERRORS:
            raise
        except TimeoutError as exc:
            logger.warning(
                "firestore_timeout",
                extra={
                    "collection": self._collection_name,
                    "operation": operation,
                    "timeout_seconds": self._timeout,
                },
            )
            raise StoreTimeoutError(
                f"Timeout em {self._collection_name}.{operation}"
            ) from exc
        except gexc.DeadlineExceeded as exc:
            raise StoreTimeoutError(
                f"Deadline excedido em {self._collection_name}.{operation}"
            ) from exc
        except (gexc.GoogleAPICallError, gexc.RetryError) as exc:
            logger.error(
                "firestore_unavailable",
                extra={
                    "collection": self._collection_name,
                    "operation": operation,
                    "error_type": type(exc).__name__,
                },
            )
            raise FirestoreUnavailableError(
                f"Firestore indisponível em {self._collection_name}.{operation}: {exc}"
            ) from exc
