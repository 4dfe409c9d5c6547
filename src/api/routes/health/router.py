"""Endpoints de health check para Cloud Run."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Literal

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

router = APIRouter()

SERVICE_NAME = "reeva-ingest"


class HealthResponse(BaseModel):
    """Resposta do health check."""

    status: str
    service: str
    timestamp: str
    version: str = "1.0.0"


@dataclass(frozen=True, slots=True)
class DependencyCheck:
    """Resultado de checagem de dependência."""

    status: Literal["ok", "degraded", "failed", "skipped"]
    latency_ms: float | None = None
    error: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "latency_ms": self.latency_ms,
            "error": self.error,
        }


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness probe: verifica se o serviço está rodando."""
    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/ready")
async def readiness_check(request: Request) -> JSONResponse:
    """Readiness probe: container montado e Firestore acessível."""
    container = getattr(request.app.state, "container", None)
    if container is None:
        firestore_check = DependencyCheck(status="failed", error="container_not_ready")
    elif container.firestore_client is None:
        firestore_check = DependencyCheck(status="skipped")
    else:
        firestore_check = await _check_firestore(container.firestore_client)

    ready = firestore_check.status in {"ok", "degraded", "skipped"}
    payload = {
        "status": "ready" if ready else "not_ready",
        "checks": {"firestore": firestore_check.as_dict()},
        "timestamp": datetime.now(UTC).isoformat(),
    }
    return JSONResponse(content=payload, status_code=200 if ready else 503)


async def _check_firestore(firestore_client: Any) -> DependencyCheck:
    started_at = time.perf_counter()
    try:
        exists = await asyncio.wait_for(
            asyncio.to_thread(_read_firestore_health_doc, firestore_client),
            timeout=3.0,
        )
    except TimeoutError:
        return DependencyCheck(status="failed", error="timeout")
    except Exception as exc:
        return DependencyCheck(status="failed", error=type(exc).__name__)
    latency_ms = (time.perf_counter() - started_at) * 1000
    status = "ok" if exists else "degraded"
    return DependencyCheck(status=status, latency_ms=round(latency_ms, 2))


def _read_firestore_health_doc(firestore_client: Any) -> bool:
    doc = firestore_client.collection("_health").document("check").get()
    return bool(getattr(doc, "exists", False))
