"""Testes da classificação de falhas do consumidor."""

from __future__ import annotations

import httpx
import pytest
from google.api_core import exceptions as gexc

from app.infra.http import HttpError
from app.services import RetryDecision, classify_error, is_retryable
from utils.errors import (
    AuthenticationError,
    FirestoreUnavailableError,
    InvalidEventError,
    InvalidTimestampError,
    StoreTimeoutError,
)


@pytest.mark.parametrize(
    "exc",
    [
        TimeoutError(),
        httpx.ReadTimeout("read"),
        gexc.DeadlineExceeded("deadline"),
        ConnectionError("reset"),
        gexc.ServiceUnavailable("unavailable"),
        FirestoreUnavailableError("down"),
        StoreTimeoutError("slow"),
        HttpError("http_retryable_status", status_code=503, is_retryable=True),
        RuntimeError("unexpected"),
        ValueError("request timed out"),
    ],
)
def test_retryable_errors(exc: Exception) -> None:
    assert classify_error(exc) is RetryDecision.RETRYABLE
    assert is_retryable(exc) is True


@pytest.mark.parametrize(
    "exc",
    [
        InvalidTimestampError("Invalid timestamp: 'x'"),
        InvalidEventError(["mid"]),
        ValueError("bad"),
        PermissionError("nope"),
        AuthenticationError("no credential"),
        gexc.PermissionDenied("denied"),
        HttpError("Meta API error: OAuthException (190): invalid token", status_code=190),
        RuntimeError("Unauthorized caller"),
    ],
)
def test_permanent_errors(exc: Exception) -> None:
    assert classify_error(exc) is RetryDecision.PERMANENT
    assert is_retryable(exc) is False


def test_timeout_takes_priority_over_validation() -> None:
    assert classify_error(ValueError("validation timeout")) is RetryDecision.RETRYABLE
