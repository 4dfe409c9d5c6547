"""Testes do token de serviço e do resolvedor de sessão."""

from __future__ import annotations

import pytest

from app.infra.auth import ServiceTokenResult, TrustedHeaderSessionResolver, check_service_token
from tests.fakes.fake_instagram import SERVICE_TOKEN, build_request


class TestCheckServiceToken:
    """Comparação do x-service-token."""

    def test_match(self) -> None:
        assert check_service_token(SERVICE_TOKEN, SERVICE_TOKEN) is ServiceTokenResult.OK

    @pytest.mark.parametrize("provided", [None, "", "wrong", SERVICE_TOKEN + "x"])
    def test_mismatch(self, provided: str | None) -> None:
        assert check_service_token(provided, SERVICE_TOKEN) is ServiceTokenResult.INVALID

    def test_not_configured(self) -> None:
        assert check_service_token(SERVICE_TOKEN, "") is ServiceTokenResult.NOT_CONFIGURED


class TestTrustedHeaderSessionResolver:
    """Usuário repassado pelo app web confiável."""

    @pytest.mark.asyncio
    async def test_resolves_user(self) -> None:
        request = build_request(
            headers={"x-service-token": SERVICE_TOKEN, "x-user-id": " user-1 "}
        )

        assert await TrustedHeaderSessionResolver(SERVICE_TOKEN).resolve(request) == "user-1"

    @pytest.mark.asyncio
    async def test_user_header_without_service_token_is_ignored(self) -> None:
        request = build_request(headers={"x-user-id": "user-1"})

        assert await TrustedHeaderSessionResolver(SERVICE_TOKEN).resolve(request) is None

    @pytest.mark.asyncio
    async def test_missing_user_header(self) -> None:
        request = build_request(headers={"x-service-token": SERVICE_TOKEN})

        assert await TrustedHeaderSessionResolver(SERVICE_TOKEN).resolve(request) is None

    @pytest.mark.asyncio
    async def test_unconfigured_token_never_resolves(self) -> None:
        request = build_request(headers={"x-service-token": "", "x-user-id": "user-1"})

        assert await TrustedHeaderSessionResolver("").resolve(request) is None
