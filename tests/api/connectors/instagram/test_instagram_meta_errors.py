"""Testes da classificação de erros da Graph API."""

from __future__ import annotations

from api.connectors.instagram.meta_errors import is_permanent_error, parse_meta_error


def test_parse_meta_error_returns_none_without_error() -> None:
    assert parse_meta_error({"message_id": "m"}) is None
    assert parse_meta_error([]) is None
    assert parse_meta_error({"error": "texto"}) is None


def test_parse_meta_error_extracts_fields() -> None:
    error = parse_meta_error(
        {
            "error": {
                "message": "Invalid OAuth access token",
                "type": "OAuthException",
                "code": 190,
                "error_subcode": 463,
            }
        }
    )

    assert error is not None
    assert error.error_type == "OAuthException"
    assert error.error_code == 190
    assert error.error_subcode == 463
    assert error.is_permanent is True


def test_throttling_codes_are_transient() -> None:
    assert is_permanent_error(4, "OAuthException") is False
    assert is_permanent_error(613, "IGApiException") is False
    assert is_permanent_error(2, "unknown") is False


def test_classification_by_code_when_type_unknown() -> None:
    assert is_permanent_error(9999, "unknown") is False
    assert is_permanent_error(100, "unknown") is True
