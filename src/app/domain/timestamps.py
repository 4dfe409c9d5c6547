"""Normalização de timestamps de eventos do Instagram.

O Meta envia epoch em milissegundos, mas payloads de teste e reenvios
manuais chegam em segundos, com fração decimal ou ISO-8601. Regra,
pela parte inteira do número:
    - 13 dígitos ou mais: milissegundos
    - menos dígitos: segundos
    - demais strings: ISO-8601 (sem fuso = UTC)
Resultado fora de 2020-2100 é rejeitado.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime

from utils.errors import InvalidTimestampError

MIN_YEAR = 2020
MAX_YEAR = 2100
MILLISECONDS_MIN_DIGITS = 13

_NUMERIC_RE = re.compile(r"-?(\d+)(?:\.\d+)?")


def normalize_timestamp(raw: str | int | float) -> datetime:
    """Converte o timestamp cru do evento em datetime UTC.

    Raises:
        InvalidTimestampError: Valor ilegível ou fora da faixa aceita.
    """
    value = str(raw).strip()
    if not value:
        raise InvalidTimestampError("Invalid timestamp: empty value")

    try:
        parsed = _parse(value)
    except (ValueError, OverflowError, OSError) as exc:
        raise InvalidTimestampError(f"Invalid timestamp: {value!r}") from exc

    if not MIN_YEAR <= parsed.year <= MAX_YEAR:
        raise InvalidTimestampError(f"Invalid timestamp: {value!r} out of range")
    return parsed


def _parse(value: str) -> datetime:
    match = _NUMERIC_RE.fullmatch(value)
    if match:
        number = float(value) if "." in value else int(value)
        if len(match.group(1)) >= MILLISECONDS_MIN_DIGITS:
            return datetime.fromtimestamp(number / 1000, tz=UTC)
        return datetime.fromtimestamp(number, tz=UTC)

    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)
