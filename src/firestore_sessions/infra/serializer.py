"""Serialização dos valores de sessão para o documento persistido.

Formato: JSON compacto em UTF-8 com chaves ordenadas (determinístico).
Antes de codificar, os valores são validados contra a união fechada
SessionValue; tipos fora dela (tuple, set, bytes, objetos) são rejeitados.

Limite de tamanho:
- Verificado apenas no encode (caminho de escrita)
- Estouro gera MaxLengthExceededError, nunca EncodingError
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import TypeAdapter, ValidationError

from firestore_sessions.domain.errors import (
    DecodingError,
    EncodingError,
    MaxLengthExceededError,
)
from firestore_sessions.domain.session import SessionValues

# Abaixo do limite de 1 MiB por documento do Firestore (sobra para
# nome do documento e do campo).
MAX_LENGTH: int = 1_000_000

_values_adapter: TypeAdapter[SessionValues] = TypeAdapter(SessionValues)


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors(include_url=False)
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location or '<root>'}: {first.get('msg', 'invalid value')}"


class SessionSerializer:
    """Codifica/decodifica o mapa de valores da sessão."""

    def __init__(self, max_length: int = MAX_LENGTH) -> None:
        if max_length <= 0:
            raise ValueError("max_length deve ser positivo")
        self._max_length = max_length

    @property
    def max_length(self) -> int:
        return self._max_length

    def encode(self, values: Any) -> bytes:
        """Codifica values em bytes.

        Raises:
            EncodingError: valor de tipo não suportado
            MaxLengthExceededError: resultado maior que max_length
        """
        try:
            validated = _values_adapter.validate_python(values, strict=True)
        except ValidationError as e:
            raise EncodingError(f"unsupported session value at {_first_error(e)}") from e

        try:
            encoded = json.dumps(
                validated,
                sort_keys=True,
                separators=(",", ":"),
                ensure_ascii=False,
            ).encode("utf-8")
        except (TypeError, ValueError, RecursionError) as e:
            raise EncodingError(f"failed to encode session values: {e}") from e

        if len(encoded) > self._max_length:
            raise MaxLengthExceededError(len(encoded), self._max_length)

        return encoded

    def decode(self, data: bytes) -> SessionValues:
        """Reconstrói o mapa de valores a partir de bytes.

        Raises:
            DecodingError: conteúdo malformado, truncado ou de formato inválido
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise DecodingError(f"expected bytes, got {type(data).__name__}")

        try:
            raw = json.loads(bytes(data).decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as e:
            raise DecodingError(f"malformed session document: {e}") from e

        try:
            return _values_adapter.validate_python(raw, strict=True)
        except ValidationError as e:
            raise DecodingError(f"invalid session document at {_first_error(e)}") from e
