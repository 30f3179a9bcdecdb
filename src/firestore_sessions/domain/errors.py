"""Erros do session store.

Cada tipo representa uma condição distinta para o chamador:
- tamanho excedido (payload grande demais, erro do chamador)
- dados malformados (encode/decode)
- falha de I/O no backend
- violação de contrato no extrator de booking IDs
"""

from __future__ import annotations


class SessionError(Exception):
    """Base para todos os erros do session store."""

    pass


class SerializationError(SessionError):
    """Base para falhas do serializador."""

    pass


class EncodingError(SerializationError):
    """Valores da sessão não puderam ser codificados."""

    pass


class DecodingError(SerializationError):
    """Documento persistido malformado ou truncado."""

    pass


class MaxLengthExceededError(SerializationError):
    """Sessão codificada com sucesso, mas acima do limite de bytes."""

    def __init__(self, length: int, max_length: int) -> None:
        super().__init__(
            f"session exceeds max length: {length} bytes encoded, limit is {max_length} bytes"
        )
        self.length = length
        self.max_length = max_length


class PersistenceError(SessionError):
    """Falha de leitura/escrita no backend de documentos."""

    pass


class NilSessionError(SessionError):
    """Sessão ausente passada ao extrator (violação de contrato)."""

    pass


class TypeMismatchError(SessionError):
    """Valor armazenado não tem o formato esperado."""

    def __init__(self, key: str, expected: str, actual: str) -> None:
        super().__init__(f"session value {key!r} has type {actual}, expected {expected}")
        self.key = key
        self.expected = expected
        self.actual = actual
