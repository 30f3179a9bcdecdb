"""Implementação de SessionStore em memória (apenas dev/testes)."""

from __future__ import annotations

import threading
from typing import Any

from firestore_sessions.infra.session_contract import SessionStore


class InMemorySessionStore(SessionStore):
    """Armazenamento em memória (não usar em produção).

    Guarda os mesmos bytes que iriam para o Firestore, então o caminho de
    serialização é exercitado por completo.
    """

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._documents: dict[tuple[str, str], bytes] = {}
        self._lock = threading.Lock()

    def _read_document(self, name: str, identity: str) -> bytes | None:
        with self._lock:
            return self._documents.get((name, identity))

    def _write_document(self, name: str, identity: str, data: bytes) -> None:
        with self._lock:
            self._documents[(name, identity)] = data

    def _delete_document(self, name: str, identity: str) -> None:
        with self._lock:
            self._documents.pop((name, identity), None)

    def _list_identities(self, name: str) -> list[str]:
        with self._lock:
            return [identity for (coll, identity) in self._documents if coll == name]
