"""Cache em processo das sessões persistidas.

Guarda os bytes já codificados (o mesmo conteúdo do documento), de modo
que cada leitura reconstrói uma cópia independente dos valores.

Chaves:
- (nome, identity): entrada de cada sessão salva neste processo
- nome: aponta para a identity do último save daquele nome (latest)

Concorrência:
- Todas as operações passam por um único Lock
- Saves concorrentes para o mesmo nome: o último a concluir vence o latest
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CachedSession:
    identity: str
    data: bytes


class SessionCache:
    """Mapa (nome, identity) -> bytes persistidos, com limite LRU opcional.

    max_entries=None desativa o limite (crescimento ilimitado).
    """

    def __init__(self, max_entries: int | None = None) -> None:
        if max_entries is not None and max_entries <= 0:
            raise ValueError("max_entries deve ser positivo ou None")
        self._max_entries = max_entries
        self._entries: OrderedDict[tuple[str, str], bytes] = OrderedDict()
        self._latest: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, name: str, identity: str) -> CachedSession | None:
        with self._lock:
            return self._lookup(name, identity)

    def latest(self, name: str) -> CachedSession | None:
        """Última sessão salva para name, qualquer que seja a identity."""
        with self._lock:
            identity = self._latest.get(name)
            if identity is None:
                return None
            return self._lookup(name, identity)

    def put(self, name: str, identity: str, data: bytes) -> None:
        with self._lock:
            key = (name, identity)
            self._entries[key] = data
            self._entries.move_to_end(key)
            self._latest[name] = identity
            if self._max_entries is not None:
                while len(self._entries) > self._max_entries:
                    (old_name, old_identity), _ = self._entries.popitem(last=False)
                    if self._latest.get(old_name) == old_identity:
                        del self._latest[old_name]

    def discard_if(self, name: str, identity: str) -> bool:
        """Remove a entrada (name, identity) se existir; retorna se removeu."""
        with self._lock:
            if self._entries.pop((name, identity), None) is None:
                return False
            if self._latest.get(name) == identity:
                del self._latest[name]
            return True

    def discard(self, name: str) -> None:
        """Remove todas as entradas de name."""
        with self._lock:
            for key in [key for key in self._entries if key[0] == name]:
                del self._entries[key]
            self._latest.pop(name, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._latest.clear()

    def _lookup(self, name: str, identity: str) -> CachedSession | None:
        data = self._entries.get((name, identity))
        if data is None:
            return None
        self._entries.move_to_end((name, identity))
        return CachedSession(identity=identity, data=data)

    def __contains__(self, key: object) -> bool:
        """Aceita um nome ou uma tupla (nome, identity)."""
        with self._lock:
            if isinstance(key, tuple):
                return key in self._entries
            return any(name == key for name, _ in self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
