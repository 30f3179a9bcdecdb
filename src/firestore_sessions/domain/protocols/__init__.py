"""Re-exports dos Protocolos de domínio."""

from __future__ import annotations

from firestore_sessions.domain.protocols.session_store import SessionStoreProtocol

__all__ = [
    "SessionStoreProtocol",
]
