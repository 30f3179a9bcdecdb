"""Camada de infraestrutura — serialização, cache e backends de sessão.

Uso típico:
    from firestore_sessions.infra import create_session_store

Conforme regras do projeto:
- Infraestrutura não decide regra de negócio
- Logs estruturados sem valores de sessão
"""

from firestore_sessions.infra.serializer import MAX_LENGTH, SessionSerializer
from firestore_sessions.infra.session_cache import CachedSession, SessionCache
from firestore_sessions.infra.session_contract import SessionStore
from firestore_sessions.infra.session_store import create_firestore_client, create_session_store
from firestore_sessions.infra.session_store_firestore import FirestoreSessionStore
from firestore_sessions.infra.session_store_memory import InMemorySessionStore

__all__ = [
    # Serialização
    "MAX_LENGTH",
    "SessionSerializer",
    # Cache
    "SessionCache",
    "CachedSession",
    # Session
    "SessionStore",
    "InMemorySessionStore",
    "FirestoreSessionStore",
    "create_session_store",
    "create_firestore_client",
]
