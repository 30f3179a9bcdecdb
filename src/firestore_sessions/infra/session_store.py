"""Factory do session store conforme settings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from firestore_sessions.infra.serializer import SessionSerializer
from firestore_sessions.infra.session_cache import SessionCache
from firestore_sessions.infra.session_contract import SessionStore
from firestore_sessions.infra.session_store_memory import InMemorySessionStore
from firestore_sessions.observability.logging import get_logger

if TYPE_CHECKING:
    from firestore_sessions.config.settings import Settings

logger: logging.Logger = get_logger(__name__)


def create_firestore_client(settings: Settings) -> Any:
    """Cria o client Firestore para o projeto/database configurados."""
    project_id = settings.firestore_project_id or settings.gcp_project
    if not project_id:
        raise ValueError("FIRESTORE_PROJECT_ID ou GCP_PROJECT é obrigatório para firestore")

    from google.cloud import firestore

    return firestore.Client(project=project_id, database=settings.firestore_database_id)


def create_session_store(
    settings: Settings | None = None,
    *,
    client: Any = None,
    cache: SessionCache | None = None,
    share_by_name: bool = True,
) -> SessionStore:
    """Factory para criar o session store apropriado.

    Usa settings.session_store_backend:
    - "memory": InMemorySessionStore (dev/testes)
    - "firestore": FirestoreSessionStore (produção)

    Args:
        settings: Configurações da aplicação. Se None, usa get_settings()
        client: client Firestore já construído (senão criado a partir de settings)
        cache: cache compartilhado; se None, um cache novo limitado por
            settings.session_cache_max_entries
        share_by_name: ver SessionStore; o app HTTP passa False

    Raises:
        ValueError: Se backend não reconhecido
    """
    if settings is None:
        from firestore_sessions.config.settings import get_settings

        settings = get_settings()

    common: dict[str, Any] = {
        "serializer": SessionSerializer(),
        "cache": cache if cache is not None else SessionCache(settings.session_cache_max_entries),
        "cookie_options": settings.cookie_options(),
        "share_by_name": share_by_name,
    }

    backend = settings.session_store_backend.lower()
    if backend == "memory":
        logger.info("Usando InMemorySessionStore (apenas dev/testes)")
        return InMemorySessionStore(**common)

    if backend == "firestore":
        from firestore_sessions.infra.session_store_firestore import FirestoreSessionStore

        if client is None:
            client = create_firestore_client(settings)
        logger.info(
            "Usando FirestoreSessionStore",
            extra={
                "database": settings.firestore_database_id,
                "timeout_seconds": settings.session_store_timeout_seconds,
            },
        )
        return FirestoreSessionStore(
            client, timeout_seconds=settings.session_store_timeout_seconds, **common
        )

    raise ValueError(f"Backend de session store não reconhecido: {backend}")
