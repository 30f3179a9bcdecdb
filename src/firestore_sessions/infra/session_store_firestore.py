"""Implementação de SessionStore usando Firestore (produção).

Layout: {session_name}/{identity} com um único campo binário "values".
Todas as chamadas usam o timeout configurado e retry=None: não há retry
interno, a falha é devolvida ao chamador como PersistenceError.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from google.api_core import exceptions as gcp_exceptions

from firestore_sessions.domain.errors import DecodingError, PersistenceError
from firestore_sessions.infra.session_contract import SessionStore
from firestore_sessions.observability.logging import get_logger

if TYPE_CHECKING:
    from google.cloud import firestore

logger: logging.Logger = get_logger(__name__)

VALUES_FIELD = "values"
DEFAULT_TIMEOUT_SECONDS = 10.0


class FirestoreSessionStore(SessionStore):
    """Armazenamento de sessão em Firestore."""

    def __init__(
        self,
        firestore_client: firestore.Client,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds deve ser positivo")
        self._client = firestore_client
        self._timeout = timeout_seconds

    def _doc_ref(self, name: str, identity: str) -> firestore.DocumentReference:
        return self._client.collection(name).document(identity)

    def _read_document(self, name: str, identity: str) -> bytes | None:
        try:
            snapshot = self._doc_ref(name, identity).get(retry=None, timeout=self._timeout)
        except gcp_exceptions.GoogleAPIError as e:
            logger.error(
                "Failed to load session from Firestore",
                extra={"session_name": name, "error": type(e).__name__},
            )
            raise PersistenceError(f"Firestore read failed: {e}") from e

        if not snapshot.exists:
            return None

        data = (snapshot.to_dict() or {}).get(VALUES_FIELD)
        if not isinstance(data, (bytes, bytearray)):
            logger.error(
                "Session document has no binary values field",
                extra={
                    "session_name": name,
                    "session_id": identity,
                    "field_type": type(data).__name__,
                },
            )
            raise DecodingError(
                f"session document has no binary {VALUES_FIELD!r} field "
                f"(got {type(data).__name__})"
            )
        return bytes(data)

    def _write_document(self, name: str, identity: str, data: bytes) -> None:
        try:
            self._doc_ref(name, identity).set(
                {VALUES_FIELD: data}, retry=None, timeout=self._timeout
            )
        except gcp_exceptions.GoogleAPIError as e:
            logger.error(
                "Failed to save session to Firestore",
                extra={"session_name": name, "error": type(e).__name__},
            )
            raise PersistenceError(f"Firestore save failed: {e}") from e

    def _delete_document(self, name: str, identity: str) -> None:
        try:
            self._doc_ref(name, identity).delete(retry=None, timeout=self._timeout)
        except gcp_exceptions.GoogleAPIError as e:
            logger.error(
                "Failed to delete session from Firestore",
                extra={"session_name": name, "error": type(e).__name__},
            )
            raise PersistenceError(f"Firestore delete failed: {e}") from e

    def _list_identities(self, name: str) -> Iterator[str]:
        try:
            refs = self._client.collection(name).list_documents(
                retry=None, timeout=self._timeout
            )
            for ref in refs:
                yield ref.id
        except gcp_exceptions.GoogleAPIError as e:
            raise PersistenceError(f"Firestore list failed: {e}") from e
