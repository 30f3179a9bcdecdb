"""Contrato de persistência de sessão (SessionStore).

O ciclo de vida (new/get/save/delete) é implementado uma única vez aqui;
cada backend implementa apenas as primitivas de documento:

- _read_document: bytes do documento ou None se não existir
- _write_document: grava/sobrescreve o documento
- _delete_document: remove o documento
- _list_identities: enumera os documentos de uma coleção

Layout: coleção = nome da sessão, documento = identity da sessão.
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from collections.abc import Iterable
from typing import TYPE_CHECKING

from firestore_sessions.domain.errors import DecodingError, PersistenceError, SerializationError
from firestore_sessions.domain.protocols.session_store import SessionStoreProtocol
from firestore_sessions.domain.session import CookieOptions, Session, SessionValues
from firestore_sessions.infra.serializer import SessionSerializer
from firestore_sessions.infra.session_cache import CachedSession, SessionCache
from firestore_sessions.observability.logging import get_logger
from firestore_sessions.utils.ids import new_session_id

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response

logger: logging.Logger = get_logger(__name__)

_REGISTRY_ATTR = "sessions"


class SessionStore(SessionStoreProtocol):
    """Store de sessão com cache em processo e serialização delegada.

    Args:
        serializer: codificador dos valores (padrão: SessionSerializer())
        cache: cache compartilhável entre stores; None cria um cache privado
        cookie_options: atributos do cookie das sessões criadas por este store
        share_by_name: request sem cookie recebe a última sessão salva para o
            nome neste processo. Desligar em serviços multiusuário: com um
            único nome de cookie, todos os clientes veriam a mesma sessão.
    """

    def __init__(
        self,
        *,
        serializer: SessionSerializer | None = None,
        cache: SessionCache | None = None,
        cookie_options: CookieOptions | None = None,
        share_by_name: bool = True,
    ) -> None:
        self._serializer = serializer or SessionSerializer()
        self._cache = cache if cache is not None else SessionCache()
        self._cookie_options = cookie_options or CookieOptions()
        self._share_by_name = share_by_name

    @property
    def cache(self) -> SessionCache:
        return self._cache

    @property
    def share_by_name(self) -> bool:
        return self._share_by_name

    @property
    def serializer(self) -> SessionSerializer:
        return self._serializer

    # ------------------------------------------------------------------
    # Primitivas de documento (backend)
    # ------------------------------------------------------------------

    @abstractmethod
    def _read_document(self, name: str, identity: str) -> bytes | None:
        """Lê o documento; None se não existir.

        Raises:
            PersistenceError: falha de leitura diferente de not-found
        """
        ...

    @abstractmethod
    def _write_document(self, name: str, identity: str, data: bytes) -> None:
        """Grava/sobrescreve o documento.

        Raises:
            PersistenceError: falha de escrita
        """
        ...

    @abstractmethod
    def _delete_document(self, name: str, identity: str) -> None:
        """Remove o documento (idempotente).

        Raises:
            PersistenceError: falha de remoção
        """
        ...

    @abstractmethod
    def _list_identities(self, name: str) -> Iterable[str]:
        """Enumera as identities de todos os documentos da coleção."""
        ...

    # ------------------------------------------------------------------
    # Ciclo de vida
    # ------------------------------------------------------------------

    def new(self, request: Request | None, name: str) -> Session:
        """Retorna a sessão associada a name.

        Com cookie: cache da identity do cookie, depois o documento; sem
        documento, sessão nova com identity nova. Sem cookie: última sessão
        salva para name (se share_by_name), senão sessão nova. Não popula
        o cache.

        Raises:
            DecodingError: documento persistido corrompido
            PersistenceError: falha de leitura no backend
        """
        identity = self._identity_from_request(request, name)
        if identity is None:
            cached = self._cache.latest(name) if self._share_by_name else None
            if cached is None:
                return self._fresh(name)
            return self._from_cache(name, cached)

        cached = self._cache.get(name, identity)
        if cached is not None:
            return self._from_cache(name, cached)

        data = self._read_document(name, identity)
        if data is None:
            logger.debug(
                "Session not found",
                extra={"session_name": name, "session_id": identity},
            )
            return self._fresh(name)

        try:
            values = self._serializer.decode(data)
        except DecodingError as e:
            logger.error(
                "Failed to decode persisted session",
                extra={"session_name": name, "session_id": identity, "error": str(e)},
            )
            raise

        logger.debug(
            "Session loaded",
            extra={"session_name": name, "session_id": identity},
        )
        return self._build(name, identity, values, is_new=False)

    def get(self, request: Request | None, name: str) -> Session:
        """Como new, mas retorna a mesma instância dentro de uma request."""
        if request is None:
            return self.new(request, name)

        registry: dict[str, Session] | None = getattr(request.state, _REGISTRY_ATTR, None)
        if registry is None:
            registry = {}
            setattr(request.state, _REGISTRY_ATTR, registry)

        session = registry.get(name)
        if session is None:
            session = self.new(request, name)
            registry[name] = session
        return session

    def save(
        self, request: Request | None, response: Response | None, session: Session
    ) -> None:
        """Persiste a sessão e atualiza o cache.

        max_age <= 0 remove a sessão (documento, cache e cookie).

        Raises:
            MaxLengthExceededError / EncodingError: valores rejeitados pelo serializador
            PersistenceError: falha de escrita (cache e documento inalterados)
        """
        if session.options.max_age <= 0:
            self.delete(session)
            if response is not None:
                self._expire_cookie(response, session)
            return

        try:
            data = self._serializer.encode(session.values)
        except SerializationError as e:
            logger.warning(
                "Session rejected by serializer",
                extra={
                    "session_name": session.name,
                    "session_id": session.identity,
                    "error": type(e).__name__,
                },
            )
            raise

        self._write_document(session.name, session.identity, data)
        self._cache.put(session.name, session.identity, data)
        session.is_new = False

        if response is not None:
            self._set_cookie(response, session)

        logger.debug(
            "Session saved",
            extra={
                "session_name": session.name,
                "session_id": session.identity,
                "size_bytes": len(data),
            },
        )

    def delete(self, session: Session) -> None:
        """Remove o documento da sessão e a entrada de cache.

        Raises:
            PersistenceError: falha de remoção (cache preservado)
        """
        self._delete_document(session.name, session.identity)
        self._cache.discard_if(session.name, session.identity)
        logger.debug(
            "Session deleted",
            extra={"session_name": session.name, "session_id": session.identity},
        )

    def delete_all(self, name: str) -> int:
        """Remove todos os documentos da coleção name.

        Falhas individuais são logadas e ignoradas: o retorno (quantidade
        removida) não distingue limpeza total de parcial.
        """
        self._cache.discard(name)
        deleted = 0
        try:
            for identity in self._list_identities(name):
                try:
                    self._delete_document(name, identity)
                    deleted += 1
                except PersistenceError as e:
                    logger.warning(
                        "Failed to delete session document, skipping",
                        extra={"session_name": name, "session_id": identity, "error": str(e)},
                    )
        except PersistenceError as e:
            logger.warning(
                "Failed to enumerate session documents",
                extra={"session_name": name, "error": str(e)},
            )

        logger.info("Session collection cleaned", extra={"session_name": name, "deleted": deleted})
        return deleted

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _build(
        self, name: str, identity: str, values: SessionValues, *, is_new: bool
    ) -> Session:
        return Session(
            name=name,
            identity=identity,
            values=values,
            is_new=is_new,
            options=self._cookie_options,
        )

    def _fresh(self, name: str) -> Session:
        return self._build(name, new_session_id(), {}, is_new=True)

    def _from_cache(self, name: str, cached: CachedSession) -> Session:
        values = self._serializer.decode(cached.data)
        logger.debug(
            "Session loaded (cache)",
            extra={"session_name": name, "session_id": cached.identity},
        )
        return self._build(name, cached.identity, values, is_new=False)

    @staticmethod
    def _identity_from_request(request: Request | None, name: str) -> str | None:
        if request is None:
            return None
        return request.cookies.get(name) or None

    @staticmethod
    def _set_cookie(response: Response, session: Session) -> None:
        options = session.options
        response.set_cookie(
            key=session.name,
            value=session.identity,
            max_age=options.max_age,
            path=options.path,
            domain=options.domain,
            secure=options.secure,
            httponly=options.http_only,
            samesite=options.same_site,
        )

    @staticmethod
    def _expire_cookie(response: Response, session: Session) -> None:
        options = session.options
        response.delete_cookie(
            key=session.name,
            path=options.path,
            domain=options.domain,
            secure=options.secure,
            httponly=options.http_only,
            samesite=options.same_site,
        )
