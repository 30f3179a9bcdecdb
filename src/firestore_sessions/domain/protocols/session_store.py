"""Protocolo de domínio do session store (contrato do middleware web)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response

    from firestore_sessions.domain.session import Session


class SessionStoreProtocol(ABC):
    """Contrato mínimo: new/get/save por nome de sessão."""

    @abstractmethod
    def new(self, request: Request, name: str) -> Session: ...

    @abstractmethod
    def get(self, request: Request, name: str) -> Session: ...

    @abstractmethod
    def save(self, request: Request, response: Response | None, session: Session) -> None: ...
