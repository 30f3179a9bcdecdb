"""Fábrica da aplicação FastAPI."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from firestore_sessions.api.routes import router
from firestore_sessions.config.settings import Settings, get_settings
from firestore_sessions.domain.errors import (
    DecodingError,
    EncodingError,
    MaxLengthExceededError,
    NilSessionError,
    PersistenceError,
    SessionError,
    TypeMismatchError,
)
from firestore_sessions.infra.session_contract import SessionStore
from firestore_sessions.infra.session_store import create_session_store
from firestore_sessions.observability.logging import configure_logging, get_logger
from firestore_sessions.observability.middleware import CorrelationIdMiddleware

logger = get_logger(__name__)

# Ordem importa: subclasses antes da base.
_ERROR_STATUS: list[tuple[type[SessionError], int, str]] = [
    (MaxLengthExceededError, 413, "session_too_large"),
    (EncodingError, 422, "session_value_unsupported"),
    (TypeMismatchError, 422, "session_value_type_mismatch"),
    (DecodingError, 500, "session_corrupted"),
    (NilSessionError, 500, "session_missing"),
    (PersistenceError, 503, "session_store_unavailable"),
]


async def _session_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Converte erros do session store em respostas HTTP (sem vazar valores)."""
    for error_type, status_code, detail in _ERROR_STATUS:
        if isinstance(exc, error_type):
            break
    else:
        status_code, detail = 500, "session_error"

    logger.warning(
        "Session error mapped to HTTP response",
        extra={"error": type(exc).__name__, "status_code": status_code, "path": request.url.path},
    )
    return JSONResponse(status_code=status_code, content={"detail": detail})


def create_app(
    settings: Settings | None = None,
    *,
    session_store: SessionStore | None = None,
) -> FastAPI:
    """Cria a aplicação FastAPI.

    O store HTTP nunca compartilha sessão por nome: todos os clientes usam o
    mesmo nome de cookie, então só o cookie identifica a sessão.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.service_name)

    validation_errors: list[str] = []
    validation_errors.extend(settings.validate_session_store_config())
    validation_errors.extend(settings.validate_cookie_config())

    if session_store is not None and session_store.share_by_name:
        validation_errors.append("session_store com share_by_name=True não é seguro para HTTP")

    if validation_errors:
        error_msg = "; ".join(validation_errors)
        raise ValueError(f"Configuração inválida: {error_msg}")

    app = FastAPI(title=settings.service_name, version=settings.version)
    app.add_middleware(CorrelationIdMiddleware, header_name=settings.correlation_id_header)
    app.add_exception_handler(SessionError, _session_error_handler)
    app.include_router(router)

    app.state.settings = settings
    app.state.session_store = session_store or create_session_store(
        settings, share_by_name=False
    )

    return app
