"""Logging estruturado (JSON) do session store.

Regras para registros de sessão:
- session_id é sempre truncado antes de chegar a qualquer handler
- valores da sessão nunca aparecem no log (campos proibidos são mascarados)

A redação é aplicada no logger (get_logger), então vale também para
handlers que não passam por configure_logging (ex.: caplog nos testes).
"""

from __future__ import annotations

import logging

from pythonjsonlogger.json import JsonFormatter

from firestore_sessions.observability.middleware import get_correlation_id

REDACTED = "[redacted]"
SESSION_ID_PREFIX_LEN = 8

# Campos de extra que carregariam conteúdo da sessão.
_VALUE_FIELDS = frozenset({"values", "session_values", "booking_ids"})


def mask_session_id(identity: str) -> str:
    """Mantém só o prefixo da identity (o valor completo é o cookie)."""
    return identity[:SESSION_ID_PREFIX_LEN] + "..."


class SessionRedactionFilter(logging.Filter):
    """Trunca session_id e mascara valores de sessão no record."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        identity = getattr(record, "session_id", None)
        if isinstance(identity, str) and not identity.endswith("..."):
            record.session_id = mask_session_id(identity)

        for field in _VALUE_FIELDS.intersection(record.__dict__):
            setattr(record, field, REDACTED)

        return True


class CorrelationIdFilter(logging.Filter):
    """Insere correlation_id e service no record de log."""

    def __init__(self, service_name: str) -> None:
        super().__init__()
        self._service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        existing = getattr(record, "correlation_id", None)
        record.correlation_id = existing if existing else get_correlation_id()
        record.service = self._service_name
        return True


_redaction_filter = SessionRedactionFilter()


def configure_logging(level: str, service_name: str) -> None:
    """Configura logging JSON com service, correlation_id e campos de sessão."""

    formatter = JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s %(correlation_id)s %(service)s",
        rename_fields={"levelname": "level", "name": "logger"},
    )

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(formatter)
    handler.addFilter(CorrelationIdFilter(service_name))
    handler.addFilter(_redaction_filter)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [handler]


def get_logger(name: str) -> logging.Logger:
    """Retorna logger com redação de sessão; o handler injeta service/correlation_id."""

    logger = logging.getLogger(name)
    if _redaction_filter not in logger.filters:
        logger.addFilter(_redaction_filter)
    return logger
