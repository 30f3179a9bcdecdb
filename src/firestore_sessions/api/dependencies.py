"""Dependências injetadas nas rotas."""

from __future__ import annotations

from fastapi import Request

from firestore_sessions.config.settings import Settings
from firestore_sessions.infra.session_contract import SessionStore


def get_settings(request: Request) -> Settings:
    """Retorna settings da aplicação."""

    return request.app.state.settings


def get_session_store(request: Request) -> SessionStore:
    """Retorna o store de sessão ativo."""

    return request.app.state.session_store
