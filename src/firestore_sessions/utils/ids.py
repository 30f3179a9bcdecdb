"""Geradores de identificadores."""

from __future__ import annotations

import secrets

_IDENTITY_BYTES = 32


def new_session_id() -> str:
    """Gera uma identity de sessão aleatória e segura para cookie (base64url)."""

    return secrets.token_urlsafe(_IDENTITY_BYTES)
