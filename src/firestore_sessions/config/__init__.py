"""Configurações centralizadas do firestore_sessions.

Uso típico:
    from firestore_sessions.config import get_settings
"""

from firestore_sessions.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
