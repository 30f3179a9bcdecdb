"""Modelo de sessão HTTP do lado do servidor.

Os valores da sessão formam uma união fechada de tipos suportados
(str, int, float, bool, None, listas e mapas aninhados). Qualquer outro
tipo é rejeitado pelo serializador no momento do save.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union  # noqa: F401 - usado na string do alias

from typing_extensions import TypeAliasType

SessionValue = TypeAliasType(
    "SessionValue",
    "Union[str, bool, int, float, None, list[SessionValue], dict[str, SessionValue]]",
)

SessionValues = dict[str, SessionValue]

SameSite = Literal["lax", "strict", "none"]


@dataclass(frozen=True, slots=True)
class CookieOptions:
    """Atributos do cookie emitido no save da sessão.

    max_age <= 0 expira a sessão (cookie removido e documento apagado).
    """

    path: str = "/"
    domain: str | None = None
    max_age: int = 86400 * 30
    secure: bool = False
    http_only: bool = True
    same_site: SameSite = "lax"


@dataclass(slots=True)
class Session:
    """Estado de sessão de um usuário.

    Atributos:
        name: nome da sessão (nome do cookie e da coleção no Firestore)
        identity: chave opaca do documento dentro da coleção
        values: dados da sessão, mutados pelo handler entre new e save
        is_new: True apenas enquanto a sessão nunca foi persistida
        options: atributos do cookie usados no save
    """

    name: str
    identity: str
    values: SessionValues = field(default_factory=dict)
    is_new: bool = True
    options: CookieOptions = field(default_factory=CookieOptions)
