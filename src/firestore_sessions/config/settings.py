"""Configurações da aplicação via variáveis de ambiente.

Credenciais do Google Cloud vêm do ambiente (Application Default
Credentials); nenhuma credencial é lida aqui.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from firestore_sessions.domain.session import CookieOptions

VALID_SESSION_BACKENDS = {"memory", "firestore"}
VALID_SAME_SITE = {"lax", "strict", "none"}


class Settings(BaseSettings):
    """Configurações lidas do ambiente."""

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        env_parse_none_str="none",
    )

    # Aplicação
    service_name: str = "firestore_sessions"
    version: str = "0.1.0"
    environment: str = "development"
    log_level: str = "INFO"

    # Observabilidade
    correlation_id_header: str = "X-Correlation-ID"

    # Armazenamento (Firestore)
    gcp_project: str | None = None
    firestore_project_id: str | None = None
    firestore_database_id: str = "(default)"

    # Session store
    session_store_backend: str = "memory"  # memory | firestore
    session_store_timeout_seconds: float = 10.0  # Timeout por chamada ao Firestore
    session_cache_max_entries: int | None = 1024  # "none" = cache sem limite

    # Cookie de sessão
    session_cookie_name: str = "session"
    session_cookie_path: str = "/"
    session_cookie_domain: str | None = None
    session_cookie_max_age: int = 86400 * 30  # 30 dias
    session_cookie_secure: bool = False  # Obrigatório em staging/production
    session_cookie_http_only: bool = True
    session_cookie_same_site: str = "lax"  # lax | strict | none

    def validate_session_store_config(self) -> list[str]:
        """Valida backend de session store por ambiente.

        Em staging/prod, memory é proibido (instâncias não compartilham estado).
        Retorna lista de erros (vazia = tudo OK).
        """
        errors: list[str] = []
        backend = self.session_store_backend.lower()

        if backend not in VALID_SESSION_BACKENDS:
            errors.append(
                f"SESSION_STORE_BACKEND '{backend}' inválido. "
                f"Valores válidos: {sorted(VALID_SESSION_BACKENDS)}"
            )

        if backend == "memory" and (self.is_staging or self.is_production):
            errors.append(
                "SESSION_STORE_BACKEND=memory é proibido em staging/production. "
                "Use 'firestore'."
            )

        if backend == "firestore" and not (self.firestore_project_id or self.gcp_project):
            errors.append(
                "SESSION_STORE_BACKEND=firestore requer FIRESTORE_PROJECT_ID "
                "ou GCP_PROJECT configurado"
            )

        if self.session_store_timeout_seconds <= 0:
            errors.append("SESSION_STORE_TIMEOUT_SECONDS deve ser > 0")

        if self.session_cache_max_entries is not None and self.session_cache_max_entries <= 0:
            errors.append("SESSION_CACHE_MAX_ENTRIES deve ser > 0 (ou \"none\" para sem limite)")

        return errors

    def validate_cookie_config(self) -> list[str]:
        """Valida atributos do cookie de sessão."""
        errors: list[str] = []
        same_site = self.session_cookie_same_site.lower()

        if not self.session_cookie_name:
            errors.append("SESSION_COOKIE_NAME não pode ser vazio")

        if same_site not in VALID_SAME_SITE:
            errors.append(
                f"SESSION_COOKIE_SAME_SITE '{same_site}' inválido. "
                f"Valores válidos: {sorted(VALID_SAME_SITE)}"
            )

        if same_site == "none" and not self.session_cookie_secure:
            errors.append("SESSION_COOKIE_SAME_SITE=none requer SESSION_COOKIE_SECURE=true")

        if (self.is_staging or self.is_production) and not self.session_cookie_secure:
            errors.append("SESSION_COOKIE_SECURE deve ser true em staging/production")

        return errors

    def cookie_options(self) -> CookieOptions:
        """Monta CookieOptions a partir das settings."""
        return CookieOptions(
            path=self.session_cookie_path,
            domain=self.session_cookie_domain,
            max_age=self.session_cookie_max_age,
            secure=self.session_cookie_secure,
            http_only=self.session_cookie_http_only,
            same_site=self.session_cookie_same_site.lower(),  # type: ignore[arg-type]
        )

    @property
    def is_production(self) -> bool:
        """Retorna True se ambiente é produção."""
        return self.environment.lower() in ("production", "prod")

    @property
    def is_staging(self) -> bool:
        """Retorna True se ambiente é staging."""
        return self.environment.lower() in ("staging", "stage")

    @property
    def is_development(self) -> bool:
        """Retorna True se ambiente é desenvolvimento."""
        return self.environment.lower() in ("development", "dev", "local")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Retorna uma instância cacheada de Settings.

    A cache garante que mesmo múltiplas injeções não criam novos objetos.
    """
    return Settings()
