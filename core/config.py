"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for TaskReview happen here. No module should
call os.getenv() or os.environ.get() directly -- import get_settings() instead,
or better, accept a Settings instance from the caller.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call.

  Explicit injection: the Settings object is read once during application
      startup and handed to TokenService, the stores, and the workflow as
      constructor arguments. Nothing below core/ holds module-level config,
      so tests can build services with distinct secrets side by side.

  @model_validator(mode="after"): DEBUG-conditional SECRET_KEY policy.
      Dev mode generates a key with a warning, production mode refuses to
      start without one.

Security notes:
  SECRET_KEY shorter than 32 chars is rejected outright. JWT signing relies
  on key entropy -- a short key weakens every issued token.

  There is no literal fallback secret. The only fallback is a random key in
  DEBUG mode, which invalidates all tokens on restart.

Layer rule: core/ is the kernel. This module may not import from api/,
auth/, or assignments/.
"""

import logging
import secrets
from functools import lru_cache
from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("taskreview.config")

_DEFAULT_DB_URL = f"sqlite:///{Path(__file__).resolve().parent.parent / 'taskreview.db'}"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file (DEBUG=true still required for the
    secret key). Field names map to upper-cased env vars, e.g. `database_url`
    reads from DATABASE_URL.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    # Empty string is the sentinel for "not configured". The validator below
    # either generates a dev key or raises, so callers never see "".
    secret_key: str = ""
    database_url: str = _DEFAULT_DB_URL

    # ------------------------------------------------------------------
    # Server
    # ------------------------------------------------------------------

    host: str = "127.0.0.1"
    port: int = 5000

    # ------------------------------------------------------------------
    # Authorization policy
    #
    # Strict by default. Setting a flag to false restores the legacy
    # behaviour for deployments that depend on it.
    # ------------------------------------------------------------------

    # Gate rejects tokens whose embedded role differs from the route's kind.
    enforce_token_role: bool = True
    # accept/reject only act on assignments addressed to the calling admin.
    scope_assignments_to_admin: bool = True
    # accept/reject only act on Pending assignments.
    enforce_status_transitions: bool = True

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_secret_key(self) -> "Settings":
        """Enforce the SECRET_KEY policy.

        Dev mode (DEBUG=true): auto-generate a random key with a warning.
        Production mode: refuse to start if SECRET_KEY is missing.
        Both modes: reject keys shorter than 32 characters.
        """
        if not self.secret_key:
            if self.debug:
                self.secret_key = secrets.token_hex(32)
                logger.warning("Using auto-generated SECRET_KEY. Tokens will not survive a restart.")
            else:
                raise ValueError(
                    "SECRET_KEY is required in production mode. "
                    "Set SECRET_KEY in your environment or .env file. "
                    "To run in development mode, set DEBUG=true."
                )
        if len(self.secret_key) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables, or construct Settings(...)
    directly and pass it to the services under test.
    """
    return Settings()
