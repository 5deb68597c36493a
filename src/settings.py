"""Runtime settings for the FreshCart web application.

Values are read from the environment (prefix ``FRESHCART_``) or from a ``.env``
file in the working directory. Protean's own configuration (databases, event
store, processing mode) lives in ``domain.toml``.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="FRESHCART_", env_file=".env", extra="ignore")

    environment: str = "development"

    session_secret: str = "freshcart-dev-secret"
    session_cookie: str = "freshcart_session"
    session_https_only: bool = False
    session_max_age: int = 14 * 24 * 60 * 60

    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:3001"]

    upload_dir: str = "uploads"

    log_level: str | None = None
    log_dir: str = "logs"


@lru_cache
def get_settings() -> Settings:
    return Settings()
