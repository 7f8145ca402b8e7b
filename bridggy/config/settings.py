"""Client settings loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Proxy credentials, used by Bridggy.from_settings()
    token: str = ""
    retry: bool = True
    origin: str = ""  # Empty = no Origin header

    # Proxy routing
    proxy_domain: str = "bridggy.com"
    retry_delay: float = 2.0  # seconds before the single GET retry

    # Transport
    timeout: float = 60.0
    connect_timeout: float = 10.0

    # Logging
    log_level: str = "INFO"
    audit_log_file: str = ""  # Empty = stdout only

    model_config = {
        "env_prefix": "BRIDGGY_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    return Settings()
