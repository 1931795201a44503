from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.models import ErrorHandling


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SLIDESMITH_", case_sensitive=False)

    templates_dir: Path = Path("templates")
    configs_dir: Path = Path("configs")
    exports_dir: Path = Path("exports")
    assets_dir: Path = Path("assets")
    error_handling: ErrorHandling = ErrorHandling.WARN
    missing_token_placeholder: str = "[MISSING]"
    bind_host: str = "127.0.0.1"
    bind_port: int = 3000


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
