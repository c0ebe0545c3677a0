# filedrop/core/settings.py
from functools import lru_cache
from pathlib import Path
from typing import Tuple

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_bind_address(value: str) -> Tuple[str, int]:
    """Splits 'host:port' (ook '[::1]:8080'). Gooit ValueError bij rommel."""
    host, sep, port = value.strip().rpartition(":")
    if not sep or not host or not port.isdigit():
        raise ValueError(f"invalid bind address: {value!r}")
    port_num = int(port)
    if not 0 < port_num < 65536:
        raise ValueError(f"port out of range: {port_num}")
    return host.strip("[]"), port_num


class Settings(BaseSettings):
    # --- Storage ---
    UPLOADS_DIR: Path = Path("./uploads")
    MAX_UPLOAD_BYTES: int = Field(100 * 1024 * 1024, gt=0)
    UPLOAD_TIMEOUT_SECONDS: float = Field(3600.0, gt=0)

    # --- Server ---
    BIND_ADDRESS: str = "0.0.0.0:3000"
    ALLOWED_ORIGINS: list[str] = []

    # --- Observability ---
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True
    METRICS_ENABLED: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("BIND_ADDRESS")
    @classmethod
    def _validate_bind_address(cls, v: str) -> str:
        parse_bind_address(v)
        return v

    @property
    def bind_host(self) -> str:
        return parse_bind_address(self.BIND_ADDRESS)[0]

    @property
    def bind_port(self) -> int:
        return parse_bind_address(self.BIND_ADDRESS)[1]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton Settings instance (leest env + .env)."""
    return Settings()
