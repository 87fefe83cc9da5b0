import os
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field

DEFAULT_BASE_URL = "https://api.nomics.com/v1"
DEFAULT_TIMEOUT_SEC = 5.0


def resolve_config_dir() -> Path:
    xdg_home = os.getenv("XDG_CONFIG_HOME", "").strip()
    if xdg_home:
        return Path(xdg_home) / "coinline"
    return Path("~/.coinline").expanduser()


def _read_key_file(config_dir: Path) -> str | None:
    try:
        raw = (config_dir / "key").read_text(encoding="utf-8")
    except OSError:
        return None
    key = raw.strip()
    return key or None


class Settings(BaseModel):
    API_KEY: str = Field(min_length=1)
    CONFIG_DIR: Path
    BASE_URL: str = DEFAULT_BASE_URL
    TIMEOUT_SEC: float = Field(default=DEFAULT_TIMEOUT_SEC, gt=0)

    @classmethod
    def from_env(cls) -> "Settings":
        config_dir = resolve_config_dir()

        api_key = os.getenv("COINLINE_API_KEY", "").strip() or _read_key_file(config_dir)

        return cls.model_validate(
            {
                "API_KEY": api_key,
                "CONFIG_DIR": config_dir,
                "BASE_URL": os.getenv("COINLINE_BASE_URL", "").strip() or DEFAULT_BASE_URL,
                "TIMEOUT_SEC": os.getenv("COINLINE_TIMEOUT_SEC", "").strip() or DEFAULT_TIMEOUT_SEC,
            }
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
