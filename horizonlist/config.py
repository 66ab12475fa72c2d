from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, validator

SortOrder = Literal["timeasc", "timedesc", "nameasc", "namedesc", "recentasc", "recentdesc"]

DEFAULT_BASE_URL = "https://encryption-service-73dm.onrender.com"
DEFAULT_PROJECTS_PATH = "/data/projects"
DEFAULT_OWNER_ID = "nearhorizon.near"


class ServiceConfig(BaseModel):
    base_url: str = DEFAULT_BASE_URL
    projects_path: str = DEFAULT_PROJECTS_PATH
    timeout_sec: Optional[float] = None
    use_session: bool = True

    @validator("base_url", pre=True, always=True)
    def _strip_base_url(cls, value: str) -> str:
        return str(value or DEFAULT_BASE_URL).rstrip("/")

    @validator("projects_path", pre=True, always=True)
    def _normalize_path(cls, value: str) -> str:
        path = str(value or DEFAULT_PROJECTS_PATH).strip().rstrip("/")
        if not path.startswith("/"):
            path = "/" + path
        return path


class WidgetConfig(BaseModel):
    owner_id: str = DEFAULT_OWNER_ID
    loading_text: str = "Loading..."
    search: str = ""
    sort: SortOrder = "timedesc"

    @validator("search", pre=True, always=True)
    def _none_search_is_empty(cls, value: Optional[str]) -> str:
        return "" if value is None else str(value)


class LoggingConfig(BaseModel):
    directory: str = "logs"
    text_filename: str = "horizonlist.log"
    rotate_bytes: int = 1_048_576
    backups: int = 5
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @validator("level", pre=True, always=True)
    def _upper_level(cls, value: str) -> str:
        return str(value or "INFO").upper()


class AppConfig(BaseModel):
    service: ServiceConfig = Field(default_factory=ServiceConfig)
    widget: WidgetConfig = Field(default_factory=WidgetConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    class Config:
        extra = "ignore"


def load_config(path: Path) -> AppConfig:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        payload = yaml.safe_load(handle) or {}
    return AppConfig.parse_obj(payload)


def save_config(config: AppConfig, path: Path) -> None:
    data = config.dict()
    with path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(data, handle, sort_keys=False, allow_unicode=False)


def resolve_path(path_value: str) -> Path:
    return Path(path_value).expanduser().resolve()
