"""Application configuration loaded from config.yaml + environment variables."""

from __future__ import annotations

import yaml
from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings

_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"


def _load_yaml() -> dict:
    if _CONFIG_PATH.exists():
        with open(_CONFIG_PATH) as f:
            return yaml.safe_load(f) or {}
    return {}


_yaml = _load_yaml()


class TechnicianServiceConfig(BaseSettings):
    base_url: str = "http://localhost:8082"
    connect_timeout: float = 2.0
    read_timeout: float = 5.0


class EventsConfig(BaseSettings):
    queue_size: int = 1000


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///data/work_orders.db"
    technician_database_url: str = "sqlite+aiosqlite:///data/technicians.db"
    log_level: str = "INFO"
    technician_service: TechnicianServiceConfig = Field(default_factory=TechnicianServiceConfig)
    events: EventsConfig = Field(default_factory=EventsConfig)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "FIELDSERVICE_",
        "env_nested_delimiter": "__",
    }


def get_settings() -> Settings:
    """Build Settings by merging YAML defaults with env overrides.

    Only sections present in config.yaml are passed explicitly, so env vars
    still win for anything the YAML file leaves out.
    """
    y = _yaml
    overrides: dict = {}
    if "technician_service" in y:
        overrides["technician_service"] = TechnicianServiceConfig(**y["technician_service"])
    if "events" in y:
        overrides["events"] = EventsConfig(**y["events"])
    db = y.get("database", {})
    if "url" in db:
        overrides["database_url"] = db["url"]
    if "technician_url" in db:
        overrides["technician_database_url"] = db["technician_url"]
    if "log_level" in y:
        overrides["log_level"] = y["log_level"]
    return Settings(**overrides)
