from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from astgate.schemas import GatherFilesConfig

DEFAULT_SETTINGS = """cache:
  path: .astgate/cache.db
gather:
  extensions:
    - ".js"
  allowlist:
    - "!coverage"
    - "!test"
  allowlist_reference:
    - "!coverage"
    - "!test"
logging:
  level: INFO
  format: text
"""


@dataclass(slots=True)
class LoggingConfig:
    level: str = "INFO"
    format: str = "text"


@dataclass(slots=True)
class EngineSettings:
    cache_path: Path
    gather: GatherFilesConfig
    gather_reference: GatherFilesConfig
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def default(cls) -> EngineSettings:
        data = yaml.safe_load(DEFAULT_SETTINGS)
        return cls.from_dict(data)

    @classmethod
    def from_path(cls, path: Path) -> EngineSettings:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EngineSettings:
        cache_data = data.get("cache", {})
        gather_data = data.get("gather", {})
        logging_data = data.get("logging", {})

        extensions = gather_data.get("extensions", [".js"])
        gather = GatherFilesConfig(
            extensions=list(extensions),
            allowlist=list(gather_data.get("allowlist", [])),
        )
        gather_reference = GatherFilesConfig(
            extensions=list(extensions),
            allowlist=list(gather_data.get("allowlist_reference", gather.allowlist)),
        )
        logging_config = LoggingConfig(
            level=str(logging_data.get("level", "INFO")),
            format=str(logging_data.get("format", "text")),
        )
        cache_path = Path(cache_data.get("path", ".astgate/cache.db"))

        env_cache = os.getenv("ASTGATE_CACHE_DB", "").strip()
        env_level = os.getenv("ASTGATE_LOG_LEVEL", "").strip()
        env_format = os.getenv("ASTGATE_LOG_FORMAT", "").strip().lower()

        if env_cache:
            cache_path = Path(env_cache)
        if env_level:
            logging_config.level = env_level.upper()
        if env_format in {"text", "json"}:
            logging_config.format = env_format

        return cls(
            cache_path=cache_path,
            gather=gather,
            gather_reference=gather_reference,
            logging=logging_config,
        )


def ensure_settings(path: Path, force: bool = False) -> None:
    if path.exists() and not force:
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DEFAULT_SETTINGS, encoding="utf-8")
