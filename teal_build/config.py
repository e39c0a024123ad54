"""Project configuration loaded from ``tlbuild.json``."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from teal_build import paths
from teal_build.errors import ConfigError
from teal_build.scanner import DEFAULT_SKIP_DIRS

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "tlbuild.json"


class BuildConfig(BaseModel):
    source_dir: str = "."
    build_dir: str | None = None  # None: outputs are written beside sources
    include: list[str] = Field(default_factory=lambda: ["**/*.tl"])
    exclude: list[str] = Field(default_factory=list)
    include_dir: list[str] = Field(default_factory=list)  # extra module search dirs
    skip_dirs: list[str] = Field(default_factory=lambda: list(DEFAULT_SKIP_DIRS))

    def search_dirs(self) -> list[str]:
        """Module search directories, ``include_dir`` first."""
        dirs: list[str] = []
        for d in [*self.include_dir, self.source_dir]:
            d = paths.canonicalize(d)
            if d not in dirs:
                dirs.append(d)
        return dirs


def load_config(path: Path | None = None) -> BuildConfig:
    """Load the config at ``path`` (default ``./tlbuild.json``).

    A missing file yields the defaults.
    """
    config_path = path or Path(CONFIG_FILENAME)
    if not config_path.exists():
        logger.debug("no %s found, using defaults", config_path)
        return BuildConfig()
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read {config_path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path}: expected a JSON object")
    try:
        return BuildConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid {config_path}: {e}") from e
