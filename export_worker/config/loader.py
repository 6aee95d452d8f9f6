"""Layered TOML configuration.

config/default.toml is read first, then config/<EXPORT_WORKER_ENV>.toml is
merged over it table by table. Either file may be absent.
"""

import os
import tomllib
from functools import reduce
from pathlib import Path
from typing import Any

CONFIG_DIR_ENV = "EXPORT_WORKER_CONFIG_DIR"
ENVIRONMENT_ENV = "EXPORT_WORKER_ENV"
DEFAULT_ENVIRONMENT = "development"

# Directories checked for config/, starting at the working directory
SEARCH_DEPTH = 5


def find_config_dir() -> Path:
    """Locate the config directory.

    EXPORT_WORKER_CONFIG_DIR wins and must exist. Otherwise the nearest
    config/ at or above the working directory is used.
    """
    explicit = os.environ.get(CONFIG_DIR_ENV)
    if explicit:
        path = Path(explicit)
        if not path.is_dir():
            raise FileNotFoundError(f"Config directory not found: {explicit}")
        return path

    cwd = Path.cwd()
    for directory in [cwd, *cwd.parents][:SEARCH_DEPTH]:
        if (directory / "config").is_dir():
            return directory / "config"
    return Path("config")


def config_layers(config_dir: Path, environment: str) -> list[Path]:
    """TOML files to merge, lowest precedence first; missing files are skipped."""
    candidates = [config_dir / "default.toml", config_dir / f"{environment}.toml"]
    return [path for path in candidates if path.is_file()]


def merge_tables(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into a copy of base; tables merge, other values replace."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_tables(current, value)
        else:
            merged[key] = value
    return merged


def load_config(config_dir: Path | None = None, environment: str | None = None) -> dict[str, Any]:
    """Read and merge the configuration layers.

    Raises:
        FileNotFoundError: EXPORT_WORKER_CONFIG_DIR names a missing directory
        tomllib.TOMLDecodeError: A layer is not valid TOML
    """
    config_dir = config_dir or find_config_dir()
    environment = environment or os.environ.get(ENVIRONMENT_ENV, DEFAULT_ENVIRONMENT)

    tables = []
    for path in config_layers(config_dir, environment):
        with path.open("rb") as f:
            tables.append(tomllib.load(f))
    return reduce(merge_tables, tables, {})
