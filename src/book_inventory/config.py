"""
Configuration for book-inventory.

Files are merged in this order, later ones winning:

1. /etc/book-inventory/config.yaml or config.json
2. ~/.config/book-inventory/config.yaml or config.json
3. config.yaml, config.json, book-inventory.yaml or book-inventory.json
   in the working directory

Only the first existing name is used at each location. BOOK_INVENTORY_*
environment variables are applied last; a double underscore separates
nested keys, e.g. BOOK_INVENTORY_STATS__TOP_AUTHORS=3.
"""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any

ENV_PREFIX = "BOOK_INVENTORY_"

DEFAULTS: dict[str, Any] = {
    "inventory_file": "bookInventory.json",
    "export_file": "inventory.csv",
    "log_level": "WARNING",
    "stats": {"top_authors": 5},
}


def _get_config_dirs() -> list[tuple[Path, tuple[str, ...]]]:
    """Search locations with the file names tried at each, lowest priority first."""
    shared = ("config.yaml", "config.json")
    return [
        (Path("/etc/book-inventory"), shared),
        (Path.home() / ".config" / "book-inventory", shared),
        (Path.cwd(), shared + ("book-inventory.yaml", "book-inventory.json")),
    ]


def find_config_files() -> list[Path]:
    """Return the existing config files, lowest priority first."""
    found = []
    for directory, names in _get_config_dirs():
        path = next((directory / n for n in names if (directory / n).exists()), None)
        if path is not None:
            found.append(path)
    return found


def _read(path: Path) -> dict[str, Any]:
    """Parse one config file.

    Raises:
        ImportError: For a YAML file when PyYAML is not installed.
        json.JSONDecodeError: If a JSON file is malformed.
    """
    with open(path, encoding="utf-8") as f:
        if path.suffix not in (".yaml", ".yml"):
            return json.load(f)
        try:
            import yaml
        except ImportError as e:
            raise ImportError(
                "PyYAML required for .yaml config files. Install with: pip install book-inventory[yaml]"
            ) from e
        return yaml.safe_load(f) or {}


def _merge(base: dict, override: dict) -> dict:
    """Merge override into base recursively, in place."""
    for key, value in override.items():
        if isinstance(base.get(key), dict) and isinstance(value, dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


def _env_value(value: str) -> Any:
    lowered = value.lower()
    if lowered in ("true", "yes", "1"):
        return True
    if lowered in ("false", "no", "0"):
        return False
    for kind in (int, float):
        try:
            return kind(value)
        except ValueError:
            pass
    return value


def _env_overrides() -> dict[str, Any]:
    """Collect BOOK_INVENTORY_* variables as a nested dict."""
    overrides: dict[str, Any] = {}
    for name, value in os.environ.items():
        if not name.startswith(ENV_PREFIX):
            continue
        *parents, leaf = name[len(ENV_PREFIX):].lower().split("__")
        target = overrides
        for part in parents:
            if not isinstance(target.get(part), dict):
                target[part] = {}
            target = target[part]
        target[leaf] = _env_value(value)
    return overrides


def _selected_files(path: Path | None) -> list[Path]:
    if path is None:
        return find_config_files()
    return [path] if path.exists() else []


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Return defaults merged with config file(s) and the environment.

    With an explicit path only that file is read (if it exists).
    """
    files = _selected_files(path)
    data = copy.deepcopy(DEFAULTS)
    for config_path in files:
        _merge(data, _read(config_path))
    return _merge(data, _env_overrides())


class Config:
    """Loaded configuration with typed accessors."""

    def __init__(self, path: Path | None = None):
        """Load configuration.

        Args:
            path: Explicit config file. When given, the standard locations
                  are not searched.
        """
        files = _selected_files(path)
        self.path: Path | None = files[-1] if files else None
        self.data = load_config(path)

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a value by dotted key, e.g. "stats.top_authors"."""
        target = self.data
        for part in key.split("."):
            if not isinstance(target, dict) or part not in target:
                return default
            target = target[part]
        return target

    @property
    def inventory_file(self) -> Path:
        """Return the persistence file, resolved against the working directory."""
        path = Path(str(self.get("inventory_file") or DEFAULTS["inventory_file"])).expanduser()
        return path if path.is_absolute() else Path.cwd() / path

    @property
    def export_file(self) -> Path:
        return Path(str(self.get("export_file") or DEFAULTS["export_file"])).expanduser()

    @property
    def top_authors(self) -> int:
        """Return how many authors the statistics ranking shows (at least 1)."""
        try:
            return max(1, int(self.get("stats.top_authors", 5)))
        except (TypeError, ValueError):
            return 5

    @property
    def log_level(self) -> str:
        return str(self.get("log_level", "WARNING")).upper()
