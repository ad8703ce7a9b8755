"""Configuration management utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

BUNDLED_CONFIG_DIR = Path(__file__).resolve().parent


class ConfigManager:
    """YAML-backed loader for bundled or user-supplied configuration."""

    def __init__(self, base_path: str | Path = BUNDLED_CONFIG_DIR):
        self._base_path = Path(base_path)

    def load(self, name: str) -> Any:
        """Load a YAML configuration by name without file extension."""
        path = self._base_path / f"{name}.yaml"
        return self.load_path(path)

    @staticmethod
    def load_path(path: str | Path) -> Any:
        with Path(path).open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle)


__all__ = ["BUNDLED_CONFIG_DIR", "ConfigManager"]
