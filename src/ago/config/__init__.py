"""Configuration management for ago."""

from __future__ import annotations

import textwrap
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .models import AgoConfig
from .resolver import assign_nested, resolve_with_precedence

CONFIG_FILENAME = "config.yaml"
_CONFIG_HEADER = textwrap.dedent(
    """\
    # ago configuration file
    # Generated automatically; manage via `ago config set` or edit by hand.
    """
)


class ConfigManager:
    """Load and persist configuration data, applying precedence rules."""

    def __init__(self, config_path: Path) -> None:
        self._config_path = config_path.expanduser()

    @property
    def config_path(self) -> Path:
        """Return the resolved configuration path."""
        return self._config_path

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        ensure_file: bool = False,
    ) -> AgoConfig:
        """Load configuration data from disk, applying precedence rules.

        Args:
            cli_overrides: Values derived from command-line flags.
            ensure_file: Create the file with defaults when it is missing.

        Returns:
            AgoConfig: Validated configuration.

        Raises:
            ConfigError: If the file cannot be parsed or holds invalid values.
        """
        if ensure_file:
            self.ensure_exists()

        return resolve_with_precedence(
            defaults=AgoConfig(),
            file_overrides=self._read_file(),
            cli_overrides=cli_overrides,
        )

    def load_file_overrides(self) -> dict[str, Any]:
        """Return raw overrides stored on disk."""
        return self._read_file()

    def save(self, config: AgoConfig | Mapping[str, Any]) -> None:
        """Persist configuration data to disk."""
        if isinstance(config, AgoConfig):
            data = config.model_dump(mode="python")
        else:
            data = dict(config)
        self._write_file(data)

    def ensure_exists(self) -> Path:
        """Create a configuration file with defaults if one does not exist."""
        path = self._config_path
        if not path.exists():
            self._write_file(AgoConfig().model_dump(mode="python"))
        return path

    def read_text(self) -> str:
        """Return the current configuration file contents."""
        if not self._config_path.exists():
            return ""
        return self._config_path.read_text(encoding="utf-8")

    # Internal helpers -------------------------------------------------

    def _read_file(self) -> dict[str, Any]:
        if not self._config_path.exists():
            return {}

        try:
            raw = yaml.safe_load(self._config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse configuration file: {exc}") from exc

        if not isinstance(raw, dict):
            raise ConfigError("Configuration file must contain a mapping at the top level.")

        return raw

    def _write_file(self, data: Mapping[str, Any]) -> None:
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        serialized = yaml.safe_dump(dict(data), sort_keys=False)
        stamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        timestamp = f"# Last updated: {stamp}\n"
        self._config_path.write_text(_CONFIG_HEADER + timestamp + serialized, encoding="utf-8")


__all__ = [
    "ConfigManager",
    "CONFIG_FILENAME",
    "AgoConfig",
    "resolve_with_precedence",
    "assign_nested",
    "ConfigError",
]
