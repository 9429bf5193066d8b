"""JSON-based configuration persistence via platformdirs."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from epic_status_report.core.data_models import RunConfig

logger = logging.getLogger(__name__)

APP_NAME = "epic-status-report"
CONFIG_FILENAME = "config.json"

_DEFAULTS: dict[str, Any] = {
    "base_url": "",           # e.g. "https://issues.example.com/rest/api/2/issue/"
    "api_key_path": "",       # bearer token file; empty = use the OS keyring
    "working_dir": ".",
    "document_name": "weekly-status-report.md",
    "test": False,
    "fixture_path": "docs/test-example.json",
    "report_title": "Bi-Weekly Status Report",
    "render_profile": "plain",
    "browse_url": "",
    "request_timeout": None,
    "isolate_failures": False,
    "file_mode": "0777",
}


class ConfigManager:
    """Read/write JSON configuration stored in the platform config directory.

    An explicit *path* (``--config``) replaces the platform location.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        if path is None:
            self._dir = Path(user_config_dir(APP_NAME, appauthor=False))
            self._path = self._dir / CONFIG_FILENAME
        else:
            self._path = Path(path)
            self._dir = self._path.parent
        self._data: dict[str, Any] = dict(_DEFAULTS)
        self._load()
        logger.debug("Config loaded from %s", self._path)

    # -- public API -----------------------------------------------------------

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        """Return a config value, falling back to *default*."""
        return self._data.get(key, default)

    def update(self, values: dict[str, Any]) -> None:
        """Bulk-update config values and persist."""
        self._data.update(values)
        self._save()

    def reset(self) -> None:
        """Reset all values to defaults and persist."""
        logger.info("Resetting config to defaults")
        self._data = dict(_DEFAULTS)
        self._save()

    @property
    def data(self) -> dict[str, Any]:
        """Return a shallow copy of all configuration."""
        return dict(self._data)

    def run_config(self, **overrides: Any) -> RunConfig:
        """Build a validated :class:`RunConfig`; *overrides* win over stored values.

        Raises:
            ValueError: If a stored value has the wrong type.
        """
        values = {**self._data, **{k: v for k, v in overrides.items() if v is not None}}
        timeout = values.get("request_timeout")
        return RunConfig(
            base_url=_str(values, "base_url"),
            api_key_path=_str(values, "api_key_path"),
            working_dir=_str(values, "working_dir"),
            document_name=_str(values, "document_name"),
            test=_bool(values, "test"),
            fixture_path=_str(values, "fixture_path"),
            report_title=_str(values, "report_title"),
            render_profile=_str(values, "render_profile"),
            browse_url=_str(values, "browse_url"),
            request_timeout=float(timeout) if timeout not in (None, "") else None,
            isolate_failures=_bool(values, "isolate_failures"),
            file_mode=_mode(values.get("file_mode", "0777")),
        )

    # -- internals ------------------------------------------------------------

    def _load(self) -> None:
        if not self._path.exists():
            return
        try:
            with open(self._path, encoding="utf-8") as fh:
                stored = json.load(fh)
            if isinstance(stored, dict):
                self._data.update(stored)
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Failed to load config from %s: %s", self._path, exc)

    def _save(self) -> None:
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            with open(self._path, "w", encoding="utf-8") as fh:
                json.dump(self._data, fh, indent=2, default=str)
        except OSError as exc:
            logger.warning("Failed to save config to %s: %s", self._path, exc)


def parse_value(raw: str) -> Any:
    """Interpret a ``--set KEY=VALUE`` value as JSON, falling back to a string."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _str(values: dict[str, Any], key: str) -> str:
    value = values.get(key, _DEFAULTS.get(key))
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"Config key {key!r} must be a string, got {value!r}")
    return value


def _bool(values: dict[str, Any], key: str) -> bool:
    value = values.get(key, _DEFAULTS.get(key))
    if not isinstance(value, bool):
        raise ValueError(f"Config key {key!r} must be true or false, got {value!r}")
    return value


def _mode(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            return int(value, 8)
        except ValueError:
            pass
    raise ValueError(f"Config key 'file_mode' must be an octal string, got {value!r}")
