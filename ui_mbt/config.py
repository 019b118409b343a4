"""Harness configuration and UI selector maps.

Selectors live in YAML files so they can be updated when the UI changes
without touching the assertion and action routines.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from ui_mbt.errors import ConfigurationError

_LOGGER = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"
DEFAULT_CONFIG_FILE = DATA_DIR / "harness.yaml"
DEFAULT_SELECTORS_FILE = DATA_DIR / "todomvc_selectors.yaml"

BROWSERS = ("chromium", "firefox", "webkit")

ENV_OVERRIDES = {
    "UI_MBT_BASE_URL": "base_url",
    "UI_MBT_BROWSER": "browser",
    "UI_MBT_HEADLESS": "headless",
}


def _read_yaml(path: Union[str, Path]) -> Any:
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Malformed YAML in {path}: {exc}") from exc


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class HarnessConfig:
    """Settings for one harness run.

    Attributes:
        base_url: URL the SUT is loaded from before a path starts
        browser: Playwright browser type (chromium, firefox or webkit)
        headless: Run the browser without a window
        timeout_ms: Default timeout for every driver operation
        todo_text: Text typed by the "fill out todo" and "add todo" actions
        selectors_file: YAML file with the UI selectors
    """

    base_url: str = "https://todomvc.com/examples/react/#/"
    browser: str = "chromium"
    headless: bool = True
    timeout_ms: int = 10000
    todo_text: str = "new todo filled out"
    selectors_file: str = str(DEFAULT_SELECTORS_FILE)

    def __post_init__(self):
        self.headless = _as_bool(self.headless)
        self.timeout_ms = int(self.timeout_ms)
        if self.browser not in BROWSERS:
            raise ConfigurationError(
                f"Unknown browser {self.browser!r}, expected one of {', '.join(BROWSERS)}"
            )
        if self.timeout_ms <= 0:
            raise ConfigurationError("timeout_ms must be positive")


def load_config(path: Optional[Union[str, Path]] = None, **overrides: Any) -> HarnessConfig:
    """Load configuration from YAML on top of the packaged defaults.

    Environment variables (``UI_MBT_BASE_URL``, ``UI_MBT_BROWSER``,
    ``UI_MBT_HEADLESS``) override file values; keyword ``overrides`` win over
    both. ``None`` overrides are ignored.
    """
    data: dict[str, Any] = dict(_read_yaml(DEFAULT_CONFIG_FILE) or {})
    if path is not None:
        loaded = _read_yaml(path) or {}
        if not isinstance(loaded, dict):
            raise ConfigurationError(f"Expected a mapping in {path}")
        data.update(loaded)
    for env_name, key in ENV_OVERRIDES.items():
        if env_name in os.environ:
            data[key] = os.environ[env_name]
    data.update({k: v for k, v in overrides.items() if v is not None})

    known = {f.name for f in fields(HarnessConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")

    config = HarnessConfig(**data)
    _LOGGER.debug("Loaded harness configuration: %s", config)
    return config


class SelectorMap:
    """UI selectors organised by page section, loaded from YAML.

    Example:
        selectors = SelectorMap.load()
        selectors.get("todo_form.new_todo")   # ".new-todo"
    """

    def __init__(self, selectors: dict[str, Any]):
        self._selectors = selectors

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None) -> "SelectorMap":
        data = _read_yaml(path or DEFAULT_SELECTORS_FILE)
        if not isinstance(data, dict):
            raise ConfigurationError(f"Expected a mapping of selectors in {path}")
        return cls(data)

    def get(self, selector_path: str, **kwargs: Any) -> str:
        """Resolve a dot-notation key, formatting ``{placeholders}`` from kwargs."""
        value: Any = self._selectors
        for part in selector_path.split("."):
            if not isinstance(value, dict) or part not in value:
                raise ConfigurationError(f"Unknown selector: {selector_path}")
            value = value[part]
        if isinstance(value, dict):
            value = value.get("selector")
        if not isinstance(value, str):
            raise ConfigurationError(f"Selector {selector_path} is not a string")
        return value.format(**kwargs) if kwargs else value
