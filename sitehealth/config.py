"""Settings file (optional YAML): fail_on, select, facts, checks_files."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from .checks.base import Severity
from .context import Facts
from .errors import ConfigError
from .probe import facts_from_dict

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATHS = (Path("sitehealth.yaml"), Path(".sitehealth") / "config.yaml")


@dataclass
class Settings:
    fail_on: Severity = Severity.CRITICAL
    select: Optional[list[str]] = None  # None = every registered check
    facts: dict[str, Any] = field(default_factory=dict)  # Overrides on top of probed facts
    checks_files: list[Path] = field(default_factory=list)
    source: Optional[Path] = None


def _read_yaml(path: Path) -> Any:
    try:
        return yaml.safe_load(path.read_text())
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e


def find_config(cwd: Optional[Path] = None) -> Optional[Path]:
    base = Path(cwd) if cwd else Path.cwd()
    for rel in DEFAULT_CONFIG_PATHS:
        p = base / rel
        if p.exists():
            return p
    return None


def load_settings(path: Optional[Path] = None, cwd: Optional[Path] = None) -> Settings:
    """Load settings from path, or the first default location found; defaults otherwise."""
    if path is None:
        path = find_config(cwd)
        if path is None:
            return Settings()
    path = Path(path)
    data = _read_yaml(path) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at top level")
    logger.debug("Loaded settings from %s", path)

    settings = Settings(source=path)
    if "fail_on" in data:
        try:
            settings.fail_on = Severity.parse(data["fail_on"])
        except ValueError as e:
            raise ConfigError(f"{path}: fail_on: {e}") from None
    if data.get("select") is not None:
        select = data["select"]
        if not isinstance(select, list) or not all(isinstance(s, str) for s in select):
            raise ConfigError(f"{path}: 'select' must be a list of check ids")
        settings.select = select
    facts = data.get("facts") or {}
    if not isinstance(facts, dict):
        raise ConfigError(f"{path}: 'facts' must be a mapping")
    settings.facts = facts
    files = data.get("checks_files") or []
    if isinstance(files, str):
        files = [files]
    if not isinstance(files, list):
        raise ConfigError(f"{path}: 'checks_files' must be a list of paths")
    settings.checks_files = [path.parent / str(f) for f in files]
    return settings


def load_facts_file(path: Path) -> Facts:
    """Facts from a JSON or YAML file, as written by `sitehealth facts`."""
    path = Path(path)
    if path.suffix.lower() == ".json":
        try:
            data = json.loads(path.read_text())
        except OSError as e:
            raise ConfigError(f"Cannot read {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {path}: {e}") from e
    else:
        data = _read_yaml(path)
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping of facts")
    return facts_from_dict(data)
