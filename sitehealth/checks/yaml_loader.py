"""Load checks declared in YAML: extensible without writing Python."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from ..context import Context
from ..errors import CheckEvaluationFault, ConfigError
from .base import Check, Severity, Verdict


@dataclass(frozen=True)
class Outcome:
    """One possible verdict of a declarative check."""

    severity: Severity
    title: str
    detail: str = ""
    when: dict = field(default_factory=dict)


def _match(when: dict, context: Context) -> bool:
    """Simple fact: value equality on every key."""
    for key, expected in when.items():
        if context.get_fact(key) != expected:
            return False
    return True


class YamlCheck(Check):
    """A check whose outcomes are data: first matching case wins, then default."""

    def __init__(
        self,
        check_id: str,
        category: str,
        cases: list[Outcome],
        default: Optional[Outcome] = None,
        applicable_when: Optional[dict] = None,
        label: str = "",
    ):
        super().__init__(check_id=check_id, category=category)
        self.cases = list(cases)
        self.default = default
        self.applicable_when = dict(applicable_when or {})
        self.label = label or check_id

    def applicable(self, context: Context) -> bool:
        return _match(self.applicable_when, context)

    def evaluate(self, context: Context) -> Verdict:
        for case in self.cases:
            if _match(case.when, context):
                return self._render(case)
        if self.default is not None:
            return self._render(self.default)
        raise CheckEvaluationFault(f"no case of {self.check_id} matched and no default is set")

    def _render(self, outcome: Outcome) -> Verdict:
        return self.with_evidence(outcome.severity, outcome.title, outcome.detail, dict(outcome.when))


def _outcome(data: Any, where: str) -> Outcome:
    if not isinstance(data, dict):
        raise ConfigError(f"{where}: expected a mapping")
    if "title" not in data:
        raise ConfigError(f"{where}: missing 'title'")
    when = data.get("when", {})
    if not isinstance(when, dict):
        raise ConfigError(f"{where}: 'when' must be a mapping of fact: value")
    try:
        severity = Severity.parse(data.get("severity", "recommended"))
    except ValueError as e:
        raise ConfigError(f"{where}: {e}") from None
    return Outcome(
        severity=severity,
        title=str(data["title"])[:200],
        detail=str(data.get("detail", "")),
        when=when,
    )


def check_from_dict(data: Any, where: str = "check") -> YamlCheck:
    """Build a YamlCheck from one parsed YAML entry."""
    if not isinstance(data, dict) or "id" not in data:
        raise ConfigError(f"{where}: each check needs an 'id'")
    check_id = str(data["id"])
    where = f"{where} {check_id!r}"
    cases = data.get("cases", [])
    if not isinstance(cases, list):
        raise ConfigError(f"{where}: 'cases' must be a list")
    default = data.get("default")
    if not cases and default is None:
        raise ConfigError(f"{where}: needs at least one case or a default")
    applicable_when = data.get("applicable_when", {})
    if not isinstance(applicable_when, dict):
        raise ConfigError(f"{where}: 'applicable_when' must be a mapping")
    return YamlCheck(
        check_id=check_id,
        category=str(data.get("category", "general")),
        cases=[_outcome(c, f"{where} case {i}") for i, c in enumerate(cases)],
        default=_outcome(default, f"{where} default") if default is not None else None,
        applicable_when=applicable_when,
        label=str(data.get("label", "")),
    )


def load_yaml_checks(path: Path) -> list[YamlCheck]:
    """Load checks from a YAML file: a list, or a mapping with a 'checks' key."""
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text())
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if data is None:
        return []
    if isinstance(data, dict) and "checks" in data:
        data = data["checks"]
    if not isinstance(data, list):
        raise ConfigError(f"{path}: expected a list of checks")
    return [check_from_dict(entry, where=str(path)) for entry in data]
