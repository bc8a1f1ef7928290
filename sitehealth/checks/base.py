"""Base types for checks."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Optional

from ..context import Context


class Severity(str, Enum):
    """Ordered health level: GOOD < RECOMMENDED < CRITICAL."""

    GOOD = "good"
    RECOMMENDED = "recommended"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _RANK[self]

    @property
    def color(self) -> str:
        """Badge colour for renderers."""
        return _COLOR[self]

    def __lt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank

    @classmethod
    def parse(cls, value: str) -> "Severity":
        """Case-insensitive lookup by value ("good", "Recommended", ...)."""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown severity: {value!r} (expected one of: {', '.join(s.value for s in cls)})"
            ) from None


_RANK = {Severity.GOOD: 0, Severity.RECOMMENDED: 1, Severity.CRITICAL: 2}
_COLOR = {Severity.GOOD: "blue", Severity.RECOMMENDED: "orange", Severity.CRITICAL: "red"}

# Category assigned to verdicts synthesized from a faulting check
INTERNAL_CATEGORY = "internal"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Verdict:
    """Outcome of evaluating one check."""

    check_id: str
    severity: Severity
    title: str
    detail: str  # Plain text, no markup
    category: str
    evaluated_at: datetime = field(default_factory=utcnow)
    evidence: Optional[MappingProxyType] = field(default=None, hash=False)  # e.g. {"cache_backend": "apcu"}

    def __post_init__(self):
        if not isinstance(self.severity, Severity):
            try:
                object.__setattr__(self, "severity", Severity(self.severity))
            except ValueError:
                raise ValueError(f"Verdict {self.check_id!r}: invalid severity {self.severity!r}") from None
        if self.evidence is not None:
            object.__setattr__(self, "evidence", MappingProxyType(dict(self.evidence)))

    def same_outcome(self, other: "Verdict") -> bool:
        """Equal in everything but evaluated_at."""
        return replace(self, evaluated_at=other.evaluated_at) == other

    def to_dict(self) -> dict:
        out = {
            "check_id": self.check_id,
            "severity": self.severity.value,
            "title": self.title,
            "detail": self.detail,
            "category": self.category,
            "evaluated_at": self.evaluated_at.isoformat().replace("+00:00", "Z"),
        }
        if self.evidence:
            out["evidence"] = dict(self.evidence)
        return out


class Check:
    """
    A named evaluation unit. Subclasses set check_id/category/label and
    implement evaluate(); applicable() lets a check opt out for a context.
    """

    check_id: str = ""
    category: str = ""
    label: str = ""  # e.g. "Object Cache Test"

    def __init__(self, check_id: Optional[str] = None, category: Optional[str] = None):
        if check_id is not None:
            self.check_id = check_id
        if category is not None:
            self.category = category
        if not self.check_id:
            raise ValueError(f"{type(self).__name__} has no check_id")

    def applicable(self, context: Context) -> bool:
        return True

    def evaluate(self, context: Context) -> Verdict:
        raise NotImplementedError

    def verdict(self, severity: Severity, title: str, detail: str = "", **evidence: Any) -> Verdict:
        """Build a verdict tagged with this check's id and category.

        Keyword arguments become evidence; use with_evidence() when the
        evidence keys are arbitrary data.
        """
        return self.with_evidence(severity, title, detail, evidence)

    def with_evidence(
        self, severity: Severity, title: str, detail: str = "", evidence: Optional[dict] = None
    ) -> Verdict:
        return Verdict(
            check_id=self.check_id,
            severity=severity,
            title=title,
            detail=detail,
            category=self.category,
            evidence=evidence or None,
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.check_id!r}>"


class FunctionCheck(Check):
    """Adapts a plain function fn(check, context) -> Verdict into a Check."""

    def __init__(
        self,
        check_id: str,
        category: str,
        fn: Callable[["FunctionCheck", Context], Verdict],
        applicable: Optional[Callable[[Context], bool]] = None,
        label: str = "",
    ):
        super().__init__(check_id=check_id, category=category)
        self._fn = fn
        self._applicable = applicable
        self.label = label or check_id

    def applicable(self, context: Context) -> bool:
        if self._applicable is None:
            return True
        return bool(self._applicable(context))

    def evaluate(self, context: Context) -> Verdict:
        return self._fn(self, context)
