"""Report: immutable result of one evaluation run."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Iterator, Optional

from .checks.base import Severity, Verdict, utcnow


@dataclass(frozen=True)
class Section:
    """Verdicts sharing one category, e.g. "performance"."""

    category: str
    verdicts: tuple[Verdict, ...]

    @property
    def worst(self) -> Optional[Severity]:
        return max((v.severity for v in self.verdicts), default=None)


@dataclass(frozen=True)
class Report:
    """Ordered verdicts plus derived aggregates. All queries are pure."""

    _verdicts: tuple[Verdict, ...] = ()
    generated_at: datetime = field(default_factory=utcnow)
    skipped: tuple[str, ...] = ()  # Check ids found inapplicable

    @classmethod
    def from_verdicts(cls, verdicts: Iterable[Verdict], skipped: Iterable[str] = (), generated_at=None) -> "Report":
        return cls(
            _verdicts=tuple(verdicts),
            generated_at=generated_at or utcnow(),
            skipped=tuple(skipped),
        )

    def verdicts(self) -> tuple[Verdict, ...]:
        return self._verdicts

    def by_severity(self, severity: Severity) -> tuple[Verdict, ...]:
        return tuple(v for v in self._verdicts if v.severity == severity)

    def by_category(self, category: str) -> tuple[Verdict, ...]:
        return tuple(v for v in self._verdicts if v.category == category)

    def get(self, check_id: str) -> Optional[Verdict]:
        for v in self._verdicts:
            if v.check_id == check_id:
                return v
        return None

    def worst(self) -> Optional[Severity]:
        """Highest severity present, None for an empty report."""
        return max((v.severity for v in self._verdicts), default=None)

    def summary_counts(self) -> dict[Severity, int]:
        counts = {s: 0 for s in Severity}
        for v in self._verdicts:
            counts[v.severity] += 1
        return counts

    def categories(self) -> tuple[str, ...]:
        """Categories in order of first appearance."""
        return tuple(dict.fromkeys(v.category for v in self._verdicts))

    def sections(self) -> tuple[Section, ...]:
        return tuple(Section(c, self.by_category(c)) for c in self.categories())

    @property
    def is_empty(self) -> bool:
        return not self._verdicts

    def __len__(self) -> int:
        return len(self._verdicts)

    def __iter__(self) -> Iterator[Verdict]:
        return iter(self._verdicts)

    def to_dict(self) -> dict:
        worst = self.worst()
        return {
            "generated_at": self.generated_at.isoformat().replace("+00:00", "Z"),
            "worst": worst.value if worst else None,
            "counts": {s.value: n for s, n in self.summary_counts().items()},
            "verdicts": [v.to_dict() for v in self._verdicts],
            "skipped": list(self.skipped),
        }
