"""Check engine: runs registered checks against a context, isolating faults."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterable, Optional

from .checks.base import INTERNAL_CATEGORY, Check, Severity, Verdict, utcnow
from .context import Context
from .errors import CheckEvaluationFault
from .registry import Registry
from .report import Report

logger = logging.getLogger(__name__)


class Evaluator:
    """
    Runs checks in registry order and assembles a Report.

    A check that raises, or returns anything other than its own Verdict,
    becomes a CRITICAL verdict in the "internal" category; run() itself
    never raises because of a check.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self.clock = clock or utcnow

    def run(
        self,
        registry: Registry,
        context: Context,
        selector: Optional[Iterable[str]] = None,
    ) -> Report:
        checks = self._select(registry, selector)
        verdicts: list[Verdict] = []
        skipped: list[str] = []
        for check in checks:
            try:
                if not check.applicable(context):
                    logger.debug("Skipping %s: not applicable", check.check_id)
                    skipped.append(check.check_id)
                    continue
                verdict = check.evaluate(context)
                self._validate(check, verdict)
            except Exception as e:
                logger.error("Check %s failed: %s", check.check_id, _describe(e), exc_info=True)
                verdict = _fault_verdict(check, e)
            verdicts.append(replace(verdict, evaluated_at=self.clock()))
        return Report.from_verdicts(verdicts, skipped=skipped, generated_at=self.clock())

    @staticmethod
    def _select(registry: Registry, selector: Optional[Iterable[str]]) -> list[Check]:
        if selector is None:
            return list(registry.all())
        if isinstance(selector, str):
            selector = [selector]
        wanted = set(selector)
        for unknown in sorted(wanted - set(registry.ids())):
            logger.warning("Ignoring unknown check in selector: %s", unknown)
        return [c for c in registry.all() if c.check_id in wanted]

    @staticmethod
    def _validate(check: Check, verdict: object) -> None:
        if not isinstance(verdict, Verdict):
            raise CheckEvaluationFault(
                f"expected a Verdict, got {type(verdict).__name__} (no outcome matched the context)"
            )
        if verdict.check_id != check.check_id:
            raise CheckEvaluationFault(
                f"verdict is tagged {verdict.check_id!r}, expected {check.check_id!r}"
            )


def _fault_verdict(check: Check, error: Exception) -> Verdict:
    name = check.label or check.check_id
    return Verdict(
        check_id=check.check_id,
        severity=Severity.CRITICAL,
        title=f"{name} could not be completed",
        detail=f"The check raised {type(error).__name__}: {_describe(error)}",
        category=INTERNAL_CATEGORY,
        evidence={"error_type": type(error).__name__, "check_category": check.category},
    )


def _describe(error: Exception) -> str:
    try:
        return str(error)
    except Exception:
        return f"<unprintable {type(error).__name__}>"


def run_checks(
    context: Context,
    registry: Optional[Registry] = None,
    selector: Optional[Iterable[str]] = None,
) -> Report:
    """Run the built-in checks (or the given registry) and return the report."""
    if registry is None:
        from .checks import default_registry
        registry = default_registry()
    return Evaluator().run(registry, context, selector)
