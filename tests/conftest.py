"""Shared test helpers."""

import pytest

from sitehealth.checks.base import Check, FunctionCheck, Severity
from sitehealth.context import Facts


def make_check(check_id: str, severity: Severity = Severity.GOOD, category: str = "performance", applicable=None):
    """A FunctionCheck that always returns the given severity."""
    return FunctionCheck(
        check_id,
        category,
        lambda check, context: check.verdict(severity, f"{check_id} is {severity.value}", "details"),
        applicable=applicable,
    )


class BrokenCheck(Check):
    check_id = "broken"
    category = "performance"
    label = "Broken Test"

    def evaluate(self, context):
        raise RuntimeError("backend exploded")


@pytest.fixture
def facts():
    return Facts(cache_backend="redis", bytecode_cache=True, intl_extension=False, locale="en_US")
