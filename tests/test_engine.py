"""Tests for the evaluator: ordering, applicability, selection, fault isolation."""

from datetime import datetime, timedelta, timezone

from sitehealth.checks import ObjectCacheCheck, BytecodeCacheCheck, I18nCheck, default_registry
from sitehealth.checks.base import Check, FunctionCheck, Severity, Verdict
from sitehealth.context import Facts
from sitehealth.engine import Evaluator, run_checks
from sitehealth.registry import Registry

from conftest import BrokenCheck, make_check


def _fixed_clock(start=datetime(2024, 1, 1, tzinfo=timezone.utc)):
    ticks = iter(start + timedelta(seconds=i) for i in range(1000))
    return lambda: next(ticks)


def test_verdicts_follow_registry_order():
    registry = Registry([make_check("c"), make_check("a"), make_check("b")])
    report = Evaluator().run(registry, Facts())
    assert [v.check_id for v in report.verdicts()] == ["c", "a", "b"]


def test_inapplicable_check_contributes_no_verdict():
    """applicable() == False -> no verdict, not a failure."""
    registry = Registry([
        make_check("on"),
        make_check("off", Severity.CRITICAL, applicable=lambda ctx: False),
    ])
    report = Evaluator().run(registry, Facts())
    assert [v.check_id for v in report.verdicts()] == ["on"]
    assert report.skipped == ("off",)
    assert report.worst() == Severity.GOOD


def test_faulting_check_becomes_critical_internal_verdict():
    """A raising check yields exactly one CRITICAL/internal verdict; run() does not raise."""
    registry = Registry([make_check("before"), BrokenCheck(), make_check("after")])
    report = Evaluator().run(registry, Facts())
    ids = [v.check_id for v in report.verdicts()]
    assert ids == ["before", "broken", "after"]
    broken = [v for v in report.verdicts() if v.check_id == "broken"]
    assert len(broken) == 1
    assert broken[0].severity == Severity.CRITICAL
    assert broken[0].category == "internal"
    assert "backend exploded" in broken[0].detail
    assert "Broken Test" in broken[0].title


def test_every_check_failing_still_produces_report():
    class Boom(Check):
        category = "performance"

        def evaluate(self, context):
            raise ValueError(self.check_id)

    registry = Registry([Boom("one"), Boom("two")])
    report = Evaluator().run(registry, Facts())
    assert len(report) == 2
    assert all(v.severity == Severity.CRITICAL and v.category == "internal" for v in report)


def test_fault_in_applicable_is_isolated():
    def explode(ctx):
        raise KeyError("locale")

    registry = Registry([make_check("x", applicable=explode)])
    report = Evaluator().run(registry, Facts())
    assert report.verdicts()[0].category == "internal"


def test_returning_none_is_a_fault():
    """A check whose branches all miss returns None -> converted to CRITICAL."""
    check = FunctionCheck("empty", "performance", lambda c, ctx: None)
    report = Evaluator().run(Registry([check]), Facts())
    v = report.verdicts()[0]
    assert v.check_id == "empty"
    assert v.severity == Severity.CRITICAL
    assert v.category == "internal"


def test_verdict_for_wrong_check_id_is_a_fault():
    def impostor(check, ctx):
        return Verdict("someone_else", Severity.GOOD, "ok", "", "performance")

    report = Evaluator().run(Registry([FunctionCheck("mine", "performance", impostor)]), Facts())
    v = report.verdicts()[0]
    assert v.check_id == "mine"
    assert v.severity == Severity.CRITICAL


def test_evaluated_at_comes_from_clock():
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    report = Evaluator(clock=_fixed_clock(start)).run(Registry([make_check("a")]), Facts())
    assert report.verdicts()[0].evaluated_at == start


def test_two_runs_differ_only_in_timestamps(facts):
    registry = default_registry()
    r1 = Evaluator(clock=_fixed_clock()).run(registry, facts)
    r2 = Evaluator(clock=_fixed_clock(datetime(2030, 6, 1, tzinfo=timezone.utc))).run(registry, facts)
    assert len(r1) == len(r2)
    for a, b in zip(r1.verdicts(), r2.verdicts()):
        assert a.evaluated_at != b.evaluated_at
        assert a.same_outcome(b)


def test_new_report_per_run(facts):
    evaluator = Evaluator()
    registry = default_registry()
    assert evaluator.run(registry, facts) is not evaluator.run(registry, facts)


def test_scenario_db_transient_is_recommended():
    registry = Registry([ObjectCacheCheck(check_id="obj_cache")])
    report = Evaluator().run(registry, Facts(cache_backend="db_transient"))
    assert len(report) == 1
    v = report.verdicts()[0]
    assert v.check_id == "obj_cache"
    assert v.severity == Severity.RECOMMENDED
    assert v.category == "performance"


def test_scenario_redis_is_good():
    registry = Registry([ObjectCacheCheck(check_id="obj_cache")])
    report = Evaluator().run(registry, Facts(cache_backend="redis"))
    assert report.verdicts()[0].severity == Severity.GOOD


def test_scenario_default_locale_gives_empty_report():
    registry = Registry([I18nCheck(check_id="i18n_check")])
    report = Evaluator().run(registry, Facts(locale="en_US"))
    assert report.is_empty
    assert report.worst() is None


def test_scenario_selector_limits_checks():
    registry = Registry([ObjectCacheCheck(check_id="obj_cache"), BytecodeCacheCheck()])
    report = Evaluator().run(registry, Facts(cache_backend="redis", bytecode_cache=True), selector={"obj_cache"})
    assert [v.check_id for v in report.verdicts()] == ["obj_cache"]


def test_unknown_selector_entries_are_ignored(caplog):
    registry = Registry([make_check("a"), make_check("b")])
    report = Evaluator().run(registry, Facts(), selector=["b", "nope"])
    assert [v.check_id for v in report.verdicts()] == ["b"]
    assert "nope" in caplog.text


def test_selector_keeps_registry_order():
    registry = Registry([make_check("a"), make_check("b"), make_check("c")])
    report = Evaluator().run(registry, Facts(), selector=["c", "a"])
    assert [v.check_id for v in report.verdicts()] == ["a", "c"]


def test_unmatched_cache_backend_is_internal_fault():
    report = run_checks(Facts(cache_backend="carrier_pigeon", bytecode_cache=True), selector=["object_cache"])
    v = report.verdicts()[0]
    assert v.check_id == "object_cache"
    assert v.severity == Severity.CRITICAL
    assert v.category == "internal"
    assert "carrier_pigeon" in v.detail


def test_run_checks_uses_builtins(facts):
    report = run_checks(facts)
    assert [v.check_id for v in report.verdicts()] == ["object_cache", "opcache"]
    assert report.skipped == ("i18n",)


def test_plain_string_severity_does_not_break_worst():
    registry = Registry([
        make_check("bad", Severity.CRITICAL),
        FunctionCheck("loose", "performance", lambda check, ctx: Verdict("loose", "recommended", "t", "d", "performance")),
    ])
    report = Evaluator().run(registry, Facts())
    assert report.get("loose").severity is Severity.RECOMMENDED
    assert report.worst() == Severity.CRITICAL


def test_invalid_severity_becomes_fault():
    registry = Registry([
        FunctionCheck("odd", "performance", lambda check, ctx: check.verdict("urgent", "t")),
    ])
    v = Evaluator().run(registry, Facts()).verdicts()[0]
    assert v.severity == Severity.CRITICAL
    assert v.category == "internal"


def test_unprintable_exception_still_produces_report():
    class Unprintable(Exception):
        def __str__(self):
            raise RuntimeError("str failed")

    class Raises(Check):
        check_id = "unprintable"
        category = "performance"

        def evaluate(self, context):
            raise Unprintable()

    report = Evaluator().run(Registry([Raises(), make_check("after")]), Facts())
    assert [v.check_id for v in report.verdicts()] == ["unprintable", "after"]
    fault = report.get("unprintable")
    assert fault.category == "internal"
    assert "Unprintable" in fault.detail


def test_single_string_selector():
    registry = Registry([make_check("obj_cache"), make_check("i18n_check")])
    report = Evaluator().run(registry, Facts(), "obj_cache")
    assert [v.check_id for v in report.verdicts()] == ["obj_cache"]
