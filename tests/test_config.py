"""Tests for settings and facts files."""

import json

import pytest

from sitehealth.checks.base import Severity
from sitehealth.config import Settings, load_facts_file, load_settings
from sitehealth.errors import ConfigError


def test_defaults_when_no_file(tmp_path):
    s = load_settings(cwd=tmp_path)
    assert s == Settings()
    assert s.fail_on == Severity.CRITICAL
    assert s.select is None


def test_load_from_default_location(tmp_path):
    (tmp_path / "sitehealth.yaml").write_text(
        "fail_on: recommended\n"
        "select: [object_cache]\n"
        "facts:\n  locale: fr_FR\n"
        "checks_files: [extra/checks.yaml]\n"
    )
    s = load_settings(cwd=tmp_path)
    assert s.fail_on == Severity.RECOMMENDED
    assert s.select == ["object_cache"]
    assert s.facts == {"locale": "fr_FR"}
    assert s.checks_files == [tmp_path / "extra" / "checks.yaml"]
    assert s.source == tmp_path / "sitehealth.yaml"


def test_hidden_dir_location(tmp_path):
    (tmp_path / ".sitehealth").mkdir()
    (tmp_path / ".sitehealth" / "config.yaml").write_text("fail_on: critical\n")
    assert load_settings(cwd=tmp_path).source == tmp_path / ".sitehealth" / "config.yaml"


@pytest.mark.parametrize("text", [
    "- just a list\n",
    "fail_on: sometimes\n",
    "select: object_cache\n",
    "facts: [1, 2]\n",
    "checks_files: {a: b}\n",
    "fail_on: [unclosed\n",
])
def test_invalid_settings(tmp_path, text):
    p = tmp_path / "bad.yaml"
    p.write_text(text)
    with pytest.raises(ConfigError):
        load_settings(p)


def test_load_facts_json(tmp_path):
    p = tmp_path / "facts.json"
    p.write_text(json.dumps({"facts": {"cache_backend": "redis"}}))
    assert load_facts_file(p).get_fact("cache_backend") == "redis"


def test_load_facts_yaml(tmp_path):
    p = tmp_path / "facts.yaml"
    p.write_text("cache_backend: apcu\nbytecode_cache: true\n")
    facts = load_facts_file(p)
    assert facts.get_fact("cache_backend") == "apcu"
    assert facts.get_fact("bytecode_cache") is True


def test_load_facts_invalid(tmp_path):
    p = tmp_path / "facts.json"
    p.write_text("{nope")
    with pytest.raises(ConfigError):
        load_facts_file(p)
    p2 = tmp_path / "facts.yaml"
    p2.write_text("- a\n- b\n")
    with pytest.raises(ConfigError):
        load_facts_file(p2)
