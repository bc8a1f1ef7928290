"""Runtime probe: gathers ambient facts once, before any check runs."""

from __future__ import annotations

import importlib.util
import locale
import logging
import os
import platform
import socket
import sys
from typing import Any, Mapping, Optional
from urllib.parse import urlparse

from .context import (
    BYTECODE_CACHE,
    CACHE_BACKEND,
    CACHE_REACHABLE,
    CACHE_URL,
    INTL_EXTENSION,
    LOCALE,
    PLATFORM,
    PYTHON_VERSION,
    Facts,
)

logger = logging.getLogger(__name__)

# Checked in order; the first one set wins
CACHE_URL_ENV_VARS = ("SITEHEALTH_CACHE_URL", "CACHE_URL", "REDIS_URL", "MEMCACHED_URL")
CACHE_BACKEND_ENV_VAR = "SITEHEALTH_CACHE_BACKEND"

_SCHEME_BACKENDS = {
    "redis": "redis",
    "rediss": "redis",
    "unix": "redis",
    "memcache": "memcached",
    "memcached": "memcached",
    "pymemcache": "memcached",
    "apcu": "apcu",
}
_DEFAULT_PORTS = {"redis": 6379, "memcached": 11211}

PROBE_TIMEOUT = 0.5


def gather_facts(
    environ: Optional[Mapping[str, str]] = None,
    probe_network: bool = True,
) -> Facts:
    """Inspect the current process and return its Facts."""
    env = os.environ if environ is None else environ

    cache_url = _cache_url(env)
    backend = env.get(CACHE_BACKEND_ENV_VAR) or _backend_from_url(cache_url)

    reachable = None
    if probe_network and cache_url and backend in _DEFAULT_PORTS:
        reachable = is_reachable(cache_url, _DEFAULT_PORTS[backend])

    return Facts({
        CACHE_BACKEND: backend,
        CACHE_URL: cache_url,
        CACHE_REACHABLE: reachable,
        BYTECODE_CACHE: _bytecode_cache_enabled(),
        INTL_EXTENSION: _has_intl(),
        LOCALE: _current_locale(env),
        PYTHON_VERSION: platform.python_version(),
        PLATFORM: f"{platform.system().lower()} {platform.machine().lower()}",
    })


def _cache_url(env: Mapping[str, str]) -> Optional[str]:
    for name in CACHE_URL_ENV_VARS:
        value = env.get(name)
        if value:
            return value
    return None


def _backend_from_url(url: Optional[str]) -> str:
    """Map a cache URL scheme to a backend name; no URL means transients in the database."""
    if not url:
        return "db_transient"
    scheme = urlparse(url).scheme.lower()
    return _SCHEME_BACKENDS.get(scheme, "object_cache")


def _bytecode_cache_enabled() -> bool:
    """False when the interpreter was told not to write .pyc files."""
    return not (sys.dont_write_bytecode or sys.flags.dont_write_bytecode)


def _has_intl() -> bool:
    """ICU bindings (PyICU) importable."""
    try:
        return importlib.util.find_spec("icu") is not None
    except (ImportError, ValueError):
        return False


def _current_locale(env: Mapping[str, str]) -> Optional[str]:
    """Locale as ll_CC, e.g. "fr_FR". Environment first, then the C library."""
    for name in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = env.get(name)
        if value:
            return _normalize_locale(value)
    try:
        code = locale.getlocale()[0]
    except ValueError:
        code = None
    return _normalize_locale(code) if code else None


def _normalize_locale(value: str) -> Optional[str]:
    code = value.split(".")[0].split("@")[0].replace("-", "_")
    if code in ("C", "POSIX", ""):
        return None
    return code


def is_reachable(url: str, default_port: int) -> bool:
    """Whether the cache server at url accepts a TCP connection."""
    parsed = urlparse(url)
    if parsed.scheme == "unix":
        return os.path.exists(parsed.path)
    host = parsed.hostname or "127.0.0.1"
    try:
        port = parsed.port or default_port
    except ValueError:
        logger.warning("Invalid port in cache URL %s", url)
        return False
    try:
        with socket.create_connection((host, port), timeout=PROBE_TIMEOUT):
            return True
    except OSError as e:
        logger.info("Cache server %s:%s not reachable: %s", host, port, e)
        return False


def facts_from_dict(data: Mapping[str, Any]) -> Facts:
    """Build Facts from a dict (e.g. the output of `sitehealth facts`)."""
    if "facts" in data and isinstance(data["facts"], dict):
        data = data["facts"]
    return Facts(data)
