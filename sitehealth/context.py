"""Context: read-only bag of ambient facts consumed by checks."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional, Protocol, runtime_checkable

# Well-known fact keys gathered by the runtime probe
CACHE_BACKEND = "cache_backend"  # "db_transient", "apcu", "object_cache", "redis", "memcached"
CACHE_URL = "cache_url"
CACHE_REACHABLE = "cache_reachable"  # None when not probed
BYTECODE_CACHE = "bytecode_cache"
INTL_EXTENSION = "intl_extension"
LOCALE = "locale"
PYTHON_VERSION = "python_version"
PLATFORM = "platform"

DEFAULT_LOCALE = "en_US"


@runtime_checkable
class Context(Protocol):
    """Anything that can answer get_fact(key)."""

    def get_fact(self, key: str) -> Optional[Any]:
        ...


class Facts:
    """Immutable mapping-backed Context."""

    __slots__ = ("_data",)

    def __init__(self, data: Optional[Mapping[str, Any]] = None, **facts: Any):
        merged = dict(data or {})
        merged.update(facts)
        self._data = MappingProxyType(merged)

    def get_fact(self, key: str) -> Optional[Any]:
        return self._data.get(key)

    def merged(self, overrides: Optional[Mapping[str, Any]]) -> "Facts":
        """New Facts with overrides applied on top."""
        if not overrides:
            return self
        return Facts({**self._data, **overrides})

    def as_dict(self) -> dict[str, Any]:
        return dict(self._data)

    def keys(self):
        return self._data.keys()

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Facts):
            return NotImplemented
        return self._data == other._data

    def __repr__(self) -> str:
        return f"Facts({dict(self._data)!r})"
