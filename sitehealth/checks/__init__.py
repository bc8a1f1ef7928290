"""Built-in checks. Pluggable: none of them is required by the engine."""

from .bytecode_cache import BytecodeCacheCheck
from .i18n import I18nCheck
from .object_cache import ObjectCacheCheck

BUILTIN_CHECKS = (ObjectCacheCheck, BytecodeCacheCheck, I18nCheck)


def default_registry():
    """A fresh Registry holding one instance of each built-in check."""
    from ..registry import Registry
    return Registry(cls() for cls in BUILTIN_CHECKS)


__all__ = [
    "BUILTIN_CHECKS",
    "BytecodeCacheCheck",
    "I18nCheck",
    "ObjectCacheCheck",
    "default_registry",
]
