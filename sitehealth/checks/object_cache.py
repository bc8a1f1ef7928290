"""Check: object cache backend in use."""

from ..context import CACHE_BACKEND, CACHE_REACHABLE, Context
from ..errors import CheckEvaluationFault
from .base import Check, Severity, Verdict

DEDICATED_BACKENDS = ("object_cache", "redis", "memcached")
NO_CACHE_BACKENDS = ("db_transient", "none")

_ADVICE = (
    "You should consider using a dedicated object caching mechanism, "
    "like Memcached or Redis, to improve your site's speed."
)


class ObjectCacheCheck(Check):
    """none -> RECOMMENDED, apcu -> RECOMMENDED, dedicated -> GOOD."""

    check_id = "object_cache"
    category = "performance"
    label = "Object Cache Test"

    def evaluate(self, context: Context) -> Verdict:
        backend = context.get_fact(CACHE_BACKEND)
        if backend in NO_CACHE_BACKENDS:
            return self.verdict(
                Severity.RECOMMENDED,
                "You should use object caching",
                f"Your site uses database transient. {_ADVICE}",
                cache_backend=backend,
            )
        if backend == "apcu":
            return self.verdict(
                Severity.RECOMMENDED,
                "You should improve object caching",
                f"Your site uses APCu, but only a few plugins know how to take advantage of it. {_ADVICE}",
                cache_backend=backend,
            )
        if backend in DEDICATED_BACKENDS:
            if context.get_fact(CACHE_REACHABLE) is False:
                return self.verdict(
                    Severity.CRITICAL,
                    "Object cache is unreachable",
                    f"Your site is configured for {backend}, but the cache server did not answer.",
                    cache_backend=backend,
                    cache_reachable=False,
                )
            return self.verdict(
                Severity.GOOD,
                "Your site uses object caching",
                "Your site uses a dedicated object caching mechanism. That's great.",
                cache_backend=backend,
            )
        raise CheckEvaluationFault(f"unrecognized cache backend: {backend!r}")
