"""Check: bytecode cache enabled."""

from ..context import BYTECODE_CACHE, Context
from .base import Check, Severity, Verdict


class BytecodeCacheCheck(Check):
    check_id = "opcache"
    category = "performance"
    label = "Bytecode Cache Test"

    def evaluate(self, context: Context) -> Verdict:
        if context.get_fact(BYTECODE_CACHE):
            return self.verdict(
                Severity.GOOD,
                "Your site uses bytecode caching",
                "Compiled bytecode is cached between runs to improve performance. That's great.",
                bytecode_cache=True,
            )
        return self.verdict(
            Severity.RECOMMENDED,
            "You should use bytecode caching",
            "You should consider enabling the bytecode cache. It would improve the startup performance of your site.",
            bytecode_cache=False,
        )
