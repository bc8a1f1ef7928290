"""Check registry: append-only, registration-ordered."""

from __future__ import annotations

import logging
from typing import Iterator, Optional

from .checks.base import Check
from .errors import DuplicateCheckError, UnknownCheckId

logger = logging.getLogger(__name__)


class Registry:
    """
    Mapping from check id to Check.

    Built once at startup and read many times. There is no removal; a
    duplicate id is rejected and the first registration is kept.
    """

    def __init__(self, checks=None):
        self._checks: dict[str, Check] = {}
        for check in checks or ():
            self.register(check)

    def register(self, check: Check) -> Check:
        """Append a check. Raises DuplicateCheckError if its id is taken."""
        if check.check_id in self._checks:
            raise DuplicateCheckError(check.check_id)
        self._checks[check.check_id] = check
        logger.debug("Registered check %s (%s)", check.check_id, check.category or "uncategorized")
        return check

    def get(self, check_id: str) -> Optional[Check]:
        return self._checks.get(check_id)

    def require(self, check_id: str) -> Check:
        check = self._checks.get(check_id)
        if check is None:
            raise UnknownCheckId(check_id)
        return check

    def all(self) -> tuple[Check, ...]:
        """Registered checks in registration order."""
        return tuple(self._checks.values())

    def ids(self) -> tuple[str, ...]:
        return tuple(self._checks)

    def __contains__(self, check_id: object) -> bool:
        return check_id in self._checks

    def __iter__(self) -> Iterator[Check]:
        return iter(self.all())

    def __len__(self) -> int:
        return len(self._checks)

    def __repr__(self) -> str:
        return f"Registry({list(self._checks)!r})"
