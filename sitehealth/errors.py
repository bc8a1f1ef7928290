"""Exception taxonomy."""


class SiteHealthError(Exception):
    """Base for all sitehealth errors."""


class DuplicateCheckError(SiteHealthError):
    """A check id was registered twice."""

    def __init__(self, check_id: str):
        self.check_id = check_id
        super().__init__(f"Check already registered: {check_id}")


class UnknownCheckId(SiteHealthError, KeyError):
    """Lookup of a check id that is not in the registry."""

    def __init__(self, check_id: str):
        self.check_id = check_id
        super().__init__(check_id)

    def __str__(self) -> str:
        return f"Unknown check: {self.check_id}"


class CheckEvaluationFault(SiteHealthError):
    """Raised inside a check that cannot produce a verdict. Never escapes Evaluator.run."""


class ConfigError(SiteHealthError):
    """Invalid settings, facts or declarative check file."""
