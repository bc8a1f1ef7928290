"""sitehealth: registry-driven health checks with severity-ranked reports."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("sitehealth")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"

from .checks import default_registry
from .checks.base import Check, FunctionCheck, Severity, Verdict
from .context import Context, Facts
from .engine import Evaluator, run_checks
from .errors import (
    CheckEvaluationFault,
    ConfigError,
    DuplicateCheckError,
    SiteHealthError,
    UnknownCheckId,
)
from .probe import gather_facts
from .registry import Registry
from .report import Report, Section

__all__ = [
    "__version__",
    "Check",
    "CheckEvaluationFault",
    "ConfigError",
    "Context",
    "DuplicateCheckError",
    "Evaluator",
    "Facts",
    "FunctionCheck",
    "Registry",
    "Report",
    "Section",
    "Severity",
    "SiteHealthError",
    "UnknownCheckId",
    "Verdict",
    "default_registry",
    "gather_facts",
    "run_checks",
]
