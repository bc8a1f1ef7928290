"""Info panels: key/value diagnostic sections, no verdicts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

from . import __version__
from .context import (
    BYTECODE_CACHE,
    CACHE_BACKEND,
    CACHE_REACHABLE,
    CACHE_URL,
    Context,
)


@dataclass(frozen=True)
class InfoSection:
    label: str
    fields: dict[str, Any] = field(default_factory=dict)
    description: str = ""

    def to_dict(self) -> dict:
        out: dict[str, Any] = {"label": self.label, "fields": self.fields}
        if self.description:
            out["description"] = self.description
        return out


@dataclass(frozen=True)
class InfoPanel:
    key: str
    label: str
    fields_fn: Callable[[Context], dict[str, Any]]
    description: str = ""
    overwrite: bool = False  # Replace a section already present under key

    def build(self, context: Context) -> InfoSection:
        return InfoSection(label=self.label, fields=self.fields_fn(context), description=self.description)


def collect_info(
    context: Context,
    panels: Iterable[InfoPanel],
    existing: Optional[dict[str, InfoSection]] = None,
) -> dict[str, InfoSection]:
    """Add each panel's section unless its key is already present (or the panel overwrites)."""
    sections = dict(existing or {})
    for panel in panels:
        if panel.key in sections and not panel.overwrite:
            continue
        sections[panel.key] = panel.build(context)
    return sections


def _object_cache_fields(context: Context) -> dict[str, Any]:
    reachable = context.get_fact(CACHE_REACHABLE)
    return {
        "backend": context.get_fact(CACHE_BACKEND) or "unknown",
        "url": _redact(context.get_fact(CACHE_URL)) or "-",
        "reachable": "not probed" if reachable is None else ("yes" if reachable else "no"),
    }


def _bytecode_cache_fields(context: Context) -> dict[str, Any]:
    return {"enabled": "yes" if context.get_fact(BYTECODE_CACHE) else "no"}


def _redact(url: Optional[str]) -> Optional[str]:
    """Drop credentials from a URL before display."""
    if not url or "@" not in url:
        return url
    scheme, sep, rest = url.partition("://")
    if not sep:
        return "***"
    return f"{scheme}://***@{rest.rsplit('@', 1)[1]}"


BUILTIN_PANELS = (
    InfoPanel("object_cache", "Object cache", _object_cache_fields),
    InfoPanel("bytecode_cache", "Bytecode cache", _bytecode_cache_fields, "Bytecode cache settings and status"),
)


def engine_panel(registry) -> InfoPanel:
    """Panel describing this tool and the checks it knows about; always replaces its section."""
    return InfoPanel(
        "sitehealth",
        "sitehealth",
        lambda context: {"version": __version__, "checks": ", ".join(registry.ids()) or "none"},
        "Diagnostic engine information",
        overwrite=True,
    )
