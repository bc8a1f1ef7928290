"""Report rendering: terminal box layout, Markdown, JSON."""

from __future__ import annotations

import json
import shutil
from typing import List, Optional

import click

from .checks.base import Severity, Verdict
from .context import Facts
from .info import InfoSection
from .report import Report

_FG = {Severity.GOOD: "green", Severity.RECOMMENDED: "yellow", Severity.CRITICAL: "red"}
_BULLET = {Severity.GOOD: "✓", Severity.RECOMMENDED: "○", Severity.CRITICAL: "●"}
_HEADINGS = (
    (Severity.CRITICAL, " CRITICAL ISSUES"),
    (Severity.RECOMMENDED, " RECOMMENDED IMPROVEMENTS"),
    (Severity.GOOD, " PASSED TESTS"),
)


def _get_width() -> int:
    try:
        return min(72, shutil.get_terminal_size((72, 24)).columns)
    except OSError:
        return 72


def _wrap(text: str, indent: int = 0, width: int = 72) -> List[str]:
    """Wrap text to width, first line has indent, following lines +2."""
    prefix = " " * indent
    extra = "  "
    lines = []
    rest = text
    first = True
    while rest:
        max_len = width - (indent if first else indent + len(extra))
        if len(rest) <= max_len:
            lines.append(prefix + rest)
            break
        break_at = rest.rfind(" ", 0, max_len + 1)
        if break_at <= 0:
            break_at = max_len
        chunk = rest[:break_at].strip()
        rest = rest[break_at:].strip()
        lines.append(prefix + chunk)
        prefix = " " * indent + extra
        first = False
    return lines


def _counts_line(report: Report) -> str:
    """E.g. '1 critical, 2 recommended, 3 good'."""
    counts = report.summary_counts()
    parts = [f"{counts[s]} {s.value}" for s in sorted(Severity, reverse=True) if counts[s]]
    return ", ".join(parts)


def _bullet_text(v: Verdict, verbose: bool) -> str:
    base = v.title.rstrip(".")
    if verbose:
        base = f"{base} [{v.check_id}]"
    return f"{_BULLET[v.severity]} {base}"


def format_human(report: Report, verbose: bool = False, title: str = "site health") -> str:
    """Build the human terminal output as a single string."""
    width = _get_width()
    lines = []

    lines.append("┌" + "─" * (width - 2) + "┐")
    lines.append(f" sitehealth · {title}")
    lines.append("─" * width)

    worst = report.worst()
    if worst is None:
        lines.append(" No applicable checks.")
    else:
        status = f" Status   {worst.value.upper()} ({_counts_line(report)})"
        lines.append(click.style(status, fg=_FG[worst]))
    lines.append("─" * width)

    for severity, heading in _HEADINGS:
        verdicts = report.by_severity(severity)
        if not verdicts:
            continue
        lines.append(heading)
        for v in verdicts:
            for ln in _wrap(_bullet_text(v, verbose), indent=2, width=width):
                lines.append(click.style(ln, fg=_FG[severity]))
            if severity != Severity.GOOD or verbose:
                for ln in _wrap(v.detail, indent=4, width=width):
                    lines.append(click.style(ln, dim=True))

    if verbose and report.skipped:
        lines.append(click.style(f" Not applicable: {', '.join(report.skipped)}", dim=True))

    lines.append("─" * width)
    footer = " Run with --json for machine output  ·  --ci for exit codes"
    if len(footer) > width:
        footer = " --json  ·  --ci  ·  --help"
    lines.append(click.style(footer, dim=True))
    lines.append("└" + "─" * (width - 2) + "┘")

    return "\n".join(lines)


def format_markdown(report: Report) -> str:
    """Markdown grouped into one section per category."""
    lines = ["# Site health", ""]
    worst = report.worst()
    if worst is None:
        lines.append("No applicable checks.")
        return "\n".join(lines)
    lines.append(f"**Status: {worst.value}** ({_counts_line(report)})")
    for section in report.sections():
        lines.append("")
        lines.append(f"## {section.category.replace('_', ' ').capitalize()}")
        for v in section.verdicts:
            lines.append("")
            lines.append(f"### [{v.severity.value}] {v.title}")
            if v.detail:
                lines.append(f"- **Detail:** {v.detail}")
            lines.append(f"- **Test:** `{v.check_id}`")
    return "\n".join(lines)


def format_json(report: Report, facts: Optional[Facts] = None) -> str:
    output = report.to_dict()
    if facts is not None:
        output["facts"] = facts.as_dict()
    return json.dumps(output, indent=2, default=str)


def format_info(sections: dict[str, InfoSection]) -> str:
    lines = []
    for section in sections.values():
        lines.append(click.style(section.label, bold=True))
        if section.description:
            lines.append(click.style(f"  {section.description}", dim=True))
        for name, value in section.fields.items():
            lines.append(f"  {name}: {value}")
        lines.append("")
    return "\n".join(lines).rstrip()
