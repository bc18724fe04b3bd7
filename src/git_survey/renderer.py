"""Rich-based status line renderer with JSON support."""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import asdict

from rich.console import Console
from rich.text import Text

from .models import RepoResult, RepoSummary

AHEAD_MARKER = "↑"
BEHIND_MARKER = "↓"
CLEAN_MARKER = "✔"

# Rendered in this order; typechanged and ignored are counted but not shown.
_CATEGORY_MARKERS = (
    ("modified", "✹", "blue"),
    ("new", "✚", "green"),
    ("deleted", "✖", "red"),
    ("renamed", "➜", "white"),
)


def format_duration(seconds: float) -> str:
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    if seconds < 60:
        return f"{seconds:.2f}s"
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}m {secs}s"


def render_summary(summary: RepoSummary) -> Text:
    """Render a summary as ``branch [↑] [↓] [✹ n] [✚ n] [✖ n] [➜ n]`` or ``branch ✔``."""
    text = Text()
    branch_style = "bold reverse red" if summary.highlighted else "yellow"
    text.append(summary.branch.label, style=branch_style)

    if summary.ahead:
        text.append(f" {AHEAD_MARKER}", style="cyan")
    if summary.behind:
        text.append(f" {BEHIND_MARKER}", style="magenta")

    counts = summary.counts
    if counts.is_clean:
        text.append(f" {CLEAN_MARKER}", style="green")
        return text

    for field_name, marker, style in _CATEGORY_MARKERS:
        value = getattr(counts, field_name)
        if value > 0:
            text.append(f" {marker} {value}", style=style)
    return text


def render_line(result: RepoResult) -> Text:
    """Render ``<path> -> <summary or failure message>``."""
    text = Text(result.path, style="green")
    text.append(" -> ", style="cyan")
    if result.summary is not None:
        text.append_text(render_summary(result.summary))
    else:
        text.append(result.failure.message, style="yellow")
    return text


def print_line(result: RepoResult, console: Console) -> None:
    console.print(render_line(result), soft_wrap=True)


def render_done(elapsed: float, console: Console) -> None:
    console.print(f":innocent: Done! ({format_duration(elapsed)})", style="white", soft_wrap=True)


def _result_to_dict(result: RepoResult) -> dict:
    if result.summary is None:
        return {"path": result.path, "error": result.failure.message}
    summary = result.summary
    return {
        "path": result.path,
        "branch": summary.branch.name,
        "detached": summary.branch.is_detached,
        "ahead": summary.ahead,
        "behind": summary.behind,
        "highlighted": summary.highlighted,
        "counts": asdict(summary.counts),
    }


def render_json(results: Sequence[RepoResult], elapsed: float | None = None) -> str:
    """Render all results as one JSON document."""
    payload: dict = {"repositories": [_result_to_dict(r) for r in results]}
    if elapsed is not None:
        payload["elapsed_seconds"] = round(elapsed, 3)
    return json.dumps(payload, indent=2, ensure_ascii=False)
