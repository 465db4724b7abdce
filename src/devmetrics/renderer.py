"""SVG card renderer with rich terminal summary and JSON support."""

from __future__ import annotations

import json
from dataclasses import asdict
from string import Template
from typing import Any
from xml.sax.saxutils import escape, quoteattr

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .errors import RenderError, WriteError
from .models import DevStats

SVG_WIDTH = 800
SVG_HEIGHT = 260
MAX_CARD_LANGUAGES = 3
BAR_WIDTH = 300

_CARD_TEMPLATE = Template("""\
<svg xmlns="http://www.w3.org/2000/svg" width="$width" height="$height" viewBox="0 0 $width $height" role="img">
  <title>$title</title>
  <style>
    .title { font: 600 24px 'Segoe UI', Ubuntu, Sans-Serif; fill: #c9d1d9; }
    .subtitle { font: 400 13px 'Segoe UI', Ubuntu, Sans-Serif; fill: #8b949e; }
    .label { font: 400 12px 'Segoe UI', Ubuntu, Sans-Serif; fill: #8b949e; }
    .value { font: 600 20px 'Segoe UI', Ubuntu, Sans-Serif; fill: #c9d1d9; }
    .lang { font: 600 13px 'Segoe UI', Ubuntu, Sans-Serif; fill: #c9d1d9; }
  </style>
  <rect width="$width" height="$height" rx="10" fill="#0d1117" stroke="#30363d"/>
$avatar  <text x="$text_x" y="52" class="title">$title</text>
  <text x="$text_x" y="76" class="subtitle">$subtitle</text>
$stats
$languages
$extras
</svg>
""")

# Palette for languages that reach the card without a color of their own.
_BAR_COLORS = ["#238636", "#1f6feb", "#a371f7", "#db6d28", "#8b949e"]


def _format_number(n: int) -> str:
    return f"{n:,}"


def _make_bar(percentage: float, width: int = 20) -> str:
    filled = round(percentage / 100 * width)
    return "█" * filled + "░" * (width - filled)


def _stat_block(x: int, y: int, label: str, value: int) -> str:
    return (
        f'  <text x="{x}" y="{y}" class="value">{_format_number(value)}</text>\n'
        f'  <text x="{x}" y="{y + 18}" class="label">{escape(label)}</text>'
    )


def _language_bars(stats: DevStats) -> str:
    x, y = 460, 60
    parts = [f'  <text x="{x}" y="{y - 20}" class="label">Top languages</text>']
    for i, lang in enumerate(stats.activity.top_languages[:MAX_CARD_LANGUAGES]):
        color = lang.color or _BAR_COLORS[i % len(_BAR_COLORS)]
        row = y + i * 44
        filled = BAR_WIDTH * max(0.0, min(lang.percentage, 100.0)) / 100
        parts.append(
            f'  <text x="{x}" y="{row + 6}" class="lang">{escape(lang.name)}</text>\n'
            f'  <text x="{x + BAR_WIDTH}" y="{row + 6}" class="label" text-anchor="end">'
            f"{lang.percentage:.1f}%</text>\n"
            f'  <rect x="{x}" y="{row + 14}" width="{BAR_WIDTH}" height="8" rx="4" fill="#21262d"/>\n'
            f'  <rect x="{x}" y="{row + 14}" width="{filled:.1f}" height="8" rx="4" fill="{escape(color)}"/>'
        )
    return "\n".join(parts)


def _extra_counters(stats: DevStats) -> list[tuple[str, int]]:
    t, a = stats.totals, stats.activity
    candidates = [
        ("Commits", t.commits),
        ("Current streak", t.current_streak),
        ("Longest streak", t.longest_streak),
        ("Issues", a.issues.open + a.issues.closed),
        ("Pull requests", a.pull_requests.open + a.pull_requests.merged + a.pull_requests.closed),
    ]
    return [(label, value) for label, value in candidates if value]


def render_svg(stats: DevStats) -> bytes:
    """Render the developer card as UTF-8 encoded SVG."""
    identity = stats.identity
    title = identity.name or identity.username
    subtitle_parts = list(identity.handles)
    if stats.totals.joined_ago:
        subtitle_parts.append(f"joined {stats.totals.joined_ago}")
    subtitle = " · ".join(subtitle_parts)

    avatar = ""
    text_x = 32
    if identity.avatar:
        avatar = (
            '  <clipPath id="avatar"><circle cx="62" cy="62" r="30"/></clipPath>\n'
            f'  <image href={quoteattr(identity.avatar)} x="32" y="32" '
            'width="60" height="60" clip-path="url(#avatar)"/>\n'
        )
        text_x = 108

    stats_svg = "\n".join(
        _stat_block(32 + i * 130, 140, label, value)
        for i, (label, value) in enumerate(
            [
                ("Repos", stats.totals.public_repos),
                ("Stars", stats.totals.stars),
                ("Followers", stats.totals.followers),
            ]
        )
    )
    extras_svg = "\n".join(
        f'  <text x="{32 + i * 150}" y="222" class="label">{escape(label)}: '
        f"{_format_number(value)}</text>"
        for i, (label, value) in enumerate(_extra_counters(stats))
    )

    try:
        svg = _CARD_TEMPLATE.substitute(
            width=SVG_WIDTH,
            height=SVG_HEIGHT,
            title=escape(title),
            subtitle=escape(subtitle),
            text_x=text_x,
            avatar=avatar,
            stats=stats_svg,
            languages=_language_bars(stats),
            extras=extras_svg,
        )
    except (KeyError, ValueError) as exc:
        raise RenderError(f"render svg: {exc}") from exc
    return svg.encode("utf-8")


def stats_to_dict(stats: DevStats) -> dict[str, Any]:
    """Plain-data view of DevStats with calendar days as ISO strings."""
    data = asdict(stats)
    contributions = stats.activity.contributions_per_day
    if contributions is not None:
        data["activity"]["contributions_per_day"] = {
            day.isoformat(): count for day, count in sorted(contributions.items())
        }
    return data


def render_json(stats: DevStats) -> str:
    return json.dumps(stats_to_dict(stats), indent=2, ensure_ascii=False)


def write_output(content: str | bytes, output_file: str) -> None:
    """Write content to a file and print confirmation."""
    data = content.encode("utf-8") if isinstance(content, str) else content
    try:
        with open(output_file, "wb") as f:
            f.write(data)
    except OSError as exc:
        raise WriteError(output_file, exc.strerror or str(exc)) from exc
    Console().print(f"Saved to {output_file}", markup=False)


def render_summary(stats: DevStats, console: Console | None = None) -> None:
    """Print a short overview of the merged stats to the terminal."""
    console = console or Console()
    identity, totals, activity = stats.identity, stats.totals, stats.activity

    handles = ", ".join(identity.handles) or "-"
    console.print(Panel(
        Text(f"devmetrics: {identity.name or identity.username}\n{handles}", justify="center"),
        style="bold cyan",
    ))

    summary = Table(show_header=False, box=None, padding=(0, 2))
    summary.add_column("label", style="dim")
    summary.add_column("value", style="bold")
    summary.add_row("Public repos", _format_number(totals.public_repos))
    summary.add_row("Private repos", _format_number(totals.private_repos))
    summary.add_row("Stars", _format_number(totals.stars))
    summary.add_row("Followers", _format_number(totals.followers))
    summary.add_row("Commits", _format_number(totals.commits))
    summary.add_row("Current streak", f"{totals.current_streak} days")
    summary.add_row("Longest streak", f"{totals.longest_streak} days")
    summary.add_row("Open issues", _format_number(activity.issues.open))
    summary.add_row("Merged PRs", _format_number(activity.pull_requests.merged))
    if totals.joined_ago:
        summary.add_row("Joined", Text(totals.joined_ago))
    console.print(summary)

    if activity.top_languages:
        lang_table = Table(show_header=True, header_style="bold")
        lang_table.add_column("Language")
        lang_table.add_column("Bar")
        lang_table.add_column("Percentage", justify="right")
        for lang in activity.top_languages:
            lang_table.add_row(Text(lang.name), _make_bar(lang.percentage), f"{lang.percentage:.1f}%")
        console.print(lang_table)
