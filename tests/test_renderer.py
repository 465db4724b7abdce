"""Tests for the renderer module."""

from __future__ import annotations

import json
import os
import tempfile
from datetime import date
from unittest.mock import patch

import pytest

from devmetrics.errors import RenderError, WriteError
from devmetrics.models import Activity, DevStats, Identity, IssueStats, LanguageStat, PRStats, Totals
from devmetrics.renderer import render_json, render_summary, render_svg, stats_to_dict, write_output


def _make_stats(**kwargs) -> DevStats:
    defaults = dict(
        identity=Identity(name="Alice", username="alice", handles=["github: alice", "gitlab: alice"]),
        totals=Totals(public_repos=12, stars=1234, followers=5, joined_ago="3 years ago"),
        activity=Activity(
            top_languages=[
                LanguageStat("Python", 60.0, "#3572A5"),
                LanguageStat("Go", 30.0, "#00ADD8"),
                LanguageStat("C", 5.0, ""),
                LanguageStat("Rust", 5.0, "#dea584"),
            ],
        ),
    )
    defaults.update(kwargs)
    return DevStats(**defaults)


def test_render_svg_basic_fields():
    svg = render_svg(_make_stats()).decode("utf-8")
    assert svg.startswith("<svg")
    assert 'width="800" height="260"' in svg
    assert "Alice" in svg
    assert "github: alice · gitlab: alice · joined 3 years ago" in svg
    assert "1,234" in svg
    assert "Python" in svg and "60.0%" in svg


def test_render_svg_limits_languages_to_three():
    svg = render_svg(_make_stats()).decode("utf-8")
    assert "Rust" not in svg
    # C has no color of its own and gets one from the palette.
    assert 'fill=""' not in svg


def test_render_svg_escapes_text():
    stats = _make_stats(identity=Identity(name="<script>&", username="x"))
    svg = render_svg(stats).decode("utf-8")
    assert "<script>" not in svg
    assert "&lt;script&gt;&amp;" in svg


def test_render_svg_falls_back_to_username():
    stats = _make_stats(identity=Identity(name="", username="bob"))
    assert "<title>bob</title>" in render_svg(stats).decode("utf-8")


def test_render_svg_optional_counters():
    plain = render_svg(_make_stats()).decode("utf-8")
    assert "Commits" not in plain
    assert "streak" not in plain

    stats = _make_stats(
        totals=Totals(commits=321, current_streak=4, longest_streak=9),
        activity=Activity(
            issues=IssueStats(open=1, closed=2),
            pull_requests=PRStats(merged=3),
        ),
    )
    svg = render_svg(stats).decode("utf-8")
    assert "Commits: 321" in svg
    assert "Current streak: 4" in svg
    assert "Longest streak: 9" in svg
    assert "Issues: 3" in svg
    assert "Pull requests: 3" in svg


def test_render_svg_embeds_avatar():
    stats = _make_stats(identity=Identity(name="A", avatar="data:image/png;base64,AAAA"))
    svg = render_svg(stats).decode("utf-8")
    assert 'href="data:image/png;base64,AAAA"' in svg


def test_render_svg_template_failure():
    with patch("devmetrics.renderer._CARD_TEMPLATE.substitute", side_effect=KeyError("title")):
        with pytest.raises(RenderError):
            render_svg(_make_stats())


def test_render_json_dates_as_strings():
    stats = _make_stats(
        activity=Activity(contributions_per_day={date(2024, 1, 2): 3, date(2024, 1, 1): 1})
    )
    data = json.loads(render_json(stats))
    assert data["identity"]["username"] == "alice"
    assert data["totals"]["stars"] == 1234
    assert data["activity"]["contributions_per_day"] == {"2024-01-01": 1, "2024-01-02": 3}


def test_stats_to_dict_without_contributions():
    assert stats_to_dict(_make_stats())["activity"]["contributions_per_day"] is None


def test_render_summary(capsys):
    render_summary(_make_stats())
    captured = capsys.readouterr()
    assert "Alice" in captured.out
    assert "Python" in captured.out
    assert "1,234" in captured.out


def test_render_summary_prints_names_literally(capsys):
    stats = _make_stats(
        totals=Totals(joined_ago="[i]soon[/i]"),
        activity=Activity(top_languages=[LanguageStat("[b]Go[/b]", 100.0)]),
    )
    render_summary(stats)
    out = capsys.readouterr().out
    assert "[b]Go[/b]" in out
    assert "[i]soon[/i]" in out


def test_write_output_prints_path_literally(capsys, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    write_output("<svg/>", "[b]card[/b].svg")
    assert "Saved to [b]card[/b].svg" in capsys.readouterr().out
    assert (tmp_path / "[b]card[/b].svg").read_text(encoding="utf-8") == "<svg/>"


def test_write_output_to_file():
    with tempfile.NamedTemporaryFile(suffix=".svg", delete=False) as f:
        path = f.name
    try:
        write_output(render_svg(_make_stats()), path)
        with open(path, encoding="utf-8") as f:
            assert "Alice" in f.read()
    finally:
        os.unlink(path)


def test_write_output_failure():
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "missing", "card.svg")
        with pytest.raises(WriteError) as excinfo:
            write_output("<svg/>", path)
    assert excinfo.value.path == path
