"""Turn raw per-language weights into ranked LanguageStat lists."""

from __future__ import annotations

from collections.abc import Mapping

from ..aggregator import DEFAULT_LANGUAGE_COLOR, language_sort_key
from ..models import LanguageStat

# Colors used by GitHub's linguist for the most common languages.
LANGUAGE_COLORS = {
    "C": "#555555",
    "C#": "#178600",
    "C++": "#f34b7d",
    "CSS": "#563d7c",
    "Dart": "#00B4AB",
    "Go": "#00ADD8",
    "HTML": "#e34c26",
    "Java": "#b07219",
    "JavaScript": "#f1e05a",
    "Kotlin": "#A97BFF",
    "Lua": "#000080",
    "PHP": "#4F5D95",
    "Python": "#3572A5",
    "Ruby": "#701516",
    "Rust": "#dea584",
    "Shell": "#89e051",
    "Swift": "#F05138",
    "TypeScript": "#3178c6",
    "Vue": "#41b883",
}

OTHERS = "Others"
MAX_LANGUAGES = 9


def rank_languages(
    weights: Mapping[str, float],
    *,
    colors: Mapping[str, str] | None = None,
    limit: int = MAX_LANGUAGES,
) -> list[LanguageStat]:
    """Convert weights to percentages, keeping the top ``limit`` languages.

    Anything past ``limit`` is folded into a single "Others" entry. Languages
    missing from ``colors`` are left without a color.
    """
    total = sum(weights.values())
    if not weights or total <= 0:
        return []

    colors = colors or {}
    langs = [
        LanguageStat(name=name, percentage=value / total * 100.0, color=colors.get(name, ""))
        for name, value in weights.items()
    ]
    langs.sort(key=language_sort_key)

    if len(langs) <= limit:
        return langs

    others = sum(lang.percentage for lang in langs[limit:])
    return [*langs[:limit], LanguageStat(name=OTHERS, percentage=others, color=DEFAULT_LANGUAGE_COLOR)]
