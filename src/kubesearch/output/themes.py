"""Score and popularity color maps."""

from __future__ import annotations

# (minimum, color), checked top to bottom
SCORE_COLORS: list[tuple[float, str]] = [
    (20.0, "green bold"),
    (10.0, "green"),
    (0.0, "yellow"),
]

STAR_COLORS: list[tuple[int, str]] = [
    (500, "bold yellow"),
    (100, "yellow"),
    (0, "dim"),
]


def _pick(value: float, scale: list[tuple[float, str]], fallback: str) -> str:
    for minimum, color in scale:
        if value >= minimum:
            return color
    return fallback


def styled_score(score: float) -> str:
    color = _pick(score, SCORE_COLORS, "red")
    return f"[{color}]{score:.1f}[/{color}]"


def styled_stars(stars: int) -> str:
    color = _pick(stars, STAR_COLORS, "dim")
    return f"[{color}]★ {stars}[/{color}]"
