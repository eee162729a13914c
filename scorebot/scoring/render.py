"""Fixed-width text rendering of a leaderboard."""

from typing import Sequence

from scorebot.config import LEADERBOARD_HEADER
from scorebot.scoring.leaderboard import LeaderboardEntry


def format_par_diff(par_diff: int | None) -> str:
    """Golf-style score to par: (E), (+2), (-1), or '' when par is unknown."""
    if par_diff is None:
        return ""
    if par_diff == 0:
        return "(E)"
    if par_diff > 0:
        return f"(+{par_diff})"
    return f"({par_diff})"


def format_entry(rank: int, entry: LeaderboardEntry) -> str:
    line = (
        f"{rank:>2}. {entry.team:<15} {entry.total:>3} strokes "
        f"({entry.holes_played} holes) {format_par_diff(entry.par_diff)}"
    )
    return line.rstrip()


def render_leaderboard(title: str, entries: Sequence[LeaderboardEntry]) -> str:
    """
    Render ranked entries as a text block.

    The first line names the table; each following line is one team in rank
    order. An empty leaderboard renders as the header alone.
    """
    lines = [LEADERBOARD_HEADER.format(title=title)]
    for rank, entry in enumerate(entries, start=1):
        lines.append(format_entry(rank, entry))
    return "\n".join(lines)
