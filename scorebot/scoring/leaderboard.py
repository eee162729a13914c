"""
Leaderboard Computation

This module turns the raw rows of a score sheet into ranked leaderboard
entries:
- parse_score_table: header + team rows -> per-team stroke records
- compute_leaderboard: stroke records -> entries sorted by total strokes,
  annotated with the score relative to par when the course is known
- leaderboard_to_frame: entries -> pandas DataFrame for display

Usage:
    from scorebot.scoring.leaderboard import parse_score_table, compute_leaderboard
    records = parse_score_table(rows)
    entries = compute_leaderboard(records, "Charlotte National", par_table)
"""

from dataclasses import dataclass
from typing import Sequence

import pandas as pd

from scorebot.scoring.course import ParTable
from scorebot.utils import cell_text, parse_int, setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


class LeaderboardError(Exception):
    """Base exception for leaderboard computation errors"""
    pass


class EmptyTableError(LeaderboardError):
    """Raised when a score sheet has no rows at all"""
    pass


@dataclass(frozen=True)
class TeamRecord:
    team: str
    strokes: tuple[int, ...]


@dataclass(frozen=True)
class LeaderboardEntry:
    team: str
    total: int
    holes_played: int
    par_diff: int | None = None


def parse_score_table(raw: Sequence[Sequence]) -> list[TeamRecord]:
    """
    Parse a score sheet into per-team stroke records.

    Row 0 is the header and only sets the number of hole columns. Every other
    non-empty row yields one record, in sheet order. Hole cells that are
    missing or not whole numbers are left out, so a team may have fewer
    strokes than the sheet has holes.

    Args:
        raw: Rows of cell values as returned by the data source

    Returns:
        List of TeamRecord, one per data row

    Raises:
        EmptyTableError: If the sheet has no rows
    """
    if not raw:
        raise EmptyTableError("Score sheet has no rows")

    num_holes = len(raw[0]) - 1
    records = []

    for row_idx, row in enumerate(raw[1:], start=2):
        if not row:
            logger.debug(f"Skipping empty row {row_idx}")
            continue

        team = cell_text(row[0])
        strokes = []
        for h in range(1, num_holes + 1):
            if h >= len(row):
                break
            score = parse_int(row[h])
            if score is not None:
                strokes.append(score)

        records.append(TeamRecord(team=team, strokes=tuple(strokes)))

    logger.debug(f"Parsed {len(records)} team rows across {num_holes} holes")
    return records


def calculate_par_diff(strokes: Sequence[int], pars: Sequence[int]) -> int:
    """
    Strokes relative to par over the holes played.

    Holes beyond the defined pars count as par 0, so their full strokes are
    added to the differential.
    """
    diff = 0
    for h, score in enumerate(strokes):
        par = pars[h] if h < len(pars) else 0
        diff += score - par
    return diff


def compute_leaderboard(
    records: Sequence[TeamRecord],
    course_key: str,
    par_table: ParTable,
) -> list[LeaderboardEntry]:
    """
    Rank team records by total strokes.

    Args:
        records: Parsed team records, in sheet order
        course_key: Normalized course name used for the par lookup
        par_table: Course par registry

    Returns:
        Entries sorted ascending by total; ties keep sheet order. par_diff is
        None for every entry when the course par is unknown.
    """
    pars = par_table.lookup(course_key)
    if pars is None:
        logger.info(f"No par configured for '{course_key}', skipping par annotation")

    entries = []
    for record in records:
        entries.append(LeaderboardEntry(
            team=record.team,
            total=sum(record.strokes),
            holes_played=len(record.strokes),
            par_diff=calculate_par_diff(record.strokes, pars) if pars is not None else None,
        ))

    # sorted() is stable, so tied totals stay in sheet order
    return sorted(entries, key=lambda e: e.total)


def leaderboard_to_frame(entries: Sequence[LeaderboardEntry]) -> pd.DataFrame:
    """
    Convert ranked entries to a DataFrame.

    Args:
        entries: Entries in rank order

    Returns:
        DataFrame with columns: rank, team, total, holes_played, par_diff
        (par_diff is a nullable integer column)
    """
    df = pd.DataFrame(
        [
            {
                'rank': rank,
                'team': e.team,
                'total': e.total,
                'holes_played': e.holes_played,
                'par_diff': e.par_diff,
            }
            for rank, e in enumerate(entries, start=1)
        ],
        columns=['rank', 'team', 'total', 'holes_played', 'par_diff'],
    )
    df['par_diff'] = df['par_diff'].astype('Int64')
    return df
