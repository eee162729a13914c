"""
Course identity and par lookup.

Sheet tabs are titled with a trailing season marker ("Charlotte National '25"),
while par values are configured per base course name. This module maps one
onto the other.
"""

import json
import os
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Sequence

from scorebot.config import COURSE_PARS, COURSE_PARS_FILE_ENV
from scorebot.utils import setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


def normalize_course_name(title: str) -> str:
    """
    Strip the trailing revision/year marker from a sheet title.

    The marker starts at the last apostrophe. An apostrophe in the first
    position is part of the name, not a marker.

    Args:
        title: Sheet/tab display title

    Returns:
        Course key used for par lookups
    """
    idx = title.rfind("'")
    if idx > 0:
        return title[:idx].strip()
    return title.strip()


class ParTable:
    """Read-only registry of per-hole pars keyed by course name."""

    def __init__(self, pars: Mapping[str, Sequence[int]] | None = None):
        validated = {}
        for course, values in (pars or {}).items():
            validated[course] = _validate_pars(course, values)
        self._pars = MappingProxyType(validated)

    def lookup(self, course_key: str) -> tuple[int, ...] | None:
        """Return the par sequence for a course, or None if unknown."""
        return self._pars.get(course_key)

    def __contains__(self, course_key) -> bool:
        return course_key in self._pars

    def __len__(self) -> int:
        return len(self._pars)

    @property
    def courses(self) -> list[str]:
        return sorted(self._pars)

    def __repr__(self) -> str:
        return f"ParTable(courses={self.courses!r})"


def _validate_pars(course: str, values: Sequence[int]) -> tuple[int, ...]:
    """
    Check that a par sequence holds only positive integers.

    Raises:
        ValueError: If a value is not a positive integer
    """
    if isinstance(values, (str, bytes)):
        raise ValueError(f"Pars for '{course}' must be a list of integers, got {values!r}")

    pars = []
    for hole, par in enumerate(values, start=1):
        if isinstance(par, bool) or not isinstance(par, int) or par <= 0:
            raise ValueError(
                f"Invalid par for '{course}' hole {hole}: {par!r}. "
                f"Pars must be positive integers"
            )
        pars.append(par)
    return tuple(pars)


def load_par_table(path: Path | str | None = None) -> ParTable:
    """
    Build the process-wide par table.

    Starts from COURSE_PARS in config and overlays courses from a JSON file
    ({"Course Name": [4, 3, 5, ...]}) when one is given or named by the
    COURSE_PARS_FILE environment variable.

    Args:
        path: Optional JSON file with extra or overriding courses

    Returns:
        Immutable ParTable
    """
    pars = dict(COURSE_PARS)

    if path is None:
        path = os.getenv(COURSE_PARS_FILE_ENV) or None

    if path is not None:
        path = Path(path)
        with open(path, encoding="utf-8") as f:
            extra = json.load(f)
        if not isinstance(extra, dict):
            raise ValueError(f"{path}: expected a JSON object of course name -> pars")
        pars.update(extra)
        logger.info(f"Loaded {len(extra)} course(s) from {path}")

    table = ParTable(pars)
    logger.debug(f"Par table ready: {table.courses}")
    return table
