"""Typed leaderboard records and the raw-cell coercion rules."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from .schema import ColumnMapping

_NON_NUMERIC_RE = re.compile(r"[^0-9.\-]")


@dataclass(frozen=True)
class Record:
    id: str
    rank: int
    username: str
    wagered: float

    def to_dict(self) -> dict:
        return {"id": self.id, "rank": self.rank, "username": self.username, "wagered": self.wagered}


def record_id(rank: int) -> str:
    return f"u_{rank}"


def placeholder_username(rank: int) -> str:
    return f"player_{rank:03d}"


def coerce_number(value: object) -> float:
    """Strip everything but digits, ``.`` and ``-`` then parse.

    Returns ``nan`` when nothing parseable is left (``"n/a"``, ``"1-2"``),
    so the caller decides whether that is fatal for the row.
    """
    cleaned = _NON_NUMERIC_RE.sub("", "" if value is None else str(value))
    try:
        return float(cleaned)
    except ValueError:
        return math.nan


def _cell(row: Sequence[str], index: int | None) -> str:
    if index is None or index >= len(row):
        return ""
    return row[index]


def make_record(rank: float, username: str, wagered: float) -> Record:
    rank_int = int(rank)
    return Record(id=record_id(rank_int), rank=rank_int, username=username, wagered=wagered)


def coerce_rows(rows: Iterable[Sequence[str]], mapping: ColumnMapping) -> List[Record]:
    """Convert data rows (header excluded) into records.

    A blank rank cell falls back to the row's 1-based position. Rows whose
    rank is not a finite positive number are dropped, as are rows whose
    wagered amount is not finite and non-negative.
    """
    out: List[Record] = []
    for position, row in enumerate(rows, start=1):
        rank_cell = _cell(row, mapping.rank_index)
        rank = coerce_number(rank_cell) if rank_cell.strip() else float(position)
        if not math.isfinite(rank) or rank < 1:
            continue
        user_cell = _cell(row, mapping.username_index)
        username = user_cell if user_cell.strip() else placeholder_username(int(rank))
        wager_cell = _cell(row, mapping.wagered_index)
        wagered = coerce_number(wager_cell) if wager_cell.strip() else 0.0
        if not math.isfinite(wagered) or wagered < 0:
            continue
        out.append(make_record(rank, username, wagered))
    return out
