"""Leaderboard import from a user-supplied CSV file.

Lines are split positionally as ``rank, username, wagered`` with a plain
comma split. Quoted fields are not understood here, unlike the network path
which goes through :mod:`leaderboard_etl.csv_tokenizer`.
"""

from __future__ import annotations

import math
import re
from pathlib import Path
from typing import List, Union

from .assemble import Dataset, SourceMode, build_dataset
from .errors import ImportFileError
from .records import Record, make_record, placeholder_username

_LINE_SPLIT_RE = re.compile(r"\r?\n")
_WAGER_STRIP_RE = re.compile(r"[^0-9.]")


def _to_float(raw: str) -> float:
    try:
        return float(raw)
    except ValueError:
        return math.nan


def has_header(first_line: str) -> bool:
    lowered = first_line.lower()
    return "rank" in lowered and "user" in lowered


def parse_csv_lines(text: str) -> List[Record]:
    lines = [ln for ln in _LINE_SPLIT_RE.split(text) if ln]
    if lines and has_header(lines[0]):
        lines = lines[1:]
    out: List[Record] = []
    for position, line in enumerate(lines, start=1):
        cells = line.split(",")
        cells += [""] * (3 - len(cells))
        rank_raw, user_raw, wager_raw = (c.strip() for c in cells[:3])
        rank = _to_float(rank_raw) if rank_raw else float(position)
        if not math.isfinite(rank) or rank < 1:
            continue
        username = user_raw or placeholder_username(int(rank))
        wagered = _to_float(_WAGER_STRIP_RE.sub("", wager_raw or "0") or "0")
        if not math.isfinite(wagered):
            continue
        out.append(make_record(rank, username, wagered))
    return out


def import_csv_text(text: str) -> Dataset:
    return build_dataset(parse_csv_lines(text), SourceMode.IMPORTED)


def import_csv_file(path: Union[str, Path]) -> Dataset:
    try:
        text = Path(path).read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise ImportFileError(f"Could not read {path}: {exc}") from exc
    return import_csv_text(text)
