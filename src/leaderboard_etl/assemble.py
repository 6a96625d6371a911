from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Tuple

from .csv_tokenizer import tokenize
from .errors import SchemaError
from .records import Record, coerce_rows, record_id
from .schema import detect_columns


class SourceMode(str, Enum):
    REMOTE = "remote"
    PROXIED = "proxied"
    IMPORTED = "imported"
    SYNTHETIC = "synthetic"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Dataset:
    """Published snapshot. Replaced as a whole, never edited in place."""

    records: Tuple[Record, ...]
    mode: SourceMode
    refreshed_at: datetime = field(default_factory=_utcnow)

    def __len__(self) -> int:
        return len(self.records)

    def same_records(self, other: "Dataset") -> bool:
        return self.records == other.records and self.mode == other.mode

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.value,
            "refreshed_at": self.refreshed_at.isoformat(),
            "records": [r.to_dict() for r in self.records],
        }


def order_records(records: Iterable[Record], mode: SourceMode) -> List[Record]:
    """Apply the ordering policy for ``mode``.

    Externally supplied data keeps its own ranks and is sorted ascending by
    rank (stable, so ties stay in source order). Synthetic data is sorted by
    wagered descending and renumbered 1..n.
    """
    if mode is SourceMode.SYNTHETIC:
        ranked = sorted(records, key=lambda r: r.wagered, reverse=True)
        return [replace(r, rank=i, id=record_id(i)) for i, r in enumerate(ranked, start=1)]
    return sorted(records, key=lambda r: r.rank)


def build_dataset(records: Iterable[Record], mode: SourceMode) -> Dataset:
    return Dataset(records=tuple(order_records(records, mode)), mode=mode)


def assemble_text(text: str, mode: SourceMode = SourceMode.REMOTE) -> Dataset:
    """Run tokenizer, detector, coercer and ordering over one CSV payload."""
    rows = tokenize(text)
    if not rows:
        raise SchemaError("Empty sheet")
    mapping = detect_columns(rows[0])
    return build_dataset(coerce_rows(rows[1:], mapping), mode)
