from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional, Sequence

from .errors import SchemaError


class Role(Enum):
    RANK = "rank"
    USERNAME = "username"
    WAGERED = "wagered"


ROLE_ALIASES: Dict[Role, FrozenSet[str]] = {
    Role.RANK: frozenset({"rank", "place", "position"}),
    Role.USERNAME: frozenset({"username", "user", "player", "name"}),
    Role.WAGERED: frozenset({"wagered", "wager", "amount", "total"}),
}


@dataclass(frozen=True)
class ColumnMapping:
    rank_index: Optional[int]
    username_index: Optional[int]
    wagered_index: Optional[int]

    @property
    def unresolved(self) -> list[Role]:
        missing = []
        if self.rank_index is None:
            missing.append(Role.RANK)
        if self.username_index is None:
            missing.append(Role.USERNAME)
        if self.wagered_index is None:
            missing.append(Role.WAGERED)
        return missing

    @property
    def is_complete(self) -> bool:
        return not self.unresolved


def _find(header: Sequence[str], aliases: FrozenSet[str]) -> Optional[int]:
    for idx, cell in enumerate(header):
        if cell.strip().lower() in aliases:
            return idx
    return None


def resolve_columns(header: Sequence[str]) -> ColumnMapping:
    """Map each role to the first header cell matching one of its aliases."""
    return ColumnMapping(
        rank_index=_find(header, ROLE_ALIASES[Role.RANK]),
        username_index=_find(header, ROLE_ALIASES[Role.USERNAME]),
        wagered_index=_find(header, ROLE_ALIASES[Role.WAGERED]),
    )


def detect_columns(header: Sequence[str]) -> ColumnMapping:
    mapping = resolve_columns(header)
    if not mapping.is_complete:
        names = ", ".join(role.value for role in mapping.unresolved)
        raise SchemaError(f"Missing required columns: {names}")
    return mapping
