from __future__ import annotations

import random
from typing import List, Optional

from .assemble import Dataset, SourceMode, build_dataset
from .records import Record, make_record, placeholder_username

WAGER_FLOOR = 500
WAGER_STEP = 12000
WAGER_JITTER = 5000
DEFAULT_SIZE = 25


def make_synthetic_records(count: int = DEFAULT_SIZE, rng: Optional[random.Random] = None) -> List[Record]:
    """Plausible unordered records; earlier positions tend to wager more."""
    rng = rng or random.Random()
    out = []
    for i in range(count):
        rank = i + 1
        wagered = max(WAGER_FLOOR + (count - i) * WAGER_STEP + rng.random() * WAGER_JITTER, 0)
        out.append(make_record(rank, placeholder_username(rank), round(wagered, 2)))
    return out


def synthetic_dataset(count: int = DEFAULT_SIZE, seed: Optional[int] = None) -> Dataset:
    rng = random.Random(seed)
    return build_dataset(make_synthetic_records(count, rng), SourceMode.SYNTHETIC)
