"""Deck construction helpers."""

import random
from typing import Sequence

from shared.models import Song


def shuffled(items: Sequence, rng: random.Random = None) -> list:
    """Return a shuffled copy (Fisher-Yates via random.shuffle)."""
    result = list(items)
    (rng or random).shuffle(result)
    return result


def shuffled_indices(count: int, rng: random.Random = None) -> list[int]:
    return shuffled(range(count), rng)


def deck_from_indices(songs: Sequence[Song], indices: Sequence[int]) -> list[Song]:
    """Resolve an index deck against the song list. Out-of-range indices are skipped."""
    return [songs[i] for i in indices if 0 <= i < len(songs)]
