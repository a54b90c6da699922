"""Timeline order checks and scoring policies."""

from typing import Any, Sequence

from shared.constants import POINTS_PER_CARD, PLACEMENT_POINTS
from shared.models import Song


def is_timeline_ordered(timeline: Sequence[Song]) -> bool:
    """True if years never decrease front to back. Equal years are fine either way."""
    return all(a.year <= b.year for a, b in zip(timeline, timeline[1:]))


class CheckOnDemandScoring:
    """Solo rules: placements score nothing, each correct check scores the whole timeline.

    A repeated check on an unchanged correct timeline scores again.
    """

    def __init__(self, points_per_card: int = POINTS_PER_CARD):
        self.points_per_card = points_per_card

    def placement_points(self, timeline: Sequence[Song]) -> int:
        return 0

    def check_points(self, timeline: Sequence[Song]) -> int:
        if not is_timeline_ordered(timeline):
            return 0
        return len(timeline) * self.points_per_card


class ScoreOnPlacement:
    """Hot-seat and team rules: a placement scores if the timeline is ordered right after it.

    Only the current whole-timeline order counts. Disorder left by an earlier
    placement is never penalised on its own.
    """

    def __init__(self, points: int = PLACEMENT_POINTS):
        self.points = points

    def placement_points(self, timeline: Sequence[Song]) -> int:
        return self.points if is_timeline_ordered(timeline) else 0

    def check_points(self, timeline: Sequence[Song]) -> int:
        return 0


def rank_standings(seats: Sequence[Any]) -> list:
    """Highest score first; equal scores keep seating order."""
    return sorted(seats, key=lambda seat: seat.score, reverse=True)
