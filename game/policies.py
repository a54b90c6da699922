"""Turn policies: who acts next.

Seats are whatever accrues score in the game mode, Contestant objects for solo
and hot-seat play and Team objects for networked play.
"""

from typing import Any, Optional, Sequence


class TurnPolicy:
    def __init__(self, seats: Sequence[Any]):
        self.seats: list = list(seats)
        self.index: int = 0
        self.round_number: int = 1

    def current(self) -> Optional[Any]:
        if not self.seats:
            return None
        return self.seats[self.index]

    def advance(self) -> int:
        """Move to the next seat. Returns the new index."""
        return self.index

    def set_index(self, index: int) -> bool:
        if 0 <= index < len(self.seats):
            self.index = index
            return True
        return False


class SingleActor(TurnPolicy):
    def __init__(self, seat: Any):
        super().__init__([seat])


class RoundRobinPlayers(TurnPolicy):
    """Hot-seat rotation; wrapping back to the first player starts a new round."""

    def advance(self) -> int:
        if not self.seats:
            return 0
        self.index = (self.index + 1) % len(self.seats)
        if self.index == 0:
            self.round_number += 1
        return self.index


class RoundRobinTeams(TurnPolicy):
    def advance(self) -> int:
        if not self.seats:
            return 0
        self.index = (self.index + 1) % len(self.seats)
        return self.index
