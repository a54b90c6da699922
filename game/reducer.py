"""Timeline reducer: deck, timeline, current card, scoring and turn order.

The same reducer runs every game mode. Local input and actions relayed from
other clients both go through these methods, so clients fed the same actions
in the same order end up in the same state.
"""

from dataclasses import dataclass
from typing import Any, Optional, Sequence, Union

from shared.constants import Position, RoundPhase, OrderResult
from shared.models import Song
from game.policies import TurnPolicy
from game.scoring import is_timeline_ordered, rank_standings


@dataclass
class PlacementResult:
    card: Song
    position: Position
    correct: bool
    points: int
    actor: Any = None


class TimelineReducer:
    def __init__(self, deck: Sequence[Song], turns: TurnPolicy, scoring,
                 anchor: bool = False):
        self.deck: list[Song] = list(deck)
        self.timeline: list[Song] = []
        self.current_card: Optional[Song] = None
        self.years_revealed: bool = False
        self.phase: RoundPhase = RoundPhase.AWAITING_CARD
        self.turns = turns
        self.scoring = scoring
        if anchor and self.deck:
            self.timeline.append(self.deck.pop())

    @property
    def is_over(self) -> bool:
        return self.phase == RoundPhase.ROUND_ENDED

    @property
    def current_actor(self) -> Optional[Any]:
        return self.turns.current()

    def draw_next_card(self) -> Optional[Song]:
        """Pop the next card. An empty deck ends the round.

        A card already in hand stays in hand, so no song is ever discarded.
        """
        if self.is_over:
            return None
        if self.current_card is not None:
            return self.current_card
        if not self.deck:
            self.phase = RoundPhase.ROUND_ENDED
            return None
        self.current_card = self.deck.pop()
        self.years_revealed = False
        self.phase = RoundPhase.CARD_DRAWN
        return self.current_card

    def reveal_years(self) -> bool:
        if self.current_card is None or self.is_over:
            return False
        self.years_revealed = True
        return True

    def place_card(self, position: Union[Position, str]) -> Optional[PlacementResult]:
        """Insert the current card at the front or back of the timeline.

        Returns None when there is nothing to place.
        """
        position = Position(position)
        if self.is_over or self.current_card is None:
            return None

        card = self.current_card
        if position == Position.BEFORE:
            self.timeline.insert(0, card)
        else:
            self.timeline.append(card)
        self.current_card = None
        self.phase = RoundPhase.PLACED

        actor = self.current_actor
        points = self.scoring.placement_points(self.timeline)
        if actor is not None:
            actor.cards_placed += 1
            actor.score += points
        return PlacementResult(
            card=card,
            position=position,
            correct=is_timeline_ordered(self.timeline),
            points=points,
            actor=actor,
        )

    def check_order(self) -> Optional[OrderResult]:
        """Judge the whole timeline. No verdict with fewer than two cards."""
        if len(self.timeline) < 2:
            return None
        points = self.scoring.check_points(self.timeline)
        actor = self.current_actor
        if points and actor is not None:
            actor.score += points
        if is_timeline_ordered(self.timeline):
            return OrderResult.CORRECT
        return OrderResult.INCORRECT

    def advance_turn(self) -> int:
        return self.turns.advance()

    def set_turn(self, index: int) -> bool:
        return self.turns.set_index(index)

    def end_turn(self) -> Optional[Song]:
        """Pass play to the next seat and draw for them."""
        self.years_revealed = False
        self.advance_turn()
        return self.draw_next_card()

    def standings(self) -> list:
        return rank_standings(self.turns.seats)
