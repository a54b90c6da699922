"""Tests for the timeline reducer and game mode wiring."""

import sys
import os
import random
from collections import Counter
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from shared.constants import Position, RoundPhase, OrderResult
from shared.models import Contestant, GameStateSnapshot, Song, Team
from game.policies import SingleActor, RoundRobinPlayers, RoundRobinTeams
from game.reducer import TimelineReducer
from game.scoring import CheckOnDemandScoring, ScoreOnPlacement
from game.modes import new_solo_game, new_hotseat_game, new_team_game


def songs_for(*years):
    return [Song(f"s{i}", f"Song {i}", f"Artist {i}", year) for i, year in enumerate(years)]


def stacked(*years):
    """A deck whose draws come out in the given year order."""
    return list(reversed(songs_for(*years)))


def solo(*years, anchor=False):
    return TimelineReducer(stacked(*years), SingleActor(Contestant("Solo")),
                           CheckOnDemandScoring(), anchor=anchor)


def teams_game(*years, team_count=2):
    teams = [Team.default(i) for i in range(team_count)]
    return TimelineReducer(stacked(*years), RoundRobinTeams(teams), ScoreOnPlacement()), teams


class TestDrawing:
    def test_draw_pops_from_end(self):
        r = solo(1990, 1980)
        assert r.draw_next_card().year == 1990
        assert r.phase == RoundPhase.CARD_DRAWN
        assert len(r.deck) == 1

    def test_anchor_card_starts_timeline(self):
        r = solo(1990, 1980, 2000, anchor=True)
        assert [s.year for s in r.timeline] == [1990]
        assert len(r.deck) == 2

    def test_draw_with_card_in_hand_keeps_it(self):
        r = solo(1990, 1980)
        first = r.draw_next_card()
        assert r.draw_next_card() is first
        assert len(r.deck) == 1

    def test_empty_deck_ends_round(self):
        r = solo(1990)
        r.draw_next_card()
        r.place_card(Position.AFTER)
        assert r.draw_next_card() is None
        assert r.phase == RoundPhase.ROUND_ENDED
        assert r.is_over

    def test_no_placement_after_round_end(self):
        r = solo(1990)
        r.draw_next_card()
        r.place_card("after")
        r.draw_next_card()
        assert r.place_card(Position.BEFORE) is None
        assert [s.year for s in r.timeline] == [1990]
        assert r.draw_next_card() is None
        assert r.reveal_years() is False

    def test_place_without_card_is_noop(self):
        r = solo(1990)
        assert r.place_card(Position.AFTER) is None
        assert r.timeline == []

    def test_invalid_position_raises(self):
        r = solo(1990)
        r.draw_next_card()
        with pytest.raises(ValueError):
            r.place_card("middle")


class TestPlacement:
    def test_before_and_after(self):
        r = solo(1990, 1980, 2000)
        r.draw_next_card()
        r.place_card(Position.AFTER)
        r.draw_next_card()
        r.place_card(Position.BEFORE)
        r.draw_next_card()
        r.place_card(Position.AFTER)
        assert [s.year for s in r.timeline] == [1980, 1990, 2000]
        assert r.current_card is None
        assert r.phase == RoundPhase.PLACED

    def test_cards_are_conserved(self):
        rng = random.Random(7)
        songs = songs_for(*[rng.randint(1950, 2020) for _ in range(12)])
        r = new_solo_game(songs, rng=rng)
        r.draw_next_card()
        while not r.is_over:
            timeline_before, deck_before = len(r.timeline), len(r.deck)
            r.place_card(rng.choice([Position.BEFORE, Position.AFTER]))
            assert len(r.timeline) == timeline_before + 1
            r.draw_next_card()
            if not r.is_over:
                assert len(r.deck) == deck_before - 1
            held = [r.current_card] if r.current_card else []
            assert Counter(s.id for s in r.timeline + held + r.deck) == \
                Counter(s.id for s in songs)
        assert len(r.timeline) == len(songs)

    def test_reveal_resets_on_draw(self):
        r = solo(1990, 1980)
        r.draw_next_card()
        assert r.reveal_years() is True
        assert r.years_revealed
        r.place_card(Position.AFTER)
        assert r.years_revealed
        r.draw_next_card()
        assert r.years_revealed is False


class TestCheckOrder:
    def _timeline(self, *years):
        r = solo(*years)
        for _ in years:
            r.draw_next_card()
            r.place_card(Position.AFTER)
        return r

    def test_equal_years_are_correct(self):
        assert self._timeline(1980, 1980, 1999).check_order() == OrderResult.CORRECT

    def test_descending_is_incorrect(self):
        r = self._timeline(1999, 1980)
        assert r.check_order() == OrderResult.INCORRECT
        assert r.current_actor.score == 0

    def test_correct_check_scores_length_times_ten(self):
        r = self._timeline(1970, 1980, 1990)
        r.check_order()
        assert r.current_actor.score == 30

    def test_repeated_check_scores_again(self):
        r = self._timeline(1970, 1980)
        r.check_order()
        r.check_order()
        r.check_order()
        assert r.current_actor.score == 60

    def test_single_card_gives_no_verdict(self):
        r = self._timeline(1970)
        assert r.check_order() is None
        assert r.current_actor.score == 0

    def test_placement_scores_nothing_in_solo(self):
        r = self._timeline(1970, 1980)
        assert r.current_actor.score == 0


class TestTeamScoring:
    def test_ordered_placement_scores_acting_team(self):
        r, teams = teams_game(1990, 1985, 1995)
        r.draw_next_card()
        r.place_card(Position.AFTER)       # team 0: [1990], ordered, +10
        r.end_turn()
        r.place_card(Position.BEFORE)      # team 1: [1985, 1990], +10
        r.end_turn()
        result = r.place_card(Position.AFTER)  # team 0: [1985, 1990, 1995]
        assert result.correct is True
        assert result.actor is teams[0]
        assert teams[0].score == 20
        assert teams[1].score == 10

    def test_incorrect_placement_scores_zero(self):
        r, teams = teams_game(1990, 1985)
        r.draw_next_card()
        r.place_card(Position.AFTER)
        r.end_turn()
        r.place_card(Position.AFTER)        # [1990, 1985]
        assert teams[1].score == 0
        assert r.check_order() == OrderResult.INCORRECT

    def test_disorder_blocks_later_points(self):
        # End insertions never split an adjacent pair, so [1990, 1985] stays wrong
        r, teams = teams_game(1990, 1985, 2000)
        r.draw_next_card()
        r.place_card(Position.AFTER)
        r.end_turn()
        r.place_card(Position.AFTER)
        r.end_turn()
        result = r.place_card(Position.AFTER)
        assert result.correct is False
        assert teams[0].score == 10

    def test_check_awards_nothing_in_placement_mode(self):
        r, teams = teams_game(1980, 1990)
        r.draw_next_card()
        r.place_card(Position.AFTER)
        r.end_turn()
        r.place_card(Position.AFTER)
        r.check_order()
        assert [t.score for t in teams] == [10, 10]

    def test_cards_placed_tally(self):
        r, teams = teams_game(1980, 1990, 2000)
        for _ in range(3):
            r.draw_next_card()
            r.place_card(Position.AFTER)
            r.advance_turn()
        assert [t.cards_placed for t in teams] == [2, 1]

    def test_free_for_all_has_no_actor(self):
        r, teams = teams_game(1980, team_count=0)
        r.draw_next_card()
        result = r.place_card(Position.AFTER)
        assert result.actor is None
        assert result.points == 10


class TestTurns:
    def test_round_robin_players_counts_rounds(self):
        turns = RoundRobinPlayers([Contestant("A"), Contestant("B"), Contestant("C")])
        assert [turns.advance() for _ in range(4)] == [1, 2, 0, 1]
        assert turns.round_number == 2

    def test_round_robin_teams_has_no_rounds(self):
        turns = RoundRobinTeams([Team.default(0), Team.default(1)])
        turns.advance()
        turns.advance()
        assert turns.index == 0
        assert turns.round_number == 1

    def test_single_actor_never_moves(self):
        turns = SingleActor(Contestant("Solo"))
        assert turns.advance() == 0

    def test_set_index_bounds(self):
        turns = RoundRobinTeams([Team.default(0), Team.default(1)])
        assert turns.set_index(1) is True
        assert turns.set_index(5) is False
        assert turns.index == 1

    def test_end_turn_hides_years_and_draws(self):
        contestants = [Contestant("A"), Contestant("B")]
        r = TimelineReducer(stacked(1990, 1980), RoundRobinPlayers(contestants),
                            ScoreOnPlacement())
        r.draw_next_card()
        r.reveal_years()
        r.place_card(Position.AFTER)
        card = r.end_turn()
        assert card.year == 1980
        assert r.current_actor is contestants[1]
        assert r.years_revealed is False


class TestModes:
    def test_solo_game(self):
        r = new_solo_game(songs_for(1970, 1980, 1990), "Ada", rng=random.Random(1))
        assert len(r.timeline) == 1
        assert r.current_actor.name == "Ada"
        assert isinstance(r.scoring, CheckOnDemandScoring)

    def test_hotseat_game_names(self):
        r = new_hotseat_game(songs_for(1970, 1980), ["Ada", "  "], rng=random.Random(1))
        assert [c.name for c in r.turns.seats] == ["Ada", "Player 2"]
        assert isinstance(r.scoring, ScoreOnPlacement)
        assert len(r.timeline) == 1

    def test_hotseat_standings(self):
        r = new_hotseat_game(songs_for(1970, 1980), ["Ada", "Bo", "Cy"])
        a, b, c = r.turns.seats
        a.score, b.score, c.score = 10, 30, 10
        assert [s.name for s in r.standings()] == ["Bo", "Ada", "Cy"]

    def test_team_game_from_snapshot(self):
        songs = songs_for(1970, 1980, 1990)
        snapshot = GameStateSnapshot(songs, [2, 0, 1], [Team.default(0), Team.default(1)])
        r = new_team_game(snapshot)
        assert r.timeline == []
        assert r.draw_next_card().id == "s1"
        assert r.current_actor is snapshot.teams[0]
