"""Reducer wiring for each game mode."""

import random
from typing import Sequence

from shared.models import Contestant, GameStateSnapshot, Song
from game.deck import shuffled, deck_from_indices
from game.policies import SingleActor, RoundRobinPlayers, RoundRobinTeams
from game.reducer import TimelineReducer
from game.scoring import CheckOnDemandScoring, ScoreOnPlacement


def new_solo_game(songs: Sequence[Song], player_name: str = "Player",
                  rng: random.Random = None) -> TimelineReducer:
    return TimelineReducer(
        shuffled(songs, rng),
        SingleActor(Contestant(player_name)),
        CheckOnDemandScoring(),
        anchor=True,
    )


def new_hotseat_game(songs: Sequence[Song], player_names: Sequence[str],
                     rng: random.Random = None) -> TimelineReducer:
    contestants = [
        Contestant(name.strip() or f"Player {i + 1}")
        for i, name in enumerate(player_names)
    ]
    return TimelineReducer(
        shuffled(songs, rng),
        RoundRobinPlayers(contestants),
        ScoreOnPlacement(),
        anchor=True,
    )


def new_team_game(snapshot: GameStateSnapshot) -> TimelineReducer:
    return TimelineReducer(
        deck_from_indices(snapshot.songs, snapshot.deck),
        RoundRobinTeams(snapshot.teams),
        ScoreOnPlacement(),
    )
