"""Networked team game: keeps a local reducer in step with the room.

Every action the local player takes is applied here first and then sent to
the room. Actions relayed from peers are applied through the same reducer
calls, so all clients that started from the same game_started snapshot agree
on the timeline, the current card and the scores.
"""

import random
from typing import Optional, Sequence

from shared.constants import GameAction, Position
from shared.models import GameStateSnapshot, Song, Team
from game.deck import shuffled_indices
from game.modes import new_team_game
from game.playback import Playback, NullPlayback
from game.reducer import PlacementResult, TimelineReducer
from client.network import SessionClient


class TeamGameSession:
    def __init__(self, client: SessionClient, playback: Playback = None,
                 rng: random.Random = None):
        self.client = client
        self.playback = playback or NullPlayback()
        self.reducer: Optional[TimelineReducer] = None
        self.teams: list[Team] = []
        self._rng = rng

        client.on_room_joined = self.handle_room_joined
        client.on_teams_updated = self.handle_teams_updated
        client.on_game_started = self.handle_game_started
        client.on_game_action = self.handle_game_action

    # -- Lobby --

    def build_teams(self, count: int) -> list[Team]:
        """Fresh default teams. A count of 0 means free-for-all."""
        self.teams = [Team.default(i) for i in range(max(0, int(count)))]
        return self.teams

    async def auto_assign_teams(self) -> list[dict]:
        """Deal players onto teams in seating order and publish the roster."""
        if not self.teams:
            return []
        player_teams = [
            {"playerId": player.id, "team": i % len(self.teams)}
            for i, player in enumerate(self.client.players)
        ]
        await self.client.update_teams([t.to_dict() for t in self.teams], player_teams)
        return player_teams

    async def start_game(self, songs: Sequence[Song]) -> Optional[GameStateSnapshot]:
        """Host only: shuffle a deck and broadcast the starting state."""
        if not self.client.is_host:
            print("[game] Only the host can start the game")
            return None
        snapshot = GameStateSnapshot(
            songs=list(songs),
            deck=shuffled_indices(len(songs), self._rng),
            teams=[Team(t.id, t.name, 0, t.color) for t in self.teams],
        )
        await self.client.start_game(snapshot.to_dict())
        return snapshot

    def handle_room_joined(self, data: dict):
        if data.get("teams"):
            self.teams = [Team.from_dict(t) for t in data["teams"]]

    def handle_teams_updated(self, data: dict):
        self.teams = [Team.from_dict(t) for t in data.get("teams") or []]

    # -- Game start --

    def handle_game_started(self, game_state: dict):
        try:
            snapshot = GameStateSnapshot.from_dict(game_state)
        except (KeyError, TypeError, ValueError) as e:
            print(f"[game] Invalid game state: {e}")
            return
        self.teams = snapshot.teams
        self.reducer = new_team_game(snapshot)
        self._draw()

    def _draw(self) -> Optional[Song]:
        card = self.reducer.draw_next_card()
        if card is not None:
            self.playback.load(card)
        elif self.reducer.is_over:
            ranking = ", ".join(f"{t.name} {t.score}" for t in self.reducer.standings())
            print(f"[game] Game over. {ranking}")
        return card

    # -- Local actions --

    @property
    def current_team(self) -> Optional[Team]:
        return self.reducer.current_actor if self.reducer else None

    def is_my_turn(self) -> bool:
        team = self.current_team
        me = next((p for p in self.client.players if p.id == self.client.player_id), None)
        return team is not None and me is not None and me.team == team.id

    async def place_card(self, position: Position) -> Optional[PlacementResult]:
        if self.reducer is None:
            return None
        result = self.reducer.place_card(position)
        if result is None:
            return None
        self._draw()
        await self.client.send_game_action(GameAction.PLACE_CARD, {
            "position": result.position.value,
            "card": result.card.to_dict(),
        })
        team_index = self.reducer.advance_turn()
        await self.client.send_game_action(GameAction.NEXT_TURN, {"teamIndex": team_index})
        return result

    async def reveal_years(self) -> bool:
        if self.reducer is None or not self.reducer.reveal_years():
            return False
        await self.client.send_game_action(GameAction.REVEAL_YEARS, {})
        return True

    # -- Relayed actions --

    def handle_game_action(self, message: dict):
        if self.reducer is None:
            print("[game] Ignoring game action before game start")
            return
        data = message.get("data") or {}
        try:
            action = GameAction(message.get("action"))
        except ValueError:
            print(f"[game] Unknown action {message.get('action')!r}")
            return

        if action == GameAction.PLACE_CARD:
            self._apply_remote_placement(data)
        elif action == GameAction.REVEAL_YEARS:
            self.reducer.reveal_years()
        elif action == GameAction.NEXT_TURN:
            try:
                self.reducer.set_turn(int(data.get("teamIndex", 0)))
            except (TypeError, ValueError):
                print(f"[game] Bad teamIndex {data.get('teamIndex')!r}")

    def _apply_remote_placement(self, data: dict):
        current = self.reducer.current_card
        sent_id = (data.get("card") or {}).get("id")
        if current is not None and sent_id is not None and current.id != sent_id:
            print(f"[game] Card mismatch: peer placed {sent_id}, local card is {current.id}")
        try:
            result = self.reducer.place_card(data.get("position"))
        except ValueError:
            print(f"[game] Bad position {data.get('position')!r}")
            return
        if result is not None:
            self._draw()
