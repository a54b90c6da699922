"""Room repository: rooms keyed by code, each owning its members' connections."""

import random
from typing import Any, Optional

from shared.constants import (
    ROOM_CODE_LENGTH, ROOM_CODE_ALPHABET, MAX_PLAYERS_PER_ROOM, DEFAULT_ROOM_SETTINGS,
)
from shared.models import Player


class Room:
    def __init__(self, room_code: str, settings: Optional[dict] = None):
        self.room_code = room_code
        self.players: dict[str, Player] = {}  # player_id -> player, in join order
        self.connections: dict[str, Any] = {}  # player_id -> connection handle
        self.host_id: str = ""
        self.teams: list[dict] = []
        self.settings: dict = dict(settings or DEFAULT_ROOM_SETTINGS)
        self.game_state: Optional[dict] = None

    def is_full(self) -> bool:
        return len(self.players) >= MAX_PLAYERS_PER_ROOM

    def is_empty(self) -> bool:
        return not self.players

    def add_player(self, player: Player, ws) -> None:
        self.players[player.id] = player
        self.connections[player.id] = ws
        if not self.host_id:
            self.host_id = player.id

    def remove_player(self, player_id: str) -> Optional[str]:
        """Remove a player. Returns the new host id if the host role moved."""
        self.players.pop(player_id, None)
        self.connections.pop(player_id, None)
        if self.host_id != player_id:
            return None
        remaining = list(self.players)
        self.host_id = remaining[0] if remaining else ""
        return self.host_id or None

    def is_host(self, player_id: str) -> bool:
        return player_id == self.host_id

    def assign_team(self, player_id: str, team: Optional[int]) -> bool:
        player = self.players.get(player_id)
        if not player:
            return False
        player.team = team
        return True

    def player_list(self) -> list[dict]:
        return [p.to_dict() for p in self.players.values()]

    def handles(self, exclude: str = None) -> list:
        return [ws for pid, ws in self.connections.items() if pid != exclude]

    def handle_of(self, player_id: str):
        return self.connections.get(player_id)


class RoomRegistry:
    """All live rooms of one server process."""

    def __init__(self, rng: random.Random = None):
        self.rooms: dict[str, Room] = {}
        self._rng = rng or random.Random()

    def generate_code(self) -> str:
        while True:
            code = ''.join(self._rng.choices(ROOM_CODE_ALPHABET, k=ROOM_CODE_LENGTH))
            if code not in self.rooms:
                return code

    def create(self, settings: Optional[dict] = None) -> Room:
        room = Room(self.generate_code(), settings)
        self.rooms[room.room_code] = room
        return room

    def get(self, room_code: Optional[str]) -> Optional[Room]:
        if not room_code:
            return None
        return self.rooms.get(str(room_code).upper())

    def remove(self, room_code: str) -> None:
        self.rooms.pop(room_code, None)

    def __len__(self) -> int:
        return len(self.rooms)

    def __contains__(self, room_code: str) -> bool:
        return room_code in self.rooms
