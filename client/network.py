"""WebSocket session client: one connection, room commands, event callbacks.

Commands are fire-and-forget. Anything sent while the socket is not open is
dropped; there is no outgoing queue and no reconnection.
"""

import asyncio
import random
import string
import traceback
from typing import Callable, Optional
import websockets
from websockets.asyncio.client import connect, ClientConnection
from websockets.protocol import State

from shared.constants import MessageType, GameAction, PLAYER_ID_PREFIX, PLAYER_ID_LENGTH
from shared.protocol import create_message, parse_message
from shared.models import Player
from client.settings import SessionConfig


def generate_player_id(rng: random.Random = None) -> str:
    alphabet = string.ascii_lowercase + string.digits
    return PLAYER_ID_PREFIX + ''.join((rng or random).choices(alphabet, k=PLAYER_ID_LENGTH))


class SessionClient:
    """Connection to the room server for one participant."""

    def __init__(self, config: SessionConfig = None):
        self.config = config or SessionConfig()
        self.player_id = generate_player_id()
        self.room_code: Optional[str] = None
        self.is_host = False
        self.players: list[Player] = []
        self.teams: list[dict] = []
        self.settings: dict = {}
        self._ws: Optional[ClientConnection] = None
        self._listener: Optional[asyncio.Task] = None

        # One slot per event kind; None means nobody is listening
        self.on_room_created: Optional[Callable] = None
        self.on_room_joined: Optional[Callable] = None
        self.on_player_joined: Optional[Callable] = None
        self.on_player_left: Optional[Callable] = None
        self.on_teams_updated: Optional[Callable] = None
        self.on_game_started: Optional[Callable] = None
        self.on_game_action: Optional[Callable] = None
        self.on_host_transferred: Optional[Callable] = None
        self.on_error: Optional[Callable] = None
        self.on_disconnected: Optional[Callable] = None

    @property
    def player_name(self) -> str:
        return self.config.player_name

    def set_player_name(self, name: str):
        self.config.player_name = name

    @property
    def connected(self) -> bool:
        return self._ws is not None and self._ws.protocol.state == State.OPEN

    async def connect(self):
        """Open the connection. Raises if the server can't be reached."""
        ws = await connect(self.config.server_url)
        self._ws = ws
        print(f"[net] Connected to {self.config.server_url}")
        self._listener = asyncio.create_task(self._listen(ws))

    async def _listen(self, ws: ClientConnection):
        try:
            async for message in ws:
                self.receive(message)
        except websockets.exceptions.ConnectionClosed as e:
            print(f"[net] Connection closed: {e}")
        finally:
            if self._ws is ws:
                self._ws = None
            print("[net] Disconnected from server")
            self._emit(self.on_disconnected)

    async def close(self):
        ws = self._ws
        if ws is not None:
            await ws.close()
        if self._listener is not None:
            await self._listener
            self._listener = None

    def receive(self, raw_message: str):
        try:
            msg_type, payload = parse_message(raw_message)
        except Exception as e:
            print(f"[net] Parse error: {e}")
            return
        try:
            self.handle_message(msg_type, payload)
        except (KeyError, TypeError, AttributeError) as e:
            print(f"[net] Malformed {msg_type.value}: {e}")

    def handle_message(self, msg_type: MessageType, payload: dict):
        """Update the local room mirror and notify the matching callback."""
        if msg_type == MessageType.ROOM_CREATED:
            self.room_code = payload.get("roomCode")
            self.is_host = True
            self.players = [Player(self.player_id, self.player_name)]
            self.teams = []
            self._emit(self.on_room_created, payload)

        elif msg_type == MessageType.ROOM_JOINED:
            self.room_code = payload.get("roomCode")
            self.is_host = bool(payload.get("isHost"))
            self.players = [Player.from_dict(p) for p in payload.get("players", [])]
            self.teams = list(payload.get("teams") or [])
            self.settings = dict(payload.get("settings") or {})
            self._emit(self.on_room_joined, payload)

        elif msg_type == MessageType.PLAYER_JOINED:
            player = Player.from_dict(payload["player"])
            self.players.append(player)
            self._emit(self.on_player_joined, player)

        elif msg_type == MessageType.PLAYER_LEFT:
            player_id = payload.get("playerId")
            self.players = [p for p in self.players if p.id != player_id]
            self._emit(self.on_player_left, player_id)

        elif msg_type == MessageType.TEAMS_UPDATED:
            self.teams = list(payload.get("teams") or [])
            by_id = {p.id: p for p in self.players}
            for assignment in payload.get("playerTeams") or []:
                player = by_id.get(assignment.get("playerId"))
                if player:
                    player.team = assignment.get("team")
            self._emit(self.on_teams_updated, payload)

        elif msg_type == MessageType.GAME_STARTED:
            self._emit(self.on_game_started, payload.get("gameState"))

        elif msg_type == MessageType.GAME_ACTION:
            self._emit(self.on_game_action, payload)

        elif msg_type == MessageType.HOST_TRANSFERRED:
            self.is_host = True
            self._emit(self.on_host_transferred)

        elif msg_type == MessageType.ERROR:
            message = payload.get("message", "")
            print(f"[net] Server error: {message}")
            self._emit(self.on_error, message)

        else:
            print(f"[net] Ignoring {msg_type.value}")

    def _emit(self, callback: Optional[Callable], *args):
        if callback is None:
            return
        try:
            callback(*args)
        except Exception as e:
            print(f"[net] Callback error: {e}")
            traceback.print_exc()

    # -- Commands --

    async def send(self, msg_type: MessageType, payload: dict = None) -> bool:
        """Send if the socket is open. Returns False if the message was dropped."""
        if not self.connected:
            return False
        try:
            await self._ws.send(create_message(msg_type, payload))
            return True
        except websockets.exceptions.ConnectionClosed:
            return False

    async def create_room(self, settings: dict = None) -> bool:
        return await self.send(MessageType.CREATE_ROOM, {
            "playerId": self.player_id,
            "playerName": self.player_name,
            "settings": settings,
        })

    async def join_room(self, room_code: str) -> bool:
        return await self.send(MessageType.JOIN_ROOM, {
            "roomCode": room_code.strip().upper(),
            "playerId": self.player_id,
            "playerName": self.player_name,
        })

    async def leave_room(self) -> bool:
        sent = await self.send(MessageType.LEAVE_ROOM)
        self.room_code = None
        self.is_host = False
        self.players = []
        self.teams = []
        return sent

    async def update_teams(self, teams: list[dict], player_teams: list[dict]) -> bool:
        return await self.send(MessageType.UPDATE_TEAMS, {
            "teams": teams,
            "playerTeams": player_teams,
        })

    async def start_game(self, game_state: dict) -> bool:
        return await self.send(MessageType.START_GAME, {"gameState": game_state})

    async def send_game_action(self, action: GameAction, data: dict = None) -> bool:
        return await self.send(MessageType.GAME_ACTION, {
            "action": GameAction(action).value,
            "data": data or {},
        })
