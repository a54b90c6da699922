"""WebSocket server: room management and game action relay.

The server holds no game rules. It keeps room membership, the host and the
team roster, and forwards game actions between room members.
"""

import asyncio
import traceback
from typing import Any, Optional
import websockets
from websockets.asyncio.server import serve, ServerConnection

from shared.constants import (
    MessageType, DEFAULT_HOST, DEFAULT_PORT,
    ERR_ROOM_NOT_FOUND, ERR_ROOM_FULL, ERR_ALREADY_IN_ROOM, ERR_NOT_IN_ROOM,
)
from shared.protocol import create_message, parse_message
from shared.models import Player
from server.rooms import Room, RoomRegistry
from server.broadcast import broadcast, send_to


class RoomServer:
    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT,
                 registry: RoomRegistry = None):
        self.host = host
        self.port = port
        self.registry = registry or RoomRegistry()
        self.memberships: dict[Any, tuple[str, str]] = {}  # ws -> (room_code, player_id)
        self._handlers = {
            MessageType.CREATE_ROOM: self._handle_create_room,
            MessageType.JOIN_ROOM: self._handle_join_room,
            MessageType.LEAVE_ROOM: self._handle_leave_room,
            MessageType.UPDATE_TEAMS: self._handle_update_teams,
            MessageType.START_GAME: self._handle_start_game,
            MessageType.GAME_ACTION: self._handle_game_action,
        }

    async def handle_connection(self, ws: ServerConnection):
        print(f"[server] New connection from {ws.remote_address}")
        try:
            async for raw_message in ws:
                await self.handle_message(ws, raw_message)
        except websockets.exceptions.ConnectionClosed:
            pass
        finally:
            await self.leave_room(ws)
            print(f"[server] Connection closed from {ws.remote_address}")

    async def handle_message(self, ws, raw_message):
        try:
            msg_type, payload = parse_message(raw_message)
        except Exception as e:
            print(f"[server] Parse error: {e}")
            return

        handler = self._handlers.get(msg_type)
        if handler is None:
            print(f"[server] Ignoring client-sent {msg_type.value}")
            return
        try:
            await handler(ws, payload)
        except Exception as e:
            print(f"[server] Error handling {msg_type.value}: {e}")
            traceback.print_exc()

    def member(self, ws) -> tuple[Optional[Room], Optional[str]]:
        membership = self.memberships.get(ws)
        if not membership:
            return None, None
        room_code, player_id = membership
        return self.registry.get(room_code), player_id

    # -- Operations --

    async def create_room(self, ws, player_id: str, player_name: str,
                          settings: Optional[dict] = None) -> str:
        await self.leave_room(ws)
        room = self.registry.create(settings)
        room.add_player(Player(player_id, player_name), ws)
        self.memberships[ws] = (room.room_code, player_id)
        await send_to(ws, create_message(MessageType.ROOM_CREATED, {
            "roomCode": room.room_code,
            "isHost": True,
        }))
        print(f"[server] Room {room.room_code} created by {player_name}")
        return room.room_code

    async def join_room(self, ws, room_code: str, player_id: str,
                        player_name: str) -> Optional[str]:
        room = self.registry.get(room_code)
        if not room:
            await self._send_error(ws, ERR_ROOM_NOT_FOUND)
            return None
        if room.is_full():
            await self._send_error(ws, ERR_ROOM_FULL)
            return None
        if player_id in room.players:
            await self._send_error(ws, ERR_ALREADY_IN_ROOM)
            return None

        await self.leave_room(ws)
        if room.room_code not in self.registry:
            # The connection was the last member of this very room
            await self._send_error(ws, ERR_ROOM_NOT_FOUND)
            return None
        player = Player(player_id, player_name)
        room.add_player(player, ws)
        self.memberships[ws] = (room.room_code, player_id)

        await send_to(ws, create_message(MessageType.ROOM_JOINED, {
            "roomCode": room.room_code,
            "isHost": room.is_host(player_id),
            "players": room.player_list(),
            "teams": room.teams,
            "settings": room.settings,
        }))
        await broadcast(room.handles(exclude=player_id), create_message(
            MessageType.PLAYER_JOINED, {"player": player.to_dict()}))
        print(f"[server] Player {player_name} joined room {room.room_code}")
        return room.room_code

    async def leave_room(self, ws) -> None:
        """Remove the connection's player from its room. Safe to call repeatedly."""
        membership = self.memberships.pop(ws, None)
        if not membership:
            return
        room_code, player_id = membership
        room = self.registry.get(room_code)
        if not room:
            return

        new_host = room.remove_player(player_id)
        if room.is_empty():
            self.registry.remove(room_code)
            print(f"[server] Room {room_code} deleted (empty)")
            return

        if new_host:
            await send_to(room.handle_of(new_host),
                          create_message(MessageType.HOST_TRANSFERRED))
            print(f"[server] Host of room {room_code} transferred to {new_host}")
        await broadcast(room.handles(), create_message(
            MessageType.PLAYER_LEFT, {"playerId": player_id}))

    async def update_teams(self, ws, teams: list, player_teams: list) -> None:
        room, player_id = await self._require_room(ws)
        if not room:
            return
        if not room.is_host(player_id):
            print(f"[server] Ignoring update_teams from non-host {player_id}")
            return
        if not isinstance(teams, list) or not isinstance(player_teams, list) \
                or not all(isinstance(a, dict) for a in player_teams):
            print(f"[server] Ignoring malformed update_teams from {player_id}")
            return

        room.teams = list(teams)
        for assignment in player_teams:
            room.assign_team(assignment.get("playerId"), assignment.get("team"))
        await broadcast(room.handles(), create_message(MessageType.TEAMS_UPDATED, {
            "teams": room.teams,
            "playerTeams": player_teams,
        }))

    async def start_game(self, ws, game_state: dict) -> None:
        room, player_id = await self._require_room(ws)
        if not room:
            return
        if not room.is_host(player_id):
            print(f"[server] Ignoring start_game from non-host {player_id}")
            return

        room.game_state = game_state
        await broadcast(room.handles(), create_message(MessageType.GAME_STARTED, {
            "gameState": game_state,
        }))
        print(f"[server] Game started in room {room.room_code}")

    async def relay_game_action(self, ws, action: str, data) -> None:
        room, player_id = await self._require_room(ws)
        if not room:
            return
        await broadcast(room.handles(exclude=player_id), create_message(
            MessageType.GAME_ACTION, {
                "action": action,
                "playerId": player_id,
                "data": data,
            }))

    # -- Message handlers --

    async def _handle_create_room(self, ws, payload: dict):
        player_id = payload.get("playerId")
        if not player_id:
            print("[server] create_room without playerId")
            return
        await self.create_room(ws, player_id, payload.get("playerName", "Player"),
                               payload.get("settings"))

    async def _handle_join_room(self, ws, payload: dict):
        player_id = payload.get("playerId")
        if not player_id:
            print("[server] join_room without playerId")
            return
        await self.join_room(ws, payload.get("roomCode"), player_id,
                             payload.get("playerName", "Player"))

    async def _handle_leave_room(self, ws, payload: dict):
        await self.leave_room(ws)

    async def _handle_update_teams(self, ws, payload: dict):
        await self.update_teams(ws, payload.get("teams") or [],
                                payload.get("playerTeams") or [])

    async def _handle_start_game(self, ws, payload: dict):
        await self.start_game(ws, payload.get("gameState"))

    async def _handle_game_action(self, ws, payload: dict):
        await self.relay_game_action(ws, payload.get("action"), payload.get("data"))

    async def _require_room(self, ws) -> tuple[Optional[Room], Optional[str]]:
        room, player_id = self.member(ws)
        if not room:
            await self._send_error(ws, ERR_NOT_IN_ROOM)
        return room, player_id

    async def _send_error(self, ws, message: str):
        await send_to(ws, create_message(MessageType.ERROR, {"message": message}))

    async def run(self):
        async with serve(self.handle_connection, self.host, self.port):
            print(f"Server running on ws://{self.host}:{self.port}")
            await asyncio.Future()  # run forever


async def main(host: str = DEFAULT_HOST, port: int = DEFAULT_PORT):
    server = RoomServer(host, port)
    await server.run()
