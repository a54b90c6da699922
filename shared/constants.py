"""Game constants shared between client and server."""

import string
from enum import Enum

# Server
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 3001

# Rooms
ROOM_CODE_LENGTH = 6
ROOM_CODE_ALPHABET = string.ascii_uppercase + string.digits  # base 36
MAX_PLAYERS_PER_ROOM = 10

DEFAULT_ROOM_SETTINGS = {
    "teamCount": 2,
    "cardsPerTeam": 10,
}

# Teams
TEAM_COLORS = ["#ef4444", "#3b82f6", "#10b981", "#f59e0b", "#8b5cf6", "#ec4899"]

# Scoring
POINTS_PER_CARD = 10
PLACEMENT_POINTS = 10

# Song assets for the bundled local library
LOCAL_AUDIO_PATH = "assets/music/{id}.mp3"
LOCAL_IMAGE_PATH = "assets/images/{id}_thumb.jpg"
DEFAULT_LIBRARY_PATH = "assets/game_data.json"

PLAYER_ID_PREFIX = "player_"
PLAYER_ID_LENGTH = 13


class MessageType(str, Enum):
    # Client -> Server
    CREATE_ROOM = "create_room"
    JOIN_ROOM = "join_room"
    LEAVE_ROOM = "leave_room"
    UPDATE_TEAMS = "update_teams"
    START_GAME = "start_game"
    # Both directions (client sends action/data, server adds playerId)
    GAME_ACTION = "game_action"
    # Server -> Client
    ROOM_CREATED = "room_created"
    ROOM_JOINED = "room_joined"
    PLAYER_JOINED = "player_joined"
    PLAYER_LEFT = "player_left"
    HOST_TRANSFERRED = "host_transferred"
    TEAMS_UPDATED = "teams_updated"
    GAME_STARTED = "game_started"
    ERROR = "error"


class GameAction(str, Enum):
    PLACE_CARD = "place_card"
    REVEAL_YEARS = "reveal_years"
    NEXT_TURN = "next_turn"


class Position(str, Enum):
    BEFORE = "before"
    AFTER = "after"


class RoundPhase(str, Enum):
    AWAITING_CARD = "awaiting_card"
    CARD_DRAWN = "card_drawn"
    PLACED = "placed"
    ROUND_ENDED = "round_ended"


class OrderResult(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"


class MusicSource(str, Enum):
    LOCAL = "local"
    SPOTIFY = "spotify"


# Error messages sent to clients
ERR_ROOM_NOT_FOUND = "Room not found"
ERR_ROOM_FULL = "Room is full"
ERR_ALREADY_IN_ROOM = "Player already in room"
ERR_NOT_IN_ROOM = "Not in a room"
