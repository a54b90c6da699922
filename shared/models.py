"""Serializable data classes for game entities.

Used by both client and server for network communication. Wire keys follow
the browser client's camelCase names where they differ from ours.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional
from shared.constants import LOCAL_AUDIO_PATH, LOCAL_IMAGE_PATH, TEAM_COLORS


@dataclass(frozen=True)
class Song:
    id: str
    title: str
    artist: str
    year: int
    preview_url: Optional[str] = None
    image_url: Optional[str] = None
    album: Optional[str] = None

    @property
    def audio_ref(self) -> str:
        return self.preview_url or LOCAL_AUDIO_PATH.format(id=self.id)

    @property
    def image_ref(self) -> str:
        return self.image_url or LOCAL_IMAGE_PATH.format(id=self.id)

    def to_dict(self) -> dict:
        d = {
            "id": self.id,
            "title": self.title,
            "artist": self.artist,
            "year": self.year,
        }
        # Local library records carry only the four core fields
        if self.preview_url:
            d["preview_url"] = self.preview_url
        if self.image_url:
            d["image_url"] = self.image_url
        if self.album:
            d["album"] = self.album
        return d

    @staticmethod
    def from_dict(d: dict) -> Song:
        return Song(
            id=str(d["id"]),
            title=d["title"],
            artist=d["artist"],
            year=int(d["year"]),
            preview_url=d.get("preview_url"),
            image_url=d.get("image_url"),
            album=d.get("album"),
        )


@dataclass
class Player:
    id: str
    name: str
    team: Optional[int] = None

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "team": self.team}

    @staticmethod
    def from_dict(d: dict) -> Player:
        return Player(id=d["id"], name=d.get("name", "Player"), team=d.get("team"))


@dataclass
class Team:
    id: int
    name: str
    score: int = 0
    color: str = TEAM_COLORS[0]
    cards_placed: int = 0  # local tally, not sent on the wire

    @staticmethod
    def default(index: int) -> Team:
        return Team(id=index, name=f"Team {index + 1}",
                    color=TEAM_COLORS[index % len(TEAM_COLORS)])

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "score": self.score,
            "color": self.color,
        }

    @staticmethod
    def from_dict(d: dict) -> Team:
        index = int(d.get("id", 0))
        return Team(
            id=index,
            name=d.get("name", f"Team {index + 1}"),
            score=int(d.get("score", 0)),
            color=d.get("color", TEAM_COLORS[index % len(TEAM_COLORS)]),
        )


@dataclass
class Contestant:
    """A scoring seat in solo and hot-seat games."""
    name: str
    score: int = 0
    cards_placed: int = 0


@dataclass
class GameStateSnapshot:
    """Initial networked game state, broadcast once by the host."""
    songs: list[Song]
    deck: list[int]  # indices into songs, drawn from the end
    teams: list[Team] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "songs": [s.to_dict() for s in self.songs],
            "deck": list(self.deck),
            "teams": [t.to_dict() for t in self.teams],
        }

    @staticmethod
    def from_dict(d: dict) -> GameStateSnapshot:
        return GameStateSnapshot(
            songs=[Song.from_dict(s) for s in d["songs"]],
            deck=[int(i) for i in d["deck"]],
            teams=[Team.from_dict(t) for t in d.get("teams", [])],
        )
