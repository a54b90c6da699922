"""Playback capability consumed by the front ends."""

from typing import Optional

from shared.models import Song


class Playback:
    """Audio output for the current card. Implemented by the host application."""

    playing: bool = False

    def load(self, song: Song) -> None:
        raise NotImplementedError

    def play(self) -> None:
        raise NotImplementedError

    def pause(self) -> None:
        raise NotImplementedError

    def position(self) -> float:
        raise NotImplementedError


class NullPlayback(Playback):
    """Remembers what would be playing. Used by the console front end and tests."""

    def __init__(self):
        self.loaded: Optional[Song] = None
        self.playing = False
        self._position = 0.0

    def load(self, song: Song) -> None:
        self.loaded = song
        self.playing = False
        self._position = 0.0

    def play(self) -> None:
        if self.loaded is not None:
            self.playing = True

    def pause(self) -> None:
        self.playing = False

    def position(self) -> float:
        return self._position
