"""Text front end for solo and hot-seat games."""

from typing import Callable

from shared.constants import Position, OrderResult
from shared.models import Song
from game.playback import Playback, NullPlayback
from game.reducer import TimelineReducer

HELP = "[b]efore  [a]fter  [r]eveal  [c]heck  [p]lay/pause  [e]nd turn  [q]uit"
DECK_EMPTY_HELP = "Deck is empty. [c]heck  [q]uit"


def describe(song: Song, hidden: bool = False) -> str:
    if hidden:
        return "??? - ??? (????)"
    return f"{song.title} - {song.artist} ({song.year})"


def toggle_playback(playback: Playback) -> str:
    """Play or pause the loaded card. Returns a status line."""
    if playback.playing:
        playback.pause()
        return f"Paused at {playback.position():.1f}s"
    playback.play()
    return "Playing" if playback.playing else "Nothing to play"


class ConsoleGame:
    def __init__(self, reducer: TimelineReducer, hotseat: bool = False,
                 playback: Playback = None,
                 read: Callable[[str], str] = input, write: Callable[[str], None] = print):
        self.reducer = reducer
        self.hotseat = hotseat
        self.playback = playback or NullPlayback()
        self.read = read
        self.write = write

    def run(self) -> list:
        """Play until quit. Hot-seat ends with the deck; solo stays open for a final check."""
        self._draw()
        while not (self.hotseat and self.reducer.is_over):
            self._show()
            command = self.read("> ").strip().lower()[:1]
            if command == "q":
                break
            self._handle(command)
        self._summary()
        return self.reducer.standings()

    def _draw(self):
        card = self.reducer.draw_next_card()
        if card is not None:
            self.playback.load(card)
            self.write(f"Now playing: {card.audio_ref}")

    def _show(self):
        r = self.reducer
        line = " | ".join(describe(s) for s in r.timeline) or "(empty)"
        self.write(f"Timeline: {line}")
        if r.current_card is not None:
            self.write(f"Card: {describe(r.current_card, hidden=not r.years_revealed)}")
        if self.hotseat and r.current_actor is not None:
            self.write(f"Round {r.turns.round_number}, {r.current_actor.name} to play")
        self.write(DECK_EMPTY_HELP if r.is_over else HELP)

    def _handle(self, command: str):
        r = self.reducer
        if r.is_over and command != "c":
            self.write(DECK_EMPTY_HELP)
        elif command in ("b", "a"):
            result = r.place_card(Position.BEFORE if command == "b" else Position.AFTER)
            if result is None:
                self.write("No card to place.")
            elif self.hotseat:
                self.write("Correct placement! +10 points" if result.correct
                           else "Incorrect order!")
            else:
                self.write(f"Card placed {result.position.value} the timeline!")
                self._draw()
        elif command == "r":
            r.reveal_years()
        elif command == "p":
            self.write(toggle_playback(self.playback))
        elif command == "c":
            verdict = r.check_order()
            if verdict is None:
                self.write("Place at least 2 cards before checking order!")
            elif verdict == OrderResult.CORRECT:
                self.write(f"Perfect! Score: {r.current_actor.score}")
            else:
                self.write("The timeline is not in correct order. Keep trying!")
        elif command == "e" and self.hotseat:
            card = r.end_turn()
            if card is not None:
                self.playback.load(card)
                self.write(f"{r.current_actor.name}'s turn!")
        else:
            self.write(HELP)

    def _summary(self):
        self.write("Final scores:")
        for place, seat in enumerate(self.reducer.standings(), start=1):
            self.write(f"{place}. {seat.name}: {seat.score} ({seat.cards_placed} cards placed)")
