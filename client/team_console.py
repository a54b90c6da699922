"""Text front end for networked team games.

Runs the session client and a line reader on one event loop. Room events are
printed as they arrive; typed commands become room commands or game actions.
"""

import asyncio
from typing import Awaitable, Callable, Optional, Sequence

from shared.constants import DEFAULT_ROOM_SETTINGS, MusicSource, Position
from shared.models import Song
from client.console import describe, toggle_playback
from client.multiplayer import TeamGameSession

LOBBY_HELP = "[t]eams auto-assign  [s]tart  [q]uit"
GAME_HELP = "[b]efore  [a]fter  [r]eveal  [p]lay/pause  [q]uit"


async def _read_line(prompt: str) -> str:
    return await asyncio.to_thread(input, prompt)


class TeamConsole:
    def __init__(self, session: TeamGameSession, songs: Sequence[Song] = (),
                 team_count: int = DEFAULT_ROOM_SETTINGS["teamCount"],
                 music_source: MusicSource = MusicSource.LOCAL,
                 read: Callable[[str], Awaitable[str]] = _read_line,
                 write: Callable[[str], None] = print):
        self.session = session
        self.client = session.client
        self.songs = list(songs)
        self.team_count = team_count
        self.music_source = MusicSource(music_source)
        self.read = read
        self.write = write
        self._hook_events()

    def _hook_events(self):
        client = self.client
        # The session owns the join/teams/start/action slots; chain after them
        joined, teams, started, action = (client.on_room_joined, client.on_teams_updated,
                                          client.on_game_started, client.on_game_action)

        def chain(first, then):
            def handler(*args):
                first(*args)
                then(*args)
            return handler

        client.on_room_created = lambda data: self.write(f"Room {data.get('roomCode')} created")
        client.on_room_joined = chain(joined, lambda data: self.write(
            f"Joined room {data.get('roomCode')} ({len(data.get('players', []))} players)"))
        client.on_player_joined = lambda player: self.write(f"{player.name} joined")
        client.on_player_left = lambda player_id: self.write(f"{player_id} left")
        client.on_host_transferred = lambda: self.write("You are now the host")
        client.on_teams_updated = chain(teams, lambda data: self._show_roster())
        client.on_game_started = chain(started, lambda data: self._show_game())
        client.on_game_action = chain(action, lambda data: self._show_game())
        client.on_error = lambda message: self.write(f"Error: {message}")
        client.on_disconnected = lambda: self.write("Disconnected from server")

    async def run(self, room_code: Optional[str] = None):
        await self.client.connect()
        if room_code:
            await self.client.join_room(room_code)
        else:
            settings = dict(DEFAULT_ROOM_SETTINGS, teamCount=self.team_count,
                            musicSource=self.music_source.value)
            await self.client.create_room(settings)
            self.session.build_teams(self.team_count)

        while self.client.connected:
            reducer = self.session.reducer
            if reducer is not None and reducer.is_over:
                break
            command = (await self.read("> ")).strip().lower()[:1]
            if command == "q":
                break
            await self._handle(command)

        self._summary()
        await self.client.leave_room()
        await self.client.close()

    async def _handle(self, command: str):
        session = self.session
        if session.reducer is None:
            if command == "t" and self.client.is_host:
                await session.auto_assign_teams()
            elif command == "s" and self.client.is_host:
                await session.start_game(self.songs)
            else:
                self.write(LOBBY_HELP)
            return

        if command in ("b", "a"):
            if session.current_team is not None and not session.is_my_turn():
                self.write(f"Waiting for {session.current_team.name}")
                return
            result = await session.place_card(Position.BEFORE if command == "b" else Position.AFTER)
            if result is not None:
                self.write("Correct placement! +10 points" if result.correct else "Incorrect order!")
            self._show_game()
        elif command == "r":
            await session.reveal_years()
            self._show_game()
        elif command == "p":
            self.write(toggle_playback(session.playback))
        else:
            self.write(GAME_HELP)

    def _show_roster(self):
        for team in self.session.teams:
            members = [p.name for p in self.client.players if p.team == team.id]
            self.write(f"{team.name}: {', '.join(members) or '-'}")

    def _show_game(self):
        reducer = self.session.reducer
        if reducer is None:
            return
        line = " | ".join(describe(s) for s in reducer.timeline) or "(empty)"
        self.write(f"Timeline: {line}")
        if reducer.current_card is not None:
            self.write(f"Card: {describe(reducer.current_card, hidden=not reducer.years_revealed)}")
        team = self.session.current_team
        if team is not None:
            self.write(f"{team.name} to play" + (" (you)" if self.session.is_my_turn() else ""))

    def _summary(self):
        reducer = self.session.reducer
        if reducer is None:
            return
        self.write("Final scores:")
        for place, team in enumerate(reducer.standings(), start=1):
            self.write(f"{place}. {team.name}: {team.score}")
