"""Entry point - launches the room server or a console game via CLI args.

Usage:
    python main.py server                     # Room server on localhost:3001
    python main.py server 0.0.0.0 9000        # Room server on custom host/port
    python main.py solo [songs.json]          # Solo game in the terminal
    python main.py hotseat Alice Bob [--songs songs.json]
    python main.py host [--teams 2] [--songs songs.json | --playlist tracks.json]
    python main.py join ROOMCODE

    host/join also accept --name NAME and --url ws://HOST:PORT; both are
    remembered in settings.json.
"""

import sys
import asyncio

from shared.constants import DEFAULT_HOST, DEFAULT_PORT, DEFAULT_LIBRARY_PATH, MusicSource


def _pop_option(args: list, name: str, default: str) -> str:
    if name in args:
        i = args.index(name)
        if i + 1 < len(args):
            value = args[i + 1]
            del args[i:i + 2]
            return value
    return default


def _run_local(mode: str, rest: list):
    from client.console import ConsoleGame
    from client.settings import load_config
    from game.library import load_songs, SongLibraryError
    from game.modes import new_solo_game, new_hotseat_game

    songs_path = _pop_option(rest, "--songs", DEFAULT_LIBRARY_PATH)
    try:
        if mode == "solo":
            songs = load_songs(rest[0] if rest else songs_path)
        else:
            songs = load_songs(songs_path)
    except SongLibraryError as e:
        print(e)
        sys.exit(1)

    if mode == "solo":
        reducer = new_solo_game(songs, load_config().player_name)
        ConsoleGame(reducer).run()
    else:
        reducer = new_hotseat_game(songs, rest or ["Player 1", "Player 2"])
        ConsoleGame(reducer, hotseat=True).run()


def _run_networked(mode: str, rest: list):
    from client.multiplayer import TeamGameSession
    from client.network import SessionClient
    from client.settings import load_config, save_config
    from client.team_console import TeamConsole
    from game.library import load_playlist, load_songs_or_demo, SongLibraryError

    client = SessionClient(load_config())
    name = _pop_option(rest, "--name", "")
    url = _pop_option(rest, "--url", "")
    if name:
        client.set_player_name(name)
    if url:
        client.config.server_url = url
    if name or url:
        save_config(client.config)

    songs = []
    source = MusicSource.LOCAL
    team_count = int(_pop_option(rest, "--teams", "2"))
    if mode == "host":
        playlist = _pop_option(rest, "--playlist", "")
        songs_path = _pop_option(rest, "--songs", DEFAULT_LIBRARY_PATH)
        try:
            songs = load_playlist(playlist) if playlist else []
        except SongLibraryError as e:
            print(e)
        if songs:
            source = MusicSource.SPOTIFY
        else:
            songs = load_songs_or_demo(songs_path)
        room_code = None
    elif rest:
        room_code = rest[0]
    else:
        print("Usage: python main.py join ROOMCODE")
        sys.exit(1)

    session = TeamGameSession(client)
    console = TeamConsole(session, songs, team_count=team_count, music_source=source)
    try:
        asyncio.run(console.run(room_code))
    except OSError as e:
        print(f"Could not connect to {client.config.server_url}: {e}")
        sys.exit(1)


def main():
    args = sys.argv[1:]

    if args and args[0] == "server":
        from server.server import main as server_main
        host = args[1] if len(args) > 1 else DEFAULT_HOST
        port = int(args[2]) if len(args) > 2 else DEFAULT_PORT
        print(f"Starting Melody Timeline room server on {host}:{port}")
        asyncio.run(server_main(host, port))
    elif args and args[0] in ("solo", "hotseat"):
        _run_local(args[0], args[1:])
    elif args and args[0] in ("host", "join"):
        _run_networked(args[0], args[1:])
    else:
        print(__doc__)
        sys.exit(1)


if __name__ == "__main__":
    main()
