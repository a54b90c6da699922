"""Song feeds: the bundled JSON library and Spotify playlist listings.

Invalid records are filtered here so the reducer only ever sees complete songs.
"""

import json
import re
from typing import Iterable, Optional

from shared.constants import DEFAULT_LIBRARY_PATH
from shared.models import Song


DEMO_SONGS = [
    Song(id="demo_1", title="Demo Song 1", artist="Artist 1", year=1980),
    Song(id="demo_2", title="Demo Song 2", artist="Artist 2", year=1990),
    Song(id="demo_3", title="Demo Song 3", artist="Artist 3", year=2000),
]

_YEAR_RE = re.compile(r"^(\d{4})")


class SongLibraryError(Exception):
    pass


def song_from_record(record) -> Optional[Song]:
    """Build a Song, or None if the record is missing a required field."""
    if not isinstance(record, dict):
        return None
    try:
        song = Song.from_dict(record)
    except (KeyError, TypeError, ValueError):
        return None
    if not song.id or not song.title:
        return None
    return song


def parse_songs(records: Iterable) -> list[Song]:
    songs = []
    dropped = 0
    for record in records:
        song = song_from_record(record)
        if song is None:
            dropped += 1
            continue
        songs.append(song)
    if dropped:
        print(f"[game] Dropped {dropped} invalid song record(s)")
    return songs


def load_songs(path: str = DEFAULT_LIBRARY_PATH) -> list[Song]:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            records = json.load(f)
    except (OSError, ValueError) as e:
        raise SongLibraryError(f"Error loading game data from {path}: {e}") from e
    if not isinstance(records, list):
        raise SongLibraryError(f"Game data in {path} is not a list of songs")
    return parse_songs(records)


def load_songs_or_demo(path: str = DEFAULT_LIBRARY_PATH) -> list[Song]:
    """Library songs, falling back to the demo list if the library is unusable."""
    try:
        songs = load_songs(path)
    except SongLibraryError as e:
        print(f"[game] {e}; using demo songs")
        return list(DEMO_SONGS)
    return songs or list(DEMO_SONGS)


def release_year(release_date) -> Optional[int]:
    # Spotify dates come as "YYYY", "YYYY-MM" or "YYYY-MM-DD"
    match = _YEAR_RE.match(str(release_date or ""))
    return int(match.group(1)) if match else None


def songs_from_playlist_items(items: Iterable[dict]) -> list[Song]:
    """Map Spotify playlist track items to songs, keeping only playable previews."""
    songs = []
    for item in items:
        track = item.get("track") if isinstance(item, dict) else None
        if not track or not track.get("preview_url"):
            continue
        album = track.get("album") or {}
        year = release_year(album.get("release_date"))
        if year is None or not track.get("id"):
            continue
        images = album.get("images") or []
        songs.append(Song(
            id=track["id"],
            title=track.get("name", ""),
            artist=", ".join(a.get("name", "") for a in track.get("artists") or []),
            year=year,
            preview_url=track["preview_url"],
            image_url=images[0].get("url") if images else None,
            album=album.get("name"),
        ))
    return songs


def load_playlist(path: str) -> list[Song]:
    """Songs from a saved playlist-tracks response, either the full page or its items list."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise SongLibraryError(f"Error loading playlist from {path}: {e}") from e
    items = data.get("items") if isinstance(data, dict) else data
    if not isinstance(items, list):
        raise SongLibraryError(f"Playlist in {path} has no track items")
    songs = songs_from_playlist_items(items)
    print(f"[game] Loaded {len(songs)} playable track(s) of {len(items)}")
    return songs
