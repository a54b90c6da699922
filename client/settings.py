"""Session config persistence: load/save settings.json in the project root."""

import os
import sys
import json
from dataclasses import dataclass, field, asdict
from typing import Optional

from shared.constants import DEFAULT_HOST, DEFAULT_PORT


@dataclass
class SessionConfig:
    player_name: str = "Player"
    server_url: str = f"ws://{DEFAULT_HOST}:{DEFAULT_PORT}"
    # Spotify tokens kept by the surrounding app: access_token, refresh_token, token_expiry
    auth_tokens: dict = field(default_factory=dict)

    @staticmethod
    def from_dict(d: dict) -> "SessionConfig":
        default = SessionConfig()
        return SessionConfig(
            player_name=d.get("player_name") or default.player_name,
            server_url=d.get("server_url") or default.server_url,
            auth_tokens=dict(d.get("auth_tokens") or {}),
        )


def _settings_path() -> str:
    if getattr(sys, 'frozen', False):
        base = os.path.dirname(sys.executable)
    else:
        # Two levels up from client/settings.py → project root
        base = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return os.path.join(base, 'settings.json')


def load_config(path: Optional[str] = None) -> SessionConfig:
    path = path or _settings_path()
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return SessionConfig.from_dict(json.load(f))
    except Exception:
        return SessionConfig()


def save_config(config: SessionConfig, path: Optional[str] = None) -> None:
    path = path or _settings_path()
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(asdict(config), f, indent=2)
