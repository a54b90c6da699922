"""Network protocol message definitions and serialization.

Every message is one JSON object with a ``type`` field; payload fields sit
next to it at the top level.
"""

import json
from shared.constants import MessageType


def create_message(msg_type: MessageType, payload: dict = None) -> str:
    """Create a JSON message string."""
    message = {"type": msg_type.value}
    message.update(payload or {})
    return json.dumps(message)


def parse_message(data: str) -> tuple[MessageType, dict]:
    """Parse a JSON message string into (type, payload).

    Raises ValueError for anything that is not a JSON object with a known type.
    """
    msg = json.loads(data)
    if not isinstance(msg, dict):
        raise ValueError("Message is not a JSON object")
    payload = dict(msg)
    msg_type = MessageType(payload.pop("type", None))
    return msg_type, payload
