"""Best-effort delivery to connection handles."""

import asyncio


async def send_to(ws, message: str) -> bool:
    """Send to one connection. Returns False if the send failed."""
    if ws is None:
        return False
    try:
        await ws.send(message)
        return True
    except Exception as e:
        print(f"[server] Dropped message to {getattr(ws, 'remote_address', '?')}: {e}")
        return False


async def broadcast(handles: list, message: str) -> int:
    """Send to every handle concurrently so one slow peer can't hold up the rest.

    Returns the number of successful deliveries.
    """
    if not handles:
        return 0
    results = await asyncio.gather(*(send_to(ws, message) for ws in handles))
    return sum(1 for ok in results if ok)
