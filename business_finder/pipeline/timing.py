"""Fixed pauses between upstream requests."""

import asyncio


async def pause(seconds: float) -> None:
    """Sleep for ``seconds``; non-positive values return immediately."""
    if seconds > 0:
        await asyncio.sleep(seconds)
