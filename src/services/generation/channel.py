"""Multi-producer / single-consumer fragment channel.

Producers call `write` from any task; exactly one consumer iterates the
channel with `async for`. The channel is unbounded, so writes never block,
and iteration ends only after `close()` has been called and every fragment
enqueued before it has been yielded.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import Final, cast

from services.generation.exceptions import ChannelClosedError
from services.generation.models import Fragment


_CLOSED: Final = object()


class FragmentChannel:
    """Unbounded fragment queue with one-way "no more writers" closing."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue[Fragment | object] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, fragment: Fragment) -> None:
        if self._closed:
            raise ChannelClosedError(
                f"Cannot write part {fragment.part!r}: channel is closed"
            )
        self._queue.put_nowait(fragment)

    def close(self) -> None:
        """Mark the channel complete. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        # The sentinel sorts after every fragment already enqueued.
        self._queue.put_nowait(_CLOSED)

    def pending(self) -> int:
        """Number of fragments enqueued but not yet consumed."""
        size = self._queue.qsize()
        return size - 1 if self._closed and size else size

    async def __aiter__(self) -> AsyncIterator[Fragment]:
        while True:
            item = await self._queue.get()
            if item is _CLOSED:
                return
            yield cast(Fragment, item)
