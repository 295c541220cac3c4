"""Server-sent event fan-out to every open ``/api/events`` stream.

Delivery is best-effort and at-most-once. ``broadcast`` only enqueues frames,
it never awaits a client. A connection whose write fails is dropped on the
spot. Frames reach each connection in the order ``broadcast`` was called.
"""

import asyncio
import json
import logging
from typing import Any, AsyncIterator, Optional, Set

from finmodel.core.config import settings
from finmodel.core.exceptions import ConnectionClosed

logger = logging.getLogger(__name__)

def format_event(event: str, payload: Any = None) -> str:
    data = json.dumps(payload if payload is not None else {}, default=str)
    return f"event: {event}\ndata: {data}\n\n"


def format_comment(text: str) -> str:
    return f": {text}\n\n"


CONNECTED_FRAME = format_comment("connected")
KEEPALIVE_FRAME = format_comment("keepalive")


class EventStreamConnection:
    """Outbound frame buffer for one SSE client."""

    def __init__(self, max_queue: int = 100):
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=max_queue)
        self.closed = False

    def write(self, frame: str) -> None:
        if self.closed:
            raise ConnectionClosed("event stream already closed")
        try:
            self._queue.put_nowait(frame)
        except asyncio.QueueFull:
            # Client stopped reading; treat as dead
            self.close()
            raise

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        try:
            self._queue.put_nowait(None)
        except asyncio.QueueFull:
            pass

    async def frames(self) -> AsyncIterator[str]:
        while True:
            # A close() that found the queue full leaves no sentinel behind
            if self.closed and self._queue.empty():
                return
            frame = await self._queue.get()
            if frame is None:
                return
            yield frame


class EventBroadcaster:
    def __init__(self, max_queue: int = 100):
        self.active_connections: Set[Any] = set()
        self.max_queue = max_queue

    @property
    def active_count(self) -> int:
        return len(self.active_connections)

    def register(self, connection) -> None:
        self.active_connections.add(connection)
        logger.info(f"Event stream opened ({self.active_count} active)")

    def unregister(self, connection) -> None:
        if connection in self.active_connections:
            self.active_connections.discard(connection)
            logger.info(f"Event stream closed ({self.active_count} active)")

    def connect(self) -> EventStreamConnection:
        """Open a connection whose first frame is the ``: connected`` comment."""
        connection = EventStreamConnection(max_queue=self.max_queue)
        connection.write(CONNECTED_FRAME)
        self.register(connection)
        return connection

    def _fan_out(self, frame: str) -> int:
        delivered = 0
        for connection in list(self.active_connections):
            try:
                connection.write(frame)
                delivered += 1
            except Exception as e:
                self.active_connections.discard(connection)
                logger.info(f"Dropped event stream after failed write: {e!r}")
        return delivered

    def broadcast(self, event: str, payload: Optional[Any] = None) -> int:
        """Send ``event`` to every connection; returns how many accepted it."""
        return self._fan_out(format_event(event, payload))

    def heartbeat(self) -> int:
        return self._fan_out(KEEPALIVE_FRAME)

    async def run_heartbeat(self, interval: float) -> None:
        """Keep idle streams alive through proxies until cancelled."""
        while True:
            await asyncio.sleep(interval)
            self.heartbeat()


async def event_stream(manager: EventBroadcaster, connection: EventStreamConnection) -> AsyncIterator[str]:
    """Response body for one client; deregisters when the client goes away."""
    try:
        async for frame in connection.frames():
            yield frame
    finally:
        manager.unregister(connection)
        connection.close()


# Global broadcaster instance
broadcaster = EventBroadcaster(max_queue=settings.EVENTS_QUEUE_SIZE)
