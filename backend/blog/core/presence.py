# blog/core/presence.py
"""
Presence broadcasting for connected clients.
Login/logout publish account status events that every subscribed WebSocket
receives. Delivery is best-effort: nothing here acknowledges or retries.
"""
import json
import logging
from typing import Protocol, Set

from starlette.websockets import WebSocket

logger = logging.getLogger("uvicorn.error")


class PresenceNotifier(Protocol):
    """Anything the authentication flow can publish presence events to."""

    async def publish(self, event: str, payload: dict) -> None: ...


class PresenceChannel:
    """
    WebSocket fan-out for presence events.

    The router is responsible for ws.accept(); this class only tracks
    subscribers and routes messages. Sockets that fail on send are dropped.
    """
    def __init__(self):
        self._subscribers: Set[WebSocket] = set()

    def subscribe(self, ws: WebSocket):
        self._subscribers.add(ws)

    def unsubscribe(self, ws: WebSocket):
        self._subscribers.discard(ws)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    async def publish(self, event: str, payload: dict) -> None:
        """
        Send ``{"event": event, "data": payload}`` to every subscriber.

        Args:
            event: Event name (e.g. "userStatus")
            payload: JSON-serialisable event body
        """
        msg = json.dumps({"event": event, "data": payload}, default=str)
        for s in list(self._subscribers):
            try:
                await s.send_text(msg)
            except Exception as e:
                # Connection is gone; stop broadcasting to it
                logger.debug("[presence] dropping subscriber: %r", e)
                self._subscribers.discard(s)
