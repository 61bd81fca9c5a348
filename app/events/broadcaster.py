"""
Real-time fan-out of lifecycle events to connected clients (customer tracker,
kitchen display, admin dashboard).

Delivery is best effort: nothing is persisted or replayed. Each observer has its
own bounded queue drained by the task serving its connection, so a broadcast
never waits on a slow client and every client sees events in emission order.
A client that misses events re-synchronizes with a full query.
"""
import asyncio
import logging
from typing import Any, Dict, Iterable, Optional, Set

from fastapi import WebSocket

from app.core.config import BROADCAST_QUEUE_SIZE

log = logging.getLogger(__name__)

ORDER_CREATED = "order:new"
ORDER_UPDATED = "order:update"
MENU_UPDATED = "menu:update"

EVENT_NAMES = (ORDER_CREATED, ORDER_UPDATED, MENU_UPDATED)


class Observer:
    """One connected client and its pending events."""

    def __init__(self, websocket: WebSocket, events: Optional[Iterable[str]] = None, max_queue: int = BROADCAST_QUEUE_SIZE):
        self.websocket = websocket
        self.events = frozenset(events) if events is not None else None
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=max_queue)

    def wants(self, event: str) -> bool:
        return self.events is None or event in self.events

    def offer(self, message: Dict[str, Any]) -> bool:
        """Enqueues without waiting; returns False when the queue is full."""
        try:
            self.queue.put_nowait(message)
        except asyncio.QueueFull:
            return False
        return True

    async def pump(self):
        """Sends queued events to the socket until cancelled or the send fails."""
        while True:
            message = await self.queue.get()
            try:
                await self.websocket.send_json(message)
            finally:
                self.queue.task_done()


class Broadcaster:
    """Publish/subscribe registry of the currently connected observers."""

    def __init__(self, max_queue: int = BROADCAST_QUEUE_SIZE):
        self.max_queue = max_queue
        self._observers: Set[Observer] = set()

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    @property
    def observers(self):
        return tuple(self._observers)

    async def subscribe(self, websocket: WebSocket, events: Optional[Iterable[str]] = None) -> Observer:
        """Registers the connection and accepts the WebSocket handshake."""
        observer = Observer(websocket, events, self.max_queue)
        self._observers.add(observer)
        try:
            await websocket.accept()
        except Exception:
            self._observers.discard(observer)
            raise
        log.info(f"Observer connected ({self.observer_count} total)")
        return observer

    def unsubscribe(self, observer: Observer):
        if observer in self._observers:
            self._observers.discard(observer)
            log.info(f"Observer disconnected ({self.observer_count} total)")

    def broadcast(self, event: str, payload: Any) -> int:
        """
        Queues `payload` for every observer interested in `event`.
        Returns the number of observers it was queued for; with no observers
        this is a no-op returning 0.
        """
        message = {"event": event, "data": payload}
        delivered = 0
        for observer in list(self._observers):
            if not observer.wants(event):
                continue
            if observer.offer(message):
                delivered += 1
            else:
                log.warning(f"Observer queue full, dropping {event} event for that client")
        log.debug(f"Broadcast {event} to {delivered} observer(s)")
        return delivered
