import asyncio
import logging
from typing import Optional
from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status
from app.events.broadcaster import EVENT_NAMES

log = logging.getLogger("uvicorn")

router = APIRouter()


async def _drain_incoming(websocket: WebSocket):
    # Clients only listen; reading is how a disconnect is noticed
    while True:
        await websocket.receive_text()


@router.websocket("/ws")
async def events_endpoint(websocket: WebSocket, events: Optional[str] = None):
    """
    Event stream for kitchen, admin and customer clients. Every message is
    {"event": "order:new" | "order:update" | "menu:update", "data": ...}.
    `?events=order:new,order:update` limits the stream to those names; a filter
    naming no known event is refused with close code 1008.
    """
    broadcaster = websocket.app.state.broadcaster
    wanted = [e.strip() for e in events.split(",") if e.strip() in EVENT_NAMES] if events else None
    if wanted == []:
        log.warning(f"Event stream refused, no known event in filter: {events}")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    observer = await broadcaster.subscribe(websocket, wanted)
    tasks = [asyncio.create_task(observer.pump()), asyncio.create_task(_drain_incoming(websocket))]
    try:
        done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        for task in done:
            exc = task.exception()
            if exc and not isinstance(exc, WebSocketDisconnect):
                log.warning(f"Event stream closed after error: {exc}")
    finally:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        broadcaster.unsubscribe(observer)
