# routers/event_router.py

"""
Event stream over WebSocket
"""

import asyncio
import logging
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter(tags=["Events"])


async def forward_events(websocket: WebSocket, queue: asyncio.Queue):
    while True:
        event = await queue.get()
        await websocket.send_text(event.model_dump_json())


@router.websocket("/ws/events")
async def stream_events(websocket: WebSocket):
    """Push every dispatch notification to the client as JSON"""
    engine = websocket.app.state.engine
    # Subscribe before accepting so nothing published after the handshake is missed
    queue = engine.events.subscribe()
    forwarder = None

    try:
        await websocket.accept()
        logger.info("Event stream client connected")
        forwarder = asyncio.create_task(forward_events(websocket, queue))

        # Incoming messages are ignored; receiving only detects the disconnect
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info("Event stream client disconnected")
    finally:
        engine.events.unsubscribe(queue)
        if forwarder is not None:
            await stop_forwarder(forwarder)


async def stop_forwarder(forwarder: asyncio.Task):
    """Cancel the forwarding task and collect its outcome"""
    forwarder.cancel()
    await asyncio.wait([forwarder])
    if not forwarder.cancelled() and forwarder.exception() is not None:
        logger.warning(f"Event forwarding stopped with error: {forwarder.exception()}")
