import logging
from fastapi import APIRouter, WebSocket
from starlette.websockets import WebSocketDisconnect

router = APIRouter()
logger = logging.getLogger("uvicorn.error")

@router.websocket("/ws/presence")
async def ws_presence(ws: WebSocket):
    """
    WebSocket endpoint for account presence updates.

    Message flow:
    1. Client connects; server subscribes it to the presence channel
    2. Server sends: {"type": "ready"}
    3. Server pushes {"event": "userStatus", "data": {"userId", "status"}}
       whenever an account logs in ("active") or out ("inactive")

    Incoming client messages are ignored; the subscription ends with the
    connection.
    """
    channel = ws.app.state.presence
    await ws.accept()
    channel.subscribe(ws)
    logger.info("[ws_presence] connected (%d subscribers)", channel.subscriber_count)
    try:
        await ws.send_json({"type": "ready"})
        while True:
            await ws.receive_text()
    except WebSocketDisconnect:
        logger.info("[ws_presence] disconnected")
    finally:
        channel.unsubscribe(ws)
