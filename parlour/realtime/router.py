import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, WebSocket
from fastapi.websockets import WebSocketDisconnect

from parlour.api.deps import get_broadcaster
from parlour.realtime.broadcaster import ADMIN_ROOM, RealtimeBroadcaster

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


def _parse_control(raw: str) -> Optional[str]:
    """Accept either a bare event name or {"event": name}."""
    raw = raw.strip()
    if not raw.startswith("{"):
        return raw or None
    try:
        message = json.loads(raw)
    except ValueError:
        return None
    event = message.get("event") if isinstance(message, dict) else None
    return event if isinstance(event, str) else None


@router.websocket("/ws")
async def realtime_endpoint(
    websocket: WebSocket,
    broadcaster: RealtimeBroadcaster = Depends(get_broadcaster),
):
    """
    Dashboard channel. Send "join_admin" to receive attendance_update pushes,
    "leave_admin" to stop them. Each control message is acknowledged.
    """
    await websocket.accept()
    broadcaster.register(websocket)
    logger.info("Realtime client connected (%d live)", len(broadcaster.connections))
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            if message.get("text") is None:
                await websocket.send_json(
                    {"event": "error", "data": {"detail": "Control messages must be text frames"}}
                )
                continue
            event = _parse_control(message["text"])
            if event == "join_admin":
                broadcaster.join(websocket, ADMIN_ROOM)
                logger.info("Client joined %s (%d members)", ADMIN_ROOM, broadcaster.room_size(ADMIN_ROOM))
                await websocket.send_json({"event": "admin_joined"})
            elif event == "leave_admin":
                broadcaster.leave(websocket, ADMIN_ROOM)
                logger.info("Client left %s (%d members)", ADMIN_ROOM, broadcaster.room_size(ADMIN_ROOM))
                await websocket.send_json({"event": "admin_left"})
            elif event == "ping":
                await websocket.send_json({"event": "pong"})
            else:
                await websocket.send_json(
                    {"event": "error", "data": {"detail": f"Unknown event: {event!r}"}}
                )
    except WebSocketDisconnect as e:
        logger.info("Realtime client disconnected (code %s)", e.code)
    finally:
        broadcaster.on_disconnect(websocket)
