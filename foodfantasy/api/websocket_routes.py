import json
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from sqlalchemy.ext.asyncio import AsyncSession

from foodfantasy.crud import admin as admin_crud
from foodfantasy.db import get_db
from foodfantasy.utils.broadcast import ADMINS_ROOM, encode, manager, user_room
from foodfantasy.utils.emails import normalize_email

log = logging.getLogger(__name__)

router = APIRouter()


async def _identify(websocket: WebSocket, data: dict, db: AsyncSession) -> None:
    email = normalize_email(data.get("email") or "")
    as_admin = data.get("type") == "admin" and email and await admin_crud.get_admin(db, email)
    # the socket stays open for hours; don't hold a pooled connection for it
    await db.close()

    if as_admin:
        manager.join(websocket, ADMINS_ROOM)
    if email:
        manager.join(websocket, user_room(email))

    role = "admin" if as_admin else "user"
    log.info("websocket identified: email=%s role=%s", email or "-", role)
    await websocket.send_text(encode("identified", {"type": role, "email": email or None}))


# 🔌 Live order and menu events; clients send {"event": "identify", ...} to join their rooms
@router.websocket("/ws")
async def websocket_events(websocket: WebSocket, db: AsyncSession = Depends(get_db)):
    await manager.connect(websocket)
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = json.loads(raw)
            except ValueError:
                await websocket.send_text(encode("error", {"message": "Messages must be JSON"}))
                continue

            event = message.get("event") if isinstance(message, dict) else None
            if event == "identify":
                data = message.get("data")
                await _identify(websocket, data if isinstance(data, dict) else {}, db)
            elif event == "ping":
                await websocket.send_text(encode("pong", {}))
            else:
                await websocket.send_text(encode("error", {"message": f"Unknown event: {event}"}))
    except WebSocketDisconnect:
        log.debug("websocket disconnected")
    finally:
        manager.disconnect(websocket)
