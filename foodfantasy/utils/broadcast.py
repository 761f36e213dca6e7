import json
import logging
from typing import Any, Dict, Iterable, Set

from fastapi import WebSocket
from fastapi.encoders import jsonable_encoder

from foodfantasy.schemas.order import OrderRead
from foodfantasy.utils.emails import normalize_email

log = logging.getLogger(__name__)

ADMINS_ROOM = "admins"


def user_room(email: str) -> str:
    return f"user:{normalize_email(email)}"


class ConnectionManager:
    """Live websocket clients of this process, grouped into named rooms."""

    def __init__(self):
        self.active_connections: Set[WebSocket] = set()
        self.rooms: Dict[str, Set[WebSocket]] = {}

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self.active_connections.add(websocket)

    def join(self, websocket: WebSocket, room: str):
        self.rooms.setdefault(room, set()).add(websocket)

    def disconnect(self, websocket: WebSocket):
        self.active_connections.discard(websocket)
        for room in list(self.rooms):
            members = self.rooms[room]
            members.discard(websocket)
            if not members:
                del self.rooms[room]

    async def _send(self, targets: Iterable[WebSocket], message: str) -> int:
        delivered = 0
        for conn in list(targets):
            try:
                await conn.send_text(message)
                delivered += 1
            except Exception as e:
                # a closed socket is dropped; the others still get the event
                log.warning("websocket send failed, dropping client: %r", e)
                self.disconnect(conn)
        return delivered

    async def broadcast(self, event: str, data: Any) -> int:
        return await self._send(self.active_connections, encode(event, data))

    async def to_rooms(self, rooms: Iterable[str], event: str, data: Any) -> int:
        targets: Set[WebSocket] = set()
        for room in rooms:
            targets |= self.rooms.get(room, set())
        return await self._send(targets, encode(event, data))


def encode(event: str, data: Any) -> str:
    return json.dumps({"event": event, "data": jsonable_encoder(data, by_alias=True)})


manager = ConnectionManager()


async def broadcast_order_event(event: str, order) -> None:
    """Sends an order to the admins and to the customer who placed it."""
    rooms = [ADMINS_ROOM]
    if order.user_email:
        rooms.append(user_room(order.user_email))
    await manager.to_rooms(rooms, event, OrderRead.model_validate(order))


async def broadcast_food_event(event: str, data: Any) -> None:
    await manager.broadcast(event, data)
