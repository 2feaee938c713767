"""WebSocket connection manager and handlers for wishlist rooms"""

from typing import Dict, Set, Optional, Any
from fastapi import WebSocket, WebSocketDisconnect, APIRouter, Request, status
from sqlalchemy import select
from datetime import datetime, timezone
import logging
import uuid

from wishlist_app.core.security import SecurityUtils
from wishlist_app.core import permissions
from wishlist_app.models import Wishlist

logger = logging.getLogger(__name__)

# Create WebSocket router
router = APIRouter(tags=["websocket"])

# Events clients may relay to the other members of a room
RELAY_EVENTS = frozenset({
    "product-added",
    "product-updated",
    "product-deleted",
    "comment-added",
    "reaction-added",
})

class ConnectionManager:
    """
    Tracks open sockets and their wishlist rooms.

    Delivery is best effort: a failed send drops the socket and is never
    reported to the caller.
    """

    def __init__(self):
        # Socket owner: {websocket: user_id}
        self.connection_users: Dict[WebSocket, str] = {}
        # Room members: {room_id: {websocket}}
        self.rooms: Dict[str, Set[WebSocket]] = {}

    async def connect(self, websocket: WebSocket, user_id: str):
        """Accept new connection"""
        await websocket.accept()
        self.connection_users[websocket] = user_id

        logger.info(f"User {user_id} connected via WebSocket")

        await websocket.send_json({
            "type": "connection",
            "status": "connected",
            "timestamp": datetime.now(timezone.utc).isoformat()
        })

    def disconnect(self, websocket: WebSocket):
        """Remove connection from every room"""
        user_id = self.connection_users.pop(websocket, None)
        for room_id in list(self.rooms):
            self._discard(room_id, websocket)

        if user_id:
            logger.info(f"User {user_id} disconnected from WebSocket")

    def join_room(self, websocket: WebSocket, room_id: str):
        self.rooms.setdefault(room_id, set()).add(websocket)

    def leave_room(self, websocket: WebSocket, room_id: str):
        self._discard(room_id, websocket)

    def _discard(self, room_id: str, websocket: WebSocket):
        members = self.rooms.get(room_id)
        if members is None:
            return
        members.discard(websocket)
        if not members:
            del self.rooms[room_id]

    def room_size(self, room_id: str) -> int:
        return len(self.rooms.get(room_id, ()))

    async def broadcast_to_room(
        self,
        room_id: str,
        message: dict,
        exclude_socket: Optional[WebSocket] = None,
        exclude_user: Optional[str] = None
    ) -> int:
        """Send message to room members; returns how many sends succeeded"""
        delivered = 0
        dead = []

        for connection in list(self.rooms.get(room_id, ())):
            if connection is exclude_socket:
                continue
            if exclude_user is not None and self.connection_users.get(connection) == exclude_user:
                continue
            try:
                await connection.send_json(message)
                delivered += 1
            except Exception as e:
                logger.debug(f"Dropping socket in room {room_id}: {str(e)}")
                dead.append(connection)

        for connection in dead:
            self.disconnect(connection)

        return delivered

    async def emit(self, event: str, wishlist_id: Any, data: Any, actor_id: Optional[Any] = None) -> int:
        """Publish a mutation event to a wishlist room, skipping the actor's own sockets"""
        room_id = str(wishlist_id)
        return await self.broadcast_to_room(
            room_id,
            {
                "type": event,
                "wishlist_id": room_id,
                "data": data,
            },
            exclude_user=str(actor_id) if actor_id is not None else None
        )

def get_connection_manager(request: Request) -> ConnectionManager:
    return request.app.state.realtime

async def get_current_user_ws(
    websocket: WebSocket,
    token: Optional[str] = None
) -> Optional[str]:
    """Authenticate WebSocket connection"""
    if not token:
        token = websocket.query_params.get("token")

    if not token:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return None

    try:
        payload = SecurityUtils.decode_token(token)
        if payload.get("type") != "access":
            raise ValueError("Invalid token type")
        return str(uuid.UUID(str(payload.get("sub"))))
    except Exception:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return None

async def user_can_join(websocket: WebSocket, user_id: str, room_id: str) -> bool:
    """Room membership follows wishlist view access, checked on fresh state"""
    try:
        wishlist_id = uuid.UUID(room_id)
    except ValueError:
        return False

    async with websocket.app.state.db.session() as db:
        result = await db.execute(select(Wishlist).where(Wishlist.id == wishlist_id))
        wishlist = result.scalar_one_or_none()
        return wishlist is not None and permissions.can_view(wishlist, user_id)

@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """Main WebSocket endpoint"""
    user_id = await get_current_user_ws(websocket)
    if not user_id:
        return

    manager: ConnectionManager = websocket.app.state.realtime
    await manager.connect(websocket, user_id)

    try:
        while True:
            data = await websocket.receive_json()
            message_type = data.get("type")
            room_id = str(data.get("wishlist_id") or "")

            if message_type == "ping":
                await websocket.send_json({"type": "pong"})

            elif message_type == "join-wishlist" and room_id:
                if await user_can_join(websocket, user_id, room_id):
                    manager.join_room(websocket, room_id)
                    await websocket.send_json({"type": "joined", "wishlist_id": room_id})
                    logger.info(f"User {user_id} joined wishlist {room_id}")
                else:
                    await websocket.send_json({
                        "type": "error",
                        "wishlist_id": room_id,
                        "message": "Access denied"
                    })

            elif message_type == "leave-wishlist" and room_id:
                manager.leave_room(websocket, room_id)
                await websocket.send_json({"type": "left", "wishlist_id": room_id})

            elif message_type in RELAY_EVENTS and room_id:
                if websocket in manager.rooms.get(room_id, ()):
                    await manager.broadcast_to_room(room_id, data, exclude_socket=websocket)

    except WebSocketDisconnect:
        manager.disconnect(websocket)
    except Exception as e:
        logger.error(f"WebSocket error for user {user_id}: {str(e)}")
        manager.disconnect(websocket)
