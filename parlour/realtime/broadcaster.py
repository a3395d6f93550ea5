"""Room-scoped, best-effort fan-out of events to websocket connections."""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Protocol, Set

logger = logging.getLogger(__name__)

ADMIN_ROOM = "admin_room"
ATTENDANCE_UPDATE = "attendance_update"
DEFAULT_SEND_TIMEOUT = 5.0


class Connection(Protocol):
    async def send_json(self, data: Any) -> None: ...


class RealtimeBroadcaster:
    """
    Live connection registry with named rooms.

    Membership lives only as long as the connection. All mutations are plain
    synchronous set operations on the event loop; broadcast iterates over a
    snapshot, so joins and leaves during delivery never affect an in-flight send.
    """

    def __init__(self, send_timeout: Optional[float] = DEFAULT_SEND_TIMEOUT) -> None:
        # Seconds allowed for one send; None waits forever
        self.send_timeout = send_timeout
        self.connections: Set[Connection] = set()
        self.rooms: Dict[str, Set[Connection]] = {}

    def register(self, connection: Connection) -> None:
        self.connections.add(connection)

    def join(self, connection: Connection, room: str = ADMIN_ROOM) -> None:
        """Add connection to room. Joining twice is the same as joining once."""
        self.connections.add(connection)
        self.rooms.setdefault(room, set()).add(connection)

    def leave(self, connection: Connection, room: str = ADMIN_ROOM) -> None:
        """Remove connection from room. No-op for non-members."""
        members = self.rooms.get(room)
        if not members:
            return
        members.discard(connection)
        if not members:
            self.rooms.pop(room, None)

    def on_disconnect(self, connection: Connection) -> None:
        for room in list(self.rooms):
            self.leave(connection, room)
        self.connections.discard(connection)

    def is_member(self, connection: Connection, room: str = ADMIN_ROOM) -> bool:
        return connection in self.rooms.get(room, ())

    def room_size(self, room: str = ADMIN_ROOM) -> int:
        return len(self.rooms.get(room, ()))

    async def broadcast(self, room: str, event: str, payload: Any) -> int:
        """
        Send {"event": event, "data": payload} to every current member of room.

        Returns the number of successful deliveries. A connection whose send fails
        or does not finish within send_timeout is dropped; delivery to the others
        continues.
        """
        members: List[Connection] = list(self.rooms.get(room, ()))
        if not members:
            return 0

        message = {"event": event, "data": payload}
        results = await asyncio.gather(
            *(asyncio.wait_for(conn.send_json(message), self.send_timeout) for conn in members),
            return_exceptions=True,
        )

        delivered = 0
        for conn, result in zip(members, results):
            if isinstance(result, Exception):
                logger.warning("Dropping connection after failed %s delivery: %r", event, result)
                self.on_disconnect(conn)
            else:
                delivered += 1
        return delivered
