"""
Notification fan-out for realtime note events.

Every accepted realtime session registers a Connection in the hub. A
committed mutation's event is handed to ``NotificationHub.broadcast``, which
appends it to each connection's queue in one synchronous pass; a sender task
per connection drains its queue to the socket. Producers never wait on
consumers, and each session sees events in the order they were broadcast.

Broadcast is global: there is no filtering by owner, tag or
subscription.
"""

import asyncio
import logging
import uuid
from typing import Any, Dict, List, Optional

from .schemas.auth import Caller
from .schemas.events import NoteEvent
from .services.note_service import MutationOutcome

logger = logging.getLogger(__name__)


class Connection:
    """One connected realtime session."""

    def __init__(self, caller: Caller):
        self.id = uuid.uuid4().hex
        self.caller = caller
        self.queue: asyncio.Queue[Dict[str, Any]] = asyncio.Queue()

    def push(self, message: Dict[str, Any]) -> None:
        self.queue.put_nowait(message)

    async def serve(self, websocket) -> None:
        """Forward queued events until the client goes away or a send fails.

        Anything the client sends is ignored; the channel is push-only.
        Returning ends the session, so the caller can drop it from the hub.
        """
        sender = asyncio.create_task(self._send_events(websocket))
        receiver = asyncio.create_task(self._wait_for_disconnect(websocket))
        try:
            await asyncio.wait({sender, receiver}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (sender, receiver):
                task.cancel()
            # results are irrelevant here; a failed send was already logged
            await asyncio.gather(sender, receiver, return_exceptions=True)

    async def _wait_for_disconnect(self, websocket) -> None:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                return

    async def _send_events(self, websocket) -> None:
        while True:
            message = await self.queue.get()
            try:
                await websocket.send_json(message)
            except Exception as e:
                logger.info(
                    f"Stopped delivering to session {self.id}: {e}",
                    extra={"session_id": self.id, "username": self.caller.username},
                )
                return


class NotificationHub:
    """Open-connections table plus the broadcast step."""

    def __init__(self):
        self._connections: Dict[str, Connection] = {}

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    def connections(self) -> List[Connection]:
        return list(self._connections.values())

    def connect(self, caller: Caller) -> Connection:
        connection = Connection(caller)
        self._connections[connection.id] = connection
        logger.info(
            f"Realtime session {connection.id} connected for {caller.username}",
            extra={"session_id": connection.id, "active_sessions": self.connection_count},
        )
        return connection

    def disconnect(self, connection_id: str) -> Optional[Connection]:
        connection = self._connections.pop(connection_id, None)
        if connection:
            logger.info(
                f"Realtime session {connection_id} disconnected",
                extra={"session_id": connection_id, "active_sessions": self.connection_count},
            )
        return connection

    def broadcast(self, event: NoteEvent) -> int:
        """Queue the event for every connected session; returns how many got it.

        Runs after the mutation is committed and never raises, so a delivery
        problem cannot undo or fail the mutation that produced the event.
        """
        try:
            message = event.to_message()
        except Exception:
            logger.exception(f"Could not serialize {type(event).__name__}, not broadcast")
            return 0

        delivered = 0
        for connection in self.connections():
            connection.push(message)
            delivered += 1

        logger.debug(
            f"Broadcast {message.get('event')} to {delivered} sessions",
            extra={"event": message.get("event"), "sessions": delivered},
        )
        return delivered

    def dispatch(self, outcome: MutationOutcome) -> Any:
        """Broadcast a committed mutation's event and hand back its result."""
        self.broadcast(outcome.event)
        return outcome.result


# Singleton instance
_hub: Optional[NotificationHub] = None


def get_notification_hub() -> NotificationHub:
    """Get notification hub singleton."""
    global _hub
    if _hub is None:
        _hub = NotificationHub()
    return _hub
