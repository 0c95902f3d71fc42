"""Realtime channel: push note events to connected WebSocket sessions."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, WebSocket, status

from ..core.logging import get_logger
from ..core.notifications import NotificationHub, get_notification_hub
from ..security import AuthFailure, authenticate

router = APIRouter(tags=["realtime"])

logger = get_logger("realtime")


@router.websocket("/ws")
async def realtime_events(
    websocket: WebSocket,
    token: Optional[str] = Query(None, description="Access token, if not sent as a header"),
    hub: NotificationHub = Depends(get_notification_hub),
):
    """Stream noteAdded/noteUpdated/noteDeleted events.

    The credential is checked before the handshake completes; a bad one
    closes the socket with 1008 and the session never joins the hub.
    """
    result = await authenticate(token or websocket.headers.get("authorization"))
    if isinstance(result, AuthFailure):
        logger.info(
            "Refused realtime session",
            extra={"reason": result.reason, "client": str(websocket.client)},
        )
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    # join before accepting so nothing produced after the handshake is missed
    connection = hub.connect(result)
    try:
        await websocket.accept()
        await connection.serve(websocket)
    finally:
        hub.disconnect(connection.id)
