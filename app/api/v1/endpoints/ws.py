"""WebSocket channel for live notifications."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import user_id_from_token
from app.database import get_db
from app.services import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["realtime"])


@router.websocket("/notifications")
async def notifications_socket(
    websocket: WebSocket,
    db: Annotated[AsyncSession, Depends(get_db)],
    token: str = Query(""),
) -> None:
    """
    Push channel for notification events.

    Connect with ``?token=<access token>``. The server only sends; anything
    the client sends is ignored.
    """
    user_id = user_id_from_token(token) if token else None
    if user_id is not None:
        user = await user_service.get_user_by_id(db, user_id)
        if user is None or user.status != "active":
            user_id = None

    if user_id is None:
        logger.info("Rejected WebSocket connection with invalid token")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    manager = websocket.app.state.notifier
    await manager.connect(user_id, websocket)
    await user_service.set_online(db, user_id, True)

    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        manager.disconnect(user_id, websocket)
        if not manager.is_connected(user_id):
            await user_service.set_online(db, user_id, False)
