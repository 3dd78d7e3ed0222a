"""In-process WebSocket hub used as the live notification channel."""

import logging
from collections import defaultdict
from typing import Any
from uuid import UUID

from fastapi import Request, WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    """
    Tracks open sockets per user and pushes JSON events to them.

    A user may have several sockets open (phone and browser); every one
    receives the event.
    """

    def __init__(self) -> None:
        self._connections: dict[UUID, set[WebSocket]] = defaultdict(set)

    async def connect(self, user_id: UUID, websocket: WebSocket) -> None:
        await websocket.accept()
        self._connections[user_id].add(websocket)
        logger.info("WebSocket connected for user %s (%d open)", user_id, len(self._connections[user_id]))

    def disconnect(self, user_id: UUID, websocket: WebSocket) -> None:
        sockets = self._connections.get(user_id)
        if not sockets:
            return
        sockets.discard(websocket)
        if not sockets:
            del self._connections[user_id]
        logger.info("WebSocket disconnected for user %s", user_id)

    def is_connected(self, user_id: UUID) -> bool:
        return bool(self._connections.get(user_id))

    async def notify(self, user_id: UUID, payload: dict[str, Any]) -> None:
        for websocket in list(self._connections.get(user_id, ())):
            try:
                await websocket.send_json(payload)
            except (RuntimeError, OSError):
                logger.warning("Dropping dead WebSocket for user %s", user_id)
                self.disconnect(user_id, websocket)


def get_notifier(request: Request) -> ConnectionManager:
    return request.app.state.notifier
