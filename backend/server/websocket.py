"""WebSocket channel that keeps browser boards in step with the server.

Clients get a full `board_snapshot` on connect and after every change, so a
UI never has to re-fetch `GET /api/board` to redraw. Sending `resync` asks for
a fresh snapshot; anything else is ignored.
"""

import asyncio
import json
import logging
from typing import Any, Callable

from fastapi import WebSocket, WebSocketDisconnect

from hiring_board.board import PipelineBoard
from hiring_board.notifications import Notification

logger = logging.getLogger(__name__)

# Connected browser boards
_clients: set[WebSocket] = set()


def _message(event: str, data: dict[str, Any]) -> str:
    return json.dumps({"event": event, "data": data})


async def websocket_endpoint(websocket: WebSocket, snapshot: Callable[[], dict]):
    """Register a board client and answer its resync requests."""
    await websocket.accept()
    _clients.add(websocket)
    try:
        await websocket.send_text(_message("board_snapshot", snapshot()))
        while True:
            if (await websocket.receive_text()).strip() == "resync":
                await websocket.send_text(_message("board_snapshot", snapshot()))
    except WebSocketDisconnect:
        logger.debug("Board client disconnected")
    finally:
        _clients.discard(websocket)


async def _send_all(message: str):
    for client in list(_clients):
        try:
            await client.send_text(message)
        except Exception:
            logger.debug("Dropping disconnected board client")
            _clients.discard(client)


def broadcast(event: str, data: dict[str, Any]):
    """Send one event to every board client. Safe to call from sync route handlers."""
    if not _clients:
        return
    message = _message(event, data)
    try:
        asyncio.get_running_loop().create_task(_send_all(message))
    except RuntimeError:
        asyncio.run(_send_all(message))


def publish_board(board: PipelineBoard):
    """Push the board as it stands now. The snapshot is only built when someone listens."""
    if _clients:
        broadcast("board_snapshot", board.snapshot())


def publish_notification(notification: Notification):
    """Push a new toast."""
    broadcast("notification", notification.model_dump(mode="json"))
