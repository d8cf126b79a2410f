"""Real-time feed channel."""
import logging
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

logger = logging.getLogger(__name__)
router = APIRouter()


@router.websocket("/ws/feed")
async def feed_socket(websocket: WebSocket):
    """Push newPost / updatePost / deletePost frames; client messages of any kind are ignored."""
    broadcaster = websocket.app.state.broadcaster
    await websocket.accept()
    broadcaster.subscribe(websocket)
    try:
        await websocket.send_json({"event": "connected", "data": {"subscribers": broadcaster.subscriber_count}})
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                logger.debug("Feed socket closed by client")
                break
    except WebSocketDisconnect:
        logger.debug("Feed socket dropped before the connected frame")
    finally:
        broadcaster.unsubscribe(websocket)
