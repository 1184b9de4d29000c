"""Main FastAPI application with WebSocket endpoints."""

import asyncio
import json
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from sse_starlette.sse import EventSourceResponse

from models.canvas import build_canvas_config
from models.geometry import Size
from core.exceptions import ClientError
from core.reducer import create_reducer
from core.store import Store
from core.ticker import Ticker
from core.websocket_manager import WebSocketManager

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

TICK_INTERVAL = 0.1
HOST = "0.0.0.0"
PORT = 8000

config = build_canvas_config()
store = Store(create_reducer(config))
websocket_manager = WebSocketManager(store)
ticker = Ticker(store, TICK_INTERVAL, on_tick=websocket_manager.broadcast)


@asynccontextmanager
async def lifespan(app: FastAPI):
    ticker.start()
    yield
    await ticker.stop()


# Initialize FastAPI app
app = FastAPI(title="Swipe Cluster API", version="1.0.0", lifespan=lifespan)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify exact origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    """Root endpoint returning API information."""
    return {
        "message": "Swipe Cluster API",
        "version": "1.0.0",
        "config": config.describe(),
        "endpoints": {
            "websocket": "/ws/{client_id}?width=&height=",
            "state": "/state",
            "events": "/events"
        }
    }


@app.get("/state")
async def get_state():
    """Get the current state snapshot."""
    return {
        "state": store.get_state().to_dict(),
        "version": store.get_version(),
        "connected_clients": len(websocket_manager.connections)
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    state = store.get_state()
    return {
        "status": "healthy",
        "state_version": store.get_version(),
        "clients": len(state.clients),
        "clusters": len(state.clusters),
        "ticking": ticker.running
    }


@app.get("/events")
async def events():
    """Stream every new state snapshot as server-sent events."""
    async def event_generator():
        queue = store.subscribe()
        try:
            while True:
                state = await queue.get()
                yield {"event": "state", "data": json.dumps(state.to_dict())}
        except asyncio.CancelledError:
            pass
        finally:
            store.unsubscribe(queue)

    return EventSourceResponse(event_generator())


@app.websocket("/ws/{client_id}")
async def websocket_endpoint(websocket: WebSocket, client_id: str, width: float = 0, height: float = 0):
    """
    WebSocket endpoint for real-time communication with clients.

    Args:
        websocket: WebSocket connection
        client_id: Unique identifier for the client
        width: Screen width of the client
        height: Screen height of the client
    """
    try:
        await websocket_manager.connect(websocket, client_id, Size(width, height))

        while True:
            message = await websocket.receive_text()
            try:
                await websocket_manager.handle_message(client_id, message)
            except ClientError as e:
                logger.error(f"Rejected message from {client_id}: {str(e)}")
                await websocket.send_text(json.dumps({"type": "error", "message": str(e)}))

    except WebSocketDisconnect:
        logger.info(f"Client {client_id} disconnected")
    except Exception as e:
        logger.error(f"WebSocket error for client {client_id}: {str(e)}")
    finally:
        await websocket_manager.disconnect(client_id, websocket)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=HOST,
        port=PORT,
        reload=True,
        log_level="info"
    )
