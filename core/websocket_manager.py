"""WebSocket connection manager delivering client messages to the store."""

import json
import logging
from typing import Any, Dict, Optional

from fastapi import WebSocket

from models import action as actions
from models.action import Action
from models.geometry import Size
from models.state import State
from core.exceptions import ClientError, ProtocolError
from core.store import Store
from core.views import get_client_state

logger = logging.getLogger(__name__)


class WebSocketManager:
    """Manages WebSocket connections and message routing."""

    def __init__(self, store: Store):
        self.store = store
        self.connections: Dict[str, WebSocket] = {}

    async def connect(self, websocket: WebSocket, client_id: str, size: Size) -> None:
        """
        Accept a new WebSocket connection and register the client.

        Args:
            websocket: WebSocket connection
            client_id: Unique identifier for the client
            size: Screen size reported by the client
        """
        await websocket.accept()
        self.connections[client_id] = websocket
        await self.store.dispatch(actions.connect(client_id, size))
        logger.info(f"Client {client_id} connected ({size.width}x{size.height})")
        await self.broadcast()

    async def disconnect(self, client_id: str, websocket: Optional[WebSocket] = None) -> None:
        """
        Remove a client connection and its client record.

        Args:
            client_id: ID of the client to disconnect
            websocket: Connection being closed; ignored when the client has
                since reconnected on another socket
        """
        if websocket is not None and self.connections.get(client_id) not in (None, websocket):
            return
        self.connections.pop(client_id, None)
        await self.store.dispatch(actions.disconnect(client_id))
        logger.info(f"Client {client_id} disconnected")
        await self.broadcast()

    async def handle_message(self, client_id: str, message: str) -> None:
        """
        Process an incoming message from a client.

        Args:
            client_id: ID of the sending client
            message: JSON message string

        Raises:
            ClientError: If the message is malformed or rejected
        """
        try:
            data = json.loads(message)
        except json.JSONDecodeError as e:
            raise ClientError(f"Invalid JSON message: {str(e)}") from e

        action = self._create_action_from_message(client_id, data)

        try:
            await self.store.dispatch(action)
        except ProtocolError as e:
            raise ClientError(f"Failed to process message: {str(e)}") from e

        await self.broadcast()

    def _create_action_from_message(self, client_id: str, data: Any) -> Action:
        """Create an action from a client message."""
        if not isinstance(data, dict):
            raise ClientError("Messages must be JSON objects")

        message_type = data.get('type')
        try:
            if message_type == 'swipe':
                return actions.swipe(client_id, data['direction'], data['position'])
            elif message_type == 'event':
                return actions.client_action(client_id, data['event'], data.get('data'))
            elif message_type == 'leave':
                return actions.leave_cluster(client_id)
        except KeyError as e:
            raise ClientError(f"Malformed {message_type} message: missing {str(e)}") from e
        except (TypeError, ValueError) as e:
            raise ClientError(f"Malformed {message_type} message: {str(e)}") from e

        raise ClientError(f"Unknown message type: {message_type}")

    async def broadcast(self, state: Optional[State] = None) -> None:
        """Send every connected client its own view of the state."""
        if state is None:
            state = self.store.get_state()
        version = self.store.get_version()

        for client_id, websocket in list(self.connections.items()):
            message = {'type': 'state', 'version': version}
            message.update(get_client_state(state, client_id).to_dict())
            try:
                await websocket.send_text(json.dumps(message))
            except Exception as e:
                logger.error(f"Failed to send message to {client_id}: {str(e)}")
