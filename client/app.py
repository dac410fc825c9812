"""
Client application bootstrap.

`ConnectorApp` wires the API client, the store, token storage and the action
creators together. `start()` is the equivalent of the page load: when a token
was stored by an earlier session it is attached to every request and the
current user is fetched.
"""

import logging
from typing import Optional

import httpx

from client.actions import Actions
from client.api import ConnectorClient
from client.reducers import AUTH_ERROR, AppState, root_reducer
from client.storage import MemoryTokenStorage
from client.store import Action, Store

logger = logging.getLogger(__name__)


class ConnectorApp:
    """Client-side application state and behaviour"""

    def __init__(
        self,
        base_url: str = "http://localhost:5000",
        storage=None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        alert_timeout: Optional[float] = 5.0,
    ):
        self.storage = storage or MemoryTokenStorage()
        self.api = ConnectorClient(base_url=base_url, transport=transport)
        self.store = Store(root_reducer)
        self.actions = Actions(
            self.store, self.api, storage=self.storage, alert_timeout=alert_timeout
        )

    @property
    def state(self) -> AppState:
        return self.store.get_state()

    async def start(self) -> AppState:
        """Restore a stored session, if any"""
        token = self.storage.load()
        if token:
            logger.info("Restoring stored session token")
            self.api.set_auth_token(token)
            await self.actions.load_user()
        else:
            self.store.dispatch(Action(AUTH_ERROR))
        return self.state

    async def close(self):
        await self.api.close()

    async def __aenter__(self) -> "ConnectorApp":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
