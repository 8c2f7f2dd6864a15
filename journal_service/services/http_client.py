"""
Pooled httpx client for the inference API.

Both models are called on every write, always against the same host, so
the service keeps one AsyncClient (and its keep-alive connections) for the
life of the process. main.py starts it in the lifespan and closes it on
shutdown.
"""

import logging
from typing import Optional

import httpx

logger = logging.getLogger("Journal.HTTP")


class HTTPClientManager:
    """
    Lazily created, explicitly closed ``httpx.AsyncClient``.

    ``transport`` replaces the network layer, e.g. ``httpx.MockTransport``
    in tests.
    """

    def __init__(
        self,
        max_connections: int = 20,
        max_keepalive_connections: int = 10,
        default_timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.limits = httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_keepalive_connections,
        )
        self.timeout = httpx.Timeout(default_timeout)
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def is_initialized(self) -> bool:
        return self._client is not None

    async def startup(self) -> None:
        if self.is_initialized:
            return
        self._client = httpx.AsyncClient(
            limits=self.limits,
            timeout=self.timeout,
            transport=self._transport,
        )
        logger.info(
            "Inference HTTP client ready",
            extra={
                "max_connections": self.limits.max_connections,
                "timeout_seconds": self.timeout.read,
            },
        )

    async def shutdown(self) -> None:
        if not self.is_initialized:
            return
        client, self._client = self._client, None
        await client.aclose()
        logger.info("Inference HTTP client closed")

    async def get_client(self) -> httpx.AsyncClient:
        if not self.is_initialized:
            # Scripts and tests may skip the lifespan hook
            logger.warning("Inference HTTP client used before startup, starting it now")
            await self.startup()
        return self._client
