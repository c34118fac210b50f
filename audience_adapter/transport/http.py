import logging
from typing import Optional

import httpx

from audience_adapter.adapter.config import TransportConfig, config

logger = logging.getLogger(__name__)


class HttpTransport:
    """
    Thin async GET client for the bidding endpoint.
    One call per auction round, no retries.
    """

    def __init__(self, conf: TransportConfig = config.transport, client: Optional[httpx.AsyncClient] = None):
        self.conf = conf
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=conf.timeout_s,
            headers={"User-Agent": conf.user_agent},
        )

    async def get(self, url: str) -> str:
        """
        Issue the GET and return the body text.

        Raises:
            httpx.HTTPError: on transport failure or a non-2xx status.
        """
        logger.debug(f"GET {url}")
        response = await self._client.get(url)
        response.raise_for_status()
        return response.text

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
