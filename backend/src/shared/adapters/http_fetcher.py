"""
HTTP fetcher - Bounded remote downloads over httpx.

Every fetch has a timeout and a maximum body size. Both limits, and any
transport or status failure, surface as UpstreamError. A 404 raises the
UpstreamNotFoundError subclass so the repository adapter can try its next
branch name.

Usage:
======
    fetcher = HttpFetcher()
    resource = await fetcher.fetch(url, timeout=30, max_bytes=5 * MEGABYTE)
    html = resource.text
"""

from dataclasses import dataclass
from typing import Optional

import httpx

from src.config.settings import settings
from src.shared.core.exceptions import UpstreamError, UpstreamNotFoundError
from src.shared.core.logging import logger


@dataclass(frozen=True)
class FetchedResource:
    """Body of a successful fetch plus the URL it finally came from."""

    url: str
    content: bytes
    content_type: str = ""

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")


class HttpFetcher:
    """
    Adapter for outbound HTTP GETs.

    Pass a client to share a connection pool or to plug in a mock
    transport; otherwise each fetch opens and closes its own client.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        user_agent: Optional[str] = None,
    ) -> None:
        self._client = client
        self.user_agent = user_agent or settings.HTTP_USER_AGENT

    async def fetch(self, url: str, *, timeout: float, max_bytes: int) -> FetchedResource:
        """
        Download `url` into memory.

        Raises:
            UpstreamNotFoundError: Remote answered 404
            UpstreamError: Timeout, transport failure, other error status,
                or a body larger than max_bytes
        """
        if self._client is not None:
            return await self._fetch_with(self._client, url, timeout, max_bytes)
        async with httpx.AsyncClient(follow_redirects=True) as client:
            return await self._fetch_with(client, url, timeout, max_bytes)

    async def _fetch_with(
        self,
        client: httpx.AsyncClient,
        url: str,
        timeout: float,
        max_bytes: int,
    ) -> FetchedResource:
        headers = {"User-Agent": self.user_agent}
        try:
            async with client.stream(
                "GET",
                url,
                headers=headers,
                timeout=timeout,
                follow_redirects=True,
            ) as response:
                if response.status_code == 404:
                    raise UpstreamNotFoundError(url)
                if response.status_code >= 400:
                    raise UpstreamError(
                        f"Remote returned HTTP {response.status_code}",
                        url=url,
                    )

                declared = response.headers.get("content-length")
                if declared and declared.isdigit() and int(declared) > max_bytes:
                    raise UpstreamError(
                        f"Remote response too large ({declared} bytes, limit {max_bytes})",
                        url=url,
                    )

                body = bytearray()
                async for chunk in response.aiter_bytes():
                    body.extend(chunk)
                    if len(body) > max_bytes:
                        raise UpstreamError(
                            f"Remote response exceeded {max_bytes} bytes",
                            url=url,
                        )

                return FetchedResource(
                    url=str(response.url),
                    content=bytes(body),
                    content_type=response.headers.get("content-type", ""),
                )
        except httpx.TimeoutException as e:
            logger.warning("Upstream fetch timed out", url=url, timeout=timeout)
            raise UpstreamError(f"Remote request timed out after {timeout}s", url=url) from e
        except httpx.HTTPError as e:
            logger.warning("Upstream fetch failed", url=url, error=str(e))
            raise UpstreamError(f"Remote request failed: {e}", url=url) from e
