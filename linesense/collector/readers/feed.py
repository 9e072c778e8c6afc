"""Reader for the remote sensor feed (``GET /sensors``)."""

import asyncio
import logging
from typing import Any, Optional

import aiohttp

from linesense.shared.exceptions import FeedUnavailable
from linesense.shared.models import Reading
from .base import ReadingSource

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0


def parse_feed_payload(payload: Any) -> Reading:
    """Extract the latest reading from a decoded feed body.

    The feed returns a JSON array ordered oldest first, so the last element
    is the latest. A single object is accepted as well.

    Raises:
        FeedUnavailable: If the body holds no usable reading.
    """
    if isinstance(payload, list):
        if not payload:
            raise FeedUnavailable("Feed returned no readings")
        latest = payload[-1]
    else:
        latest = payload

    if not isinstance(latest, dict):
        raise FeedUnavailable(f"Unexpected feed entry: {type(latest).__name__}")

    try:
        return Reading.from_dict(latest)
    except (KeyError, ValueError, TypeError, OverflowError) as e:
        raise FeedUnavailable(f"Malformed feed entry: {e!r}") from e


class RemoteFeedReader(ReadingSource):
    """Pulls the latest reading from an HTTP JSON feed.

    One ``aiohttp.ClientSession`` is kept for the reader's lifetime and is
    released by ``close()``. Every request is bounded by ``timeout`` seconds.
    """

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.url = url
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None
        self._last_ok = True
        logger.info(f"Initialized RemoteFeedReader for {url} (timeout={timeout}s)")

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
            self._owns_session = True
        return self._session

    async def _fetch(self) -> Any:
        session = self._get_session()
        async with session.get(self.url, timeout=self.timeout) as response:
            if not 200 <= response.status < 300:
                raise FeedUnavailable(f"Feed returned HTTP {response.status}")
            return await response.json(content_type=None)

    async def get_reading(self) -> Reading:
        try:
            payload = await self._fetch()
            reading = parse_feed_payload(payload)
        except FeedUnavailable:
            self._last_ok = False
            raise
        except asyncio.TimeoutError as e:
            self._last_ok = False
            raise FeedUnavailable(f"Feed timed out after {self.timeout.total}s") from e
        except aiohttp.ClientError as e:
            self._last_ok = False
            raise FeedUnavailable(f"Feed request failed: {e}") from e
        except ValueError as e:
            # Body was not JSON
            self._last_ok = False
            raise FeedUnavailable(f"Feed body is not JSON: {e}") from e

        self._last_ok = True
        logger.debug(f"Fetched reading from {self.url}: {reading}")
        return reading

    def check_health(self) -> bool:
        return self._last_ok

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
            logger.info(f"Closed feed session for {self.url}")
        self._session = None
