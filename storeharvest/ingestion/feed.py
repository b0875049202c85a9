"""
Server-Sent Events feed.

Streams scrape progress messages from the scraper backend over a long-lived
HTTP response. Only the connect phase has a timeout: large catalogs may
stream for many minutes, so reads wait indefinitely.
"""

import logging
import threading
from typing import Any, Dict, Iterable, Iterator, List, Optional

import requests

from ..errors import StreamConnectionError
from ..models import SourcePlatform

logger = logging.getLogger(__name__)


def iter_sse_messages(lines: Iterable[str]) -> Iterator[str]:
    """
    Group SSE lines into message payloads.

    'data:' lines accumulate until a blank line ends the event; comment
    lines (':' heartbeats) and other fields are ignored.

    Args:
        lines: Decoded response lines without terminators

    Yields:
        Joined data of each event
    """
    data: List[str] = []
    for line in lines:
        if line is None:
            continue
        if line == '':
            if data:
                yield '\n'.join(data)
                data = []
            continue
        if line.startswith(':'):
            continue
        name, _, value = line.partition(':')
        if name == 'data':
            data.append(value[1:] if value.startswith(' ') else value)
    if data:
        yield '\n'.join(data)


class EventStreamFeed:
    """
    One scrape stream connection.

    Usage:
        feed = EventStreamFeed(url, params={"url": store_url})
        feed.open()
        for message in feed.messages():
            ...
        feed.close()
    """

    def __init__(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        session: Optional[requests.Session] = None,
        connect_timeout: float = 30,
    ):
        """
        Initialize the feed.

        Args:
            url: Stream endpoint URL
            params: Query parameters
            session: Shared requests session (created if None)
            connect_timeout: Seconds allowed to establish the connection
        """
        self.url = url
        self.params = params or {}
        self.session = session or requests.Session()
        self.connect_timeout = connect_timeout
        self._response: Optional[requests.Response] = None
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def open(self) -> None:
        """
        Connect to the stream.

        Raises:
            StreamConnectionError: On connection failure or HTTP error status
        """
        if self.closed:
            raise StreamConnectionError("Feed already closed")
        try:
            response = self.session.get(
                self.url,
                params=self.params,
                headers={'Accept': 'text/event-stream'},
                stream=True,
                timeout=(self.connect_timeout, None),
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise StreamConnectionError(f"Could not connect to {self.url}: {e}") from e
        self._response = response
        logger.debug("Stream connected: %s", self.url)

    def messages(self) -> Iterator[str]:
        """
        Yield raw message payloads until the stream ends or is closed.

        Raises:
            StreamConnectionError: If the connection drops while open
        """
        if self._response is None:
            self.open()
        lines = self._response.iter_lines(decode_unicode=True)
        try:
            for message in iter_sse_messages(lines):
                if self.closed:
                    return
                yield message
        except (requests.RequestException, OSError) as e:
            if self.closed:
                return
            raise StreamConnectionError(f"Stream interrupted: {e}") from e
        except AttributeError:
            # urllib3 drops the socket's file object when closed mid-read
            if self.closed:
                return
            raise

    def close(self) -> None:
        """Close the connection; safe to call more than once."""
        if self.closed:
            return
        self._closed.set()
        if self._response is not None:
            self._response.close()
        logger.debug("Stream closed: %s", self.url)


def feed_for_store(
    store_url: str,
    api_url: str,
    token: str = "",
    platform: SourcePlatform = SourcePlatform.SHOPIFY,
    collection_handles: Optional[List[str]] = None,
    settings: Optional[Dict[str, Any]] = None,
    session: Optional[requests.Session] = None,
) -> EventStreamFeed:
    """
    Build the scrape stream feed for a store.

    Args:
        store_url: Storefront URL to scrape
        api_url: Scraper backend base URL
        token: Access token (passed as a query parameter)
        platform: Storefront platform, selects the stream endpoint
        collection_handles: Restrict the scrape to these collections
        settings: Feed settings (paths, connect_timeout)
        session: Shared requests session

    Returns:
        Unopened EventStreamFeed
    """
    settings = settings or {}
    if platform == SourcePlatform.WOOCOMMERCE:
        path = settings.get('woocommerce_stream_path', '/api/scraper/woocommerce-stream')
        params: Dict[str, Any] = {'url': store_url, 'page': 1}
    else:
        path = settings.get('stream_path', '/api/scraper/scrape-stream')
        params = {'url': store_url, 'type': 'products', 'page': 1}

    if token:
        params['token'] = token
    if collection_handles:
        params['collectionHandle'] = ','.join(collection_handles)

    return EventStreamFeed(
        api_url.rstrip('/') + path,
        params=params,
        session=session,
        connect_timeout=settings.get('connect_timeout', 30),
    )
