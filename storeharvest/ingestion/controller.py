"""
Ingestion Controller

Drives a ScrapeSession from a stream of scrape events.

Features:
- Live working set, de-duplicated by product id (latest batch wins)
- Indeterminate progress while streaming, definite only when finished
- Partial results kept on error, cancellation and dropped connections
- Stop/reset close the feed before touching state, so late events from a
  torn-down stream are dropped instead of resurrecting a cleared session
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from typing import Callable, List, Optional, Protocol

from ..errors import MalformedEventPayload, StreamConnectionError, StreamPartialFailure
from ..models import CanonicalProduct, RawProduct, ScrapeSession, SessionState, SourcePlatform
from ..normalize import build_catalog
from .events import COMPLETION_STATUSES, PROGRESS_STATUSES, EventStatus, StreamEvent, parse_event

logger = logging.getLogger(__name__)

CONNECTION_ERROR_MESSAGE = "Connection error. Please check your store URL and try again."
MISSING_URL_MESSAGE = "Please enter a store URL"
INITIAL_PROGRESS = 5


class Feed(Protocol):
    def open(self) -> None: ...

    def messages(self): ...

    def close(self) -> None: ...


class IngestionController:
    """
    Owns one scrape session at a time.

    Usage:
        controller = IngestionController()
        controller.start(store_url, feed)
        session = controller.run()          # blocks until a terminal state
        products = controller.canonical_products()

    stop() and reset() may be called from another thread while run() is
    consuming the feed.
    """

    def __init__(self, on_started: Optional[Callable[[str], None]] = None):
        """
        Initialize the controller.

        Args:
            on_started: Called with the store URL once the backend reports
                'starting' (e.g. to load the store's collections)
        """
        self.on_started = on_started
        self.session = ScrapeSession()
        self._lock = threading.RLock()
        self._feed: Optional[Feed] = None
        self._generation = 0
        self._platform: Optional[SourcePlatform] = None

    @property
    def generation(self) -> int:
        return self._generation

    # ── Session lifecycle ─────────────────────────────────────────────────────

    def start(
        self,
        store_url: str,
        feed: Feed,
        platform: Optional[SourcePlatform] = None,
    ) -> int:
        """
        Begin a new scrape, tearing down any previous one first.

        Args:
            store_url: Storefront being scraped
            feed: Unopened event feed for this scrape
            platform: Origin platform of the products (detected if None)

        Returns:
            Generation number identifying this scrape's events
        """
        with self._lock:
            self._close_feed()
            self._generation += 1
            self._platform = platform

            store_url = (store_url or '').strip()
            if not store_url:
                self.session = ScrapeSession(
                    state=SessionState.ERROR,
                    error_message=MISSING_URL_MESSAGE,
                )
                logger.warning("Scrape not started: no store URL")
                return self._generation

            self.session = ScrapeSession(
                store_url=store_url,
                state=SessionState.CONNECTING,
                progress_percent=INITIAL_PROGRESS,
            )
            self._feed = feed
            logger.info("Scrape started: %s", store_url)
            return self._generation

    def stop(self) -> bool:
        """
        Cancel the running scrape, keeping products collected so far.

        Returns:
            True if a running scrape was cancelled
        """
        with self._lock:
            if not self.session.is_active:
                return False
            self._close_feed()
            self._generation += 1
            self.session.state = SessionState.CANCELLED
            self.session.progress_percent = None
            logger.info("Scrape cancelled with %d products", len(self.session.working_set))
            return True

    def reset(self) -> None:
        """Close any feed, then discard the session."""
        with self._lock:
            self._close_feed()
            self._generation += 1
            self.session = ScrapeSession()

    def _close_feed(self) -> None:
        if self._feed is not None:
            self._feed.close()
            self._feed = None

    # ── Event handling ────────────────────────────────────────────────────────

    def _accepts(self, generation: Optional[int]) -> bool:
        if generation is not None and generation != self._generation:
            logger.debug("Dropping event from stream generation %d", generation)
            return False
        return self.session.is_active

    def handle_message(self, text: str, generation: Optional[int] = None) -> None:
        """
        Apply one raw stream message.

        Args:
            text: Message data
            generation: Generation the message belongs to (None = current)
        """
        try:
            event = parse_event(text)
        except MalformedEventPayload as e:
            logger.warning("Skipping malformed stream message: %s", e)
            return
        self.handle_event(event, generation=generation)

    def handle_event(self, event: StreamEvent, generation: Optional[int] = None) -> None:
        """
        Apply one decoded stream event.

        Args:
            event: Decoded event
            generation: Generation the event belongs to (None = current)
        """
        with self._lock:
            if not self._accepts(generation):
                return
            started = self._apply(event)
            store_url = self.session.store_url

        if started and self.on_started is not None:
            self.on_started(store_url)

    def _apply(self, event: StreamEvent) -> bool:
        session = self.session

        if event.status in PROGRESS_STATUSES:
            session.state = SessionState.STREAMING
            session.progress_percent = None
            if event.count is not None:
                session.cumulative_count = event.count
            if event.status == EventStatus.STARTING:
                session.error_message = ''
                return True
            if event.status == EventStatus.RATE_LIMITED:
                logger.info("Store is rate limiting the scrape, waiting")

        elif event.status == EventStatus.BATCH:
            session.state = SessionState.STREAMING
            session.progress_percent = None
            self._merge(event.products)
            if event.count is not None:
                session.cumulative_count = event.count
            else:
                session.cumulative_count += len(event.products)
            logger.debug("Batch of %d products, working set %d",
                         len(event.products), len(session.working_set))

        elif event.status in COMPLETION_STATUSES:
            session.state = SessionState.COMPLETING
            self._close_feed()
            total = next(
                (n for n in (event.count, event.total) if n),
                session.cumulative_count,
            )
            session.cumulative_count = total
            session.success_message = f"Scraping completed. Total products: {total}"
            session.progress_percent = 100
            session.state = SessionState.DONE
            logger.info("Scrape complete: %d products", len(session.working_set))

        elif event.status == EventStatus.ERROR:
            self._close_feed()
            session.state = SessionState.ERROR
            session.error_message = event.message or "Scraping failed"
            session.progress_percent = None
            logger.error("Scrape failed: %s", session.error_message)

        return False

    def _merge(self, payloads: List[dict]) -> None:
        """
        Merge a batch into the working set.

        The newest batch goes first, ids already present move to the new
        batch's position and take its data. The dict is rebuilt rather than
        mutated so earlier snapshots are unaffected.
        """
        incoming = {}
        for payload in payloads:
            try:
                raw = RawProduct.from_payload(payload, platform=self._platform)
            except ValueError as e:
                logger.warning("Skipping product: %s", e)
                continue
            incoming[raw.id] = raw

        merged = dict(incoming)
        for product_id, raw in self.session.working_set.items():
            merged.setdefault(product_id, raw)
        self.session.working_set = merged

    def handle_transport_error(self, error: Exception, generation: Optional[int] = None) -> None:
        """
        React to the feed failing or ending before completion.

        With no products collected this is a user-facing error. Once data
        has arrived the failure is logged only and the partial working set
        stays usable.

        Args:
            error: Transport failure
            generation: Generation of the failed feed (None = current)
        """
        with self._lock:
            if not self._accepts(generation):
                return
            self._close_feed()
            session = self.session
            session.progress_percent = None

            if not session.working_set:
                session.state = SessionState.ERROR
                session.error_message = CONNECTION_ERROR_MESSAGE
                logger.error("Stream connection failed: %s", error)
                return

            partial = StreamPartialFailure(
                f"Stream ended after {len(session.working_set)} products: {error}"
            )
            logger.warning("%s", partial)
            session.partial = True
            session.state = SessionState.DONE

    # ── Driving a feed ────────────────────────────────────────────────────────

    def run(self) -> ScrapeSession:
        """
        Consume the current feed until the session reaches a terminal state.

        Returns:
            The session as left by the feed
        """
        with self._lock:
            feed = self._feed
            generation = self._generation
        if feed is None:
            return self.session

        try:
            feed.open()
            for message in feed.messages():
                self.handle_message(message, generation=generation)
                if generation != self._generation or not self.session.is_active:
                    break
            else:
                self.handle_transport_error(
                    StreamConnectionError("Stream ended before completion"),
                    generation=generation,
                )
        except StreamConnectionError as e:
            self.handle_transport_error(e, generation=generation)

        return self.session

    def scrape(
        self,
        store_url: str,
        feed: Feed,
        platform: Optional[SourcePlatform] = None,
    ) -> ScrapeSession:
        """Start a scrape and run it to completion."""
        self.start(store_url, feed, platform=platform)
        return self.run()

    # ── Reading ───────────────────────────────────────────────────────────────

    def products(self) -> List[RawProduct]:
        """Working set snapshot in display order (newest batch first)."""
        with self._lock:
            return self.session.products()

    def canonical_products(self) -> List[CanonicalProduct]:
        return build_catalog(self.products())

    def snapshot(self) -> ScrapeSession:
        """Copy of the session safe to read while streaming continues."""
        with self._lock:
            return dataclasses.replace(self.session, working_set=dict(self.session.working_set))
