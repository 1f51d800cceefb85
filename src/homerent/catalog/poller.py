"""Background catalog refresh.

Every fetch (timer tick or user refresh) takes a ticket from a monotonic
counter before it starts. A result is applied only if its ticket is newer than
the one already applied, so a slow early response can never overwrite a
faster later one.
"""

import itertools
import threading
from typing import Callable, List, Optional

from ..config.settings import CATALOG_POLL_SECONDS
from ..utils.logging import get_logger
from .client import GENERIC_ERROR_MESSAGE, ApiError

logger = get_logger(__name__)


class CatalogSnapshot:
    """Latest applied catalog plus the ticket that produced it."""

    def __init__(self):
        self._lock = threading.Lock()
        self._tickets = itertools.count(1)
        self._appliances: List[dict] = []
        self._sequence = 0
        self._error: Optional[str] = None

    def next_ticket(self) -> int:
        with self._lock:
            return next(self._tickets)

    def apply(self, ticket: int, appliances: List[dict]) -> bool:
        """Store ``appliances`` unless a newer ticket was already applied."""
        with self._lock:
            if ticket <= self._sequence:
                logger.debug("Discarding stale catalog response #%d (have #%d)", ticket, self._sequence)
                return False
            self._sequence = ticket
            self._appliances = list(appliances)
            self._error = None
            return True

    def fail(self, ticket: int, message: str) -> None:
        with self._lock:
            if ticket > self._sequence:
                self._error = message

    @property
    def appliances(self) -> List[dict]:
        with self._lock:
            return list(self._appliances)

    @property
    def sequence(self) -> int:
        with self._lock:
            return self._sequence

    @property
    def error(self) -> Optional[str]:
        with self._lock:
            return self._error


class CatalogPoller:
    def __init__(
        self,
        client,
        interval: float = CATALOG_POLL_SECONDS,
        on_update: Optional[Callable[[List[dict]], None]] = None,
    ):
        self.client = client
        self.interval = interval
        self.on_update = on_update
        self.snapshot = CatalogSnapshot()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def refresh(self) -> bool:
        """Fetch now; returns True when the result became the current catalog."""
        ticket = self.snapshot.next_ticket()
        try:
            appliances = self.client.fetch_appliances()
        except ApiError as exc:
            logger.warning("Catalog refresh #%d failed: %s", ticket, exc.message)
            self.snapshot.fail(ticket, exc.message)
            return False
        applied = self.snapshot.apply(ticket, appliances)
        if applied and self.on_update is not None:
            self.on_update(self.snapshot.appliances)
        return applied

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                self.refresh()
            except Exception:
                # one bad tick must not end polling
                logger.exception("Catalog refresh crashed")
                self.snapshot.fail(self.snapshot.next_ticket(), GENERIC_ERROR_MESSAGE)
            self._stop.wait(self.interval)

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="catalog-poller", daemon=True)
        self._thread.start()
        logger.info("Catalog polling every %.1fs", self.interval)

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
