from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Mapping, Optional

from ..core.enums import Collection
from .feed import ErrorCallback, SnapshotCallback, SnapshotFeed

logger = logging.getLogger(__name__)

SnapshotSource = Callable[[str], list[dict]]
ChangeMarker = Callable[[str], Any]


class PollingSubscription:
    """One daemon thread re-reading a collection until unsubscribed.

    With a ``marker`` the full read only happens when the marker value moved
    since the last successful read.
    """

    def __init__(
        self,
        *,
        name: str,
        read: Callable[[], list[dict]],
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
        interval: float,
        marker: Optional[Callable[[], Any]] = None,
    ):
        self._read = read
        self._marker = marker
        self._on_snapshot = on_snapshot
        self._on_error = on_error
        self._interval = float(interval)
        self._stopped = threading.Event()
        self._last: Optional[list[dict]] = None
        self._last_mark: Any = None
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    def start(self) -> "PollingSubscription":
        # First snapshot is read synchronously so an attached state is populated on return.
        self.poll_once()
        self._thread.start()
        return self

    @property
    def active(self) -> bool:
        return not self._stopped.is_set()

    def unsubscribe(self) -> None:
        self._stopped.set()

    def poll_once(self) -> None:
        mark = None
        try:
            if self._marker is not None:
                mark = self._marker()
                if self._last is not None and mark == self._last_mark:
                    return
            docs = self._read()
        except Exception as e:
            self._on_error(e)
            return
        if self._stopped.is_set():
            return
        self._last_mark = mark
        if self._last is None or docs != self._last:
            self._last = docs
            self._on_snapshot(list(docs))

    def _run(self) -> None:
        while not self._stopped.wait(self._interval):
            try:
                self.poll_once()
            except Exception:
                # A failing consumer callback must not kill the subscription thread.
                logger.exception("snapshot consumer failed on %s", self._thread.name)


class PollingSnapshotFeed(SnapshotFeed):
    """Snapshot feed over a store without push notifications.

    Each subscription re-reads its collection every ``interval`` seconds and
    delivers when the result differs from the last delivery (the first read
    is always delivered). Collections listed in ``markers`` are re-read only
    when their cheap change marker differs.
    """

    def __init__(
        self,
        sources: Mapping[Collection, SnapshotSource],
        *,
        markers: Optional[Mapping[Collection, ChangeMarker]] = None,
        interval: float = 2.0,
    ):
        self._sources = dict(sources)
        self._markers = dict(markers or {})
        self._interval = float(interval)

    def subscribe(
        self,
        collection: Collection,
        company_code: str,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> PollingSubscription:
        source = self._sources.get(collection)
        if source is None:
            raise ValueError(f"No snapshot source for collection {collection.value!r}")
        marker = self._markers.get(collection)

        logger.debug("subscribing to %s for company %s", collection.value, company_code)
        return PollingSubscription(
            name=f"feed-{collection.value}-{company_code}",
            read=lambda: source(company_code),
            marker=(lambda: marker(company_code)) if marker else None,
            on_snapshot=on_snapshot,
            on_error=on_error,
            interval=self._interval,
        ).start()
