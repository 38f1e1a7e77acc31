"""In-memory mirror of one company's documents, kept current by a snapshot feed."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from ..companies.model import Company
from ..core.enums import Collection
from ..core.exceptions import ValidationError
from ..employees.model import Employee
from ..records.derivation import sort_by_timestamp_desc
from ..records.model import PointRecord
from .feed import SnapshotFeed, Subscription

logger = logging.getLogger(__name__)

Listener = Callable[[Collection], None]

_SCOPED = (Collection.COMPANIES, Collection.EMPLOYEES, Collection.RECORDS)


class CompanyLiveState:
    """Three independent slices (company, employees, records) for one company code.

    Every delivery replaces the slice it owns by reference; readers always see
    a complete old or a complete new snapshot, never a mix within one slice.
    """

    def __init__(self, feed: SnapshotFeed):
        self._feed = feed
        self._lock = threading.Lock()
        self._company_code: Optional[str] = None
        self._generation = 0
        self._subscriptions: list[Subscription] = []
        self._listeners: list[Listener] = []

        self._company: Optional[Company] = None
        self._employees: tuple[Employee, ...] = ()
        self._records: tuple[PointRecord, ...] = ()

    # ---- accessors -------------------------------------------------------

    @property
    def company_code(self) -> Optional[str]:
        return self._company_code

    @property
    def is_attached(self) -> bool:
        return self._company_code is not None

    @property
    def company(self) -> Optional[Company]:
        return self._company

    @property
    def employees(self) -> tuple[Employee, ...]:
        return self._employees

    @property
    def records(self) -> tuple[PointRecord, ...]:
        return self._records

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    # ---- lifecycle -------------------------------------------------------

    def attach(self, company_code: str) -> None:
        code = (company_code or "").strip()
        if not code:
            raise ValidationError("Código da empresa é obrigatório")

        with self._lock:
            if self._company_code == code:
                return
            self._teardown()
            self._company_code = code
            self._generation += 1
            generation = self._generation

        subs = [
            self._feed.subscribe(
                collection,
                code,
                self._snapshot_handler(collection, generation),
                self._error_handler(collection, generation),
            )
            for collection in _SCOPED
        ]
        with self._lock:
            if generation == self._generation:
                self._subscriptions = subs
                return
        # Detached or re-attached while subscribing.
        for sub in subs:
            sub.unsubscribe()

    def detach(self) -> None:
        with self._lock:
            self._teardown()
            self._company_code = None
            self._generation += 1

    def _teardown(self) -> None:
        for sub in self._subscriptions:
            sub.unsubscribe()
        self._subscriptions = []
        self._company = None
        self._employees = ()
        self._records = ()

    # ---- deliveries ------------------------------------------------------

    def _snapshot_handler(self, collection: Collection, generation: int):
        def on_snapshot(docs: list[dict]) -> None:
            if generation != self._generation:
                return
            self._apply(collection, docs)
            for listener in list(self._listeners):
                listener(collection)

        return on_snapshot

    def _error_handler(self, collection: Collection, generation: int):
        def on_error(error: Exception) -> None:
            if generation != self._generation:
                return
            logger.warning(
                "sync error on %s for company %s, keeping previous snapshot: %s",
                collection.value,
                self._company_code,
                error,
            )

        return on_error

    def _apply(self, collection: Collection, docs: list[dict]) -> None:
        code = self._company_code
        if collection == Collection.COMPANIES:
            matches = [d for d in docs if str(d.get("id") or d.get("accessCode") or "") == code]
            if not matches:
                self._company = None
                return
            try:
                self._company = Company.from_document(matches[0])
            except (TypeError, ValueError) as e:
                logger.warning("keeping previous company %s, unreadable document: %s", code, e)
        elif collection == Collection.EMPLOYEES:
            self._employees = tuple(
                _parse_each(Employee.from_document, (d for d in docs if d.get("companyCode") == code), "employee")
            )
        elif collection == Collection.RECORDS:
            records = _parse_each(
                PointRecord.from_document, (d for d in docs if d.get("companyCode") == code), "record"
            )
            self._records = tuple(sort_by_timestamp_desc(records))


def _parse_each(parse, docs, kind: str) -> list:
    """Parse documents one by one, skipping the unreadable ones."""

    parsed = []
    for d in docs:
        try:
            parsed.append(parse(d))
        except (TypeError, ValueError) as e:
            logger.warning("skipping %s %s with unreadable fields: %s", kind, d.get("id"), e)
    return parsed
