from __future__ import annotations

from typing import Callable, Protocol

from ..core.enums import Collection

SnapshotCallback = Callable[[list[dict]], None]
ErrorCallback = Callable[[Exception], None]


class Subscription(Protocol):
    def unsubscribe(self) -> None:
        """Stop deliveries. Calling it more than once is harmless."""

        raise NotImplementedError


class SnapshotFeed(Protocol):
    """Source of full-collection snapshots scoped by company code.

    Every delivery carries the complete current list of matching documents,
    never a diff.
    """

    def subscribe(
        self,
        collection: Collection,
        company_code: str,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> Subscription:
        raise NotImplementedError
