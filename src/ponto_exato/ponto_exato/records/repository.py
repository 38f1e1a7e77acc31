from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from .model import PointRecord


class RecordRepository(Protocol):
    """Point records are append-only: there is no update or delete."""

    def create(self, record: PointRecord) -> str:
        raise NotImplementedError

    def list_for_company(self, company_code: str) -> Sequence[PointRecord]:
        raise NotImplementedError

    def list_for_user(self, company_code: str, matricula: str) -> Sequence[PointRecord]:
        raise NotImplementedError

    def list_documents(self, company_code: str) -> list[dict]:
        raise NotImplementedError

    def get_photo(self, company_code: str, record_id: str) -> Optional[str]:
        raise NotImplementedError

    def change_marker(self, company_code: str) -> Any:
        """Cheap value that changes whenever the company's records change."""
        raise NotImplementedError
