from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Company, Holiday


class CompanyRepository(Protocol):
    """Interface for the ``companies`` collection (document id = access code).

    Note (DIP): services depend on this interface, never on MySQL directly.
    """

    def get_by_id(self, company_id: str) -> Optional[Company]:
        raise NotImplementedError

    def create(self, company: Company) -> str:
        raise NotImplementedError

    def update_fields(self, company_id: str, fields: dict) -> bool:
        """Partial update; ``fields`` uses document field names."""

        raise NotImplementedError

    def set_holidays(self, company_id: str, holidays: Sequence[Holiday]) -> bool:
        raise NotImplementedError

    def delete(self, company_id: str) -> bool:
        raise NotImplementedError

    def list_documents(self, company_code: str) -> list[dict]:
        """Snapshot source: the single company document, or nothing."""

        raise NotImplementedError
