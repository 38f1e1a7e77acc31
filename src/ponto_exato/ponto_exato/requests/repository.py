from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import AttendanceRequest


class RequestRepository(Protocol):
    def create(self, request: AttendanceRequest) -> str:
        raise NotImplementedError

    def get(self, request_id: str) -> Optional[AttendanceRequest]:
        raise NotImplementedError

    def list_for_company(
        self,
        company_code: str,
        *,
        status: Optional[RequestStatus] = None,
    ) -> Sequence[AttendanceRequest]:
        raise NotImplementedError

    def list_for_user(self, company_code: str, matricula: str) -> Sequence[AttendanceRequest]:
        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: str,
        status: RequestStatus,
        decided_by: str,
        decided_at: datetime,
    ) -> bool:
        """Move a pending request to ``status``.

        Returns False when the request does not exist or was already decided.
        """

        raise NotImplementedError
