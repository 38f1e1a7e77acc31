from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRequest
from .repository import RequestRepository

_SELECT = """
    SELECT request_id, company_code, matricula, user_name, kind, reason, request_date, photo,
           status, created_at, decided_at, decided_by
    FROM attendance_requests
"""


def _row_to_document(r: dict) -> dict:
    return {
        "id": str(r["request_id"]),
        "companyCode": r["company_code"],
        "matricula": r["matricula"],
        "userName": r["user_name"],
        "type": r["kind"],
        "reason": r["reason"],
        "date": r["request_date"],
        "photo": r.get("photo"),
        "status": r["status"],
        "createdAt": r["created_at"],
        "decidedAt": r.get("decided_at"),
        "decidedBy": r.get("decided_by"),
    }


class MySQLRequestRepository(RequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, request: AttendanceRequest) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_requests(
                    request_id, company_code, matricula, user_name, kind, reason, request_date,
                    photo, status, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    request.id,
                    request.company_code,
                    request.matricula,
                    request.user_name,
                    request.kind.value,
                    request.reason,
                    request.date,
                    request.photo,
                    request.status.value,
                    request.created_at,
                ),
            )
            return request.id

    def get(self, request_id: str) -> Optional[AttendanceRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE request_id=%s", (request_id,))
            r = fetchone(cur)
            return AttendanceRequest.from_document(_row_to_document(r)) if r else None

    def list_for_company(
        self,
        company_code: str,
        *,
        status: Optional[RequestStatus] = None,
    ) -> Sequence[AttendanceRequest]:
        where = ["company_code=%s"]
        params: list = [company_code]
        if status is not None:
            where.append("status=%s")
            params.append(status.value)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE " + " AND ".join(where) + " ORDER BY created_at DESC",
                tuple(params),
            )
            return [AttendanceRequest.from_document(_row_to_document(r)) for r in fetchall(cur)]

    def list_for_user(self, company_code: str, matricula: str) -> Sequence[AttendanceRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE company_code=%s AND matricula=%s ORDER BY created_at DESC",
                (company_code, matricula),
            )
            return [AttendanceRequest.from_document(_row_to_document(r)) for r in fetchall(cur)]

    def decide(
        self,
        *,
        request_id: str,
        status: RequestStatus,
        decided_by: str,
        decided_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_requests
                SET status=%s, decided_by=%s, decided_at=%s
                WHERE request_id=%s AND status=%s
                """,
                (status.value, decided_by, decided_at, request_id, RequestStatus.PENDING.value),
            )
            return cur.rowcount > 0
