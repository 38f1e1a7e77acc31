from __future__ import annotations

from typing import Any, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import PointRecord
from .repository import RecordRepository

# List reads leave out the base64 photo; it is fetched per record with get_photo.
_SELECT = """
    SELECT record_id, company_code, user_name, matricula, punched_at, latitude, longitude, address,
           status, digital_signature, punch_type, mood, is_adjustment
    FROM point_records
"""


def _row_to_document(r: dict) -> dict:
    # punched_at stays a driver-native datetime; PointRecord.from_document coerces it.
    return {
        "id": str(r["record_id"]),
        "companyCode": r["company_code"],
        "userName": r["user_name"],
        "matricula": r.get("matricula"),
        "timestamp": r["punched_at"],
        "latitude": r.get("latitude"),
        "longitude": r.get("longitude"),
        "address": r.get("address"),
        "photo": r.get("photo"),
        "status": r.get("status"),
        "digitalSignature": r.get("digital_signature"),
        "type": r.get("punch_type"),
        "mood": r.get("mood"),
        "isAdjustment": bool(r.get("is_adjustment")),
    }


class MySQLRecordRepository(RecordRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, record: PointRecord) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO point_records(
                    record_id, company_code, user_name, matricula, punched_at, latitude, longitude,
                    address, photo, status, digital_signature, punch_type, mood, is_adjustment
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    record.id,
                    record.company_code,
                    record.user_name,
                    record.matricula,
                    record.timestamp,
                    record.latitude,
                    record.longitude,
                    record.address,
                    record.photo,
                    record.status.value,
                    record.digital_signature,
                    record.type.value,
                    record.mood,
                    int(record.is_adjustment),
                ),
            )
            return record.id

    def list_for_company(self, company_code: str) -> Sequence[PointRecord]:
        return [PointRecord.from_document(d) for d in self.list_documents(company_code)]

    def list_for_user(self, company_code: str, matricula: str) -> Sequence[PointRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE company_code=%s AND matricula=%s",
                (company_code, matricula),
            )
            return [PointRecord.from_document(_row_to_document(r)) for r in fetchall(cur)]

    def list_documents(self, company_code: str) -> list[dict]:
        # No ORDER BY: ordering is done by the consumer.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE company_code=%s", (company_code,))
            return [_row_to_document(r) for r in fetchall(cur)]

    def get_photo(self, company_code: str, record_id: str) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT photo FROM point_records WHERE company_code=%s AND record_id=%s",
                (company_code, record_id),
            )
            row = fetchone(cur)
            return row["photo"] if row else None

    def change_marker(self, company_code: str) -> Any:
        # Records are append-only, so count and newest punch identify a snapshot.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS n, MAX(punched_at) AS newest FROM point_records WHERE company_code=%s",
                (company_code,),
            )
            row = fetchone(cur) or {}
            return (row.get("n"), row.get("newest"))
