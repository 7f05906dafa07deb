from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import AttendanceType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone
from .model import QrCode
from .repository import QrCodeRepository

_COLUMNS = "qr_code_id, company_id, name, type, location, latitude, longitude, radius, qr_data, is_active, created_at"


def _opt_float(value: Any) -> Optional[float]:
    return float(value) if value is not None else None


def _row_to_qr(r: Dict[str, Any]) -> QrCode:
    return QrCode(
        qr_code_id=int(r["qr_code_id"]),
        company_id=int(r["company_id"]),
        name=r["name"],
        type=AttendanceType(r["type"]),
        location=r.get("location"),
        latitude=_opt_float(r.get("latitude")),
        longitude=_opt_float(r.get("longitude")),
        radius=_opt_float(r.get("radius")),
        qr_data=r.get("qr_data"),
        is_active=as_bool(r["is_active"]),
        created_at=r.get("created_at"),
    )


class MySQLQrCodeRepository(QrCodeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, qr_code_id: int) -> Optional[QrCode]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM qr_codes WHERE qr_code_id=%s", (int(qr_code_id),))
            r = fetchone(cur)
            return _row_to_qr(r) if r else None

    def list_for_company(self, company_id: int) -> Sequence[QrCode]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM qr_codes WHERE company_id=%s ORDER BY created_at DESC, qr_code_id DESC",
                (int(company_id),),
            )
            return [_row_to_qr(r) for r in fetchall(cur)]

    def count_for_company(self, company_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM qr_codes WHERE company_id=%s", (int(company_id),))
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def create(
        self,
        *,
        company_id: int,
        name: str,
        type: AttendanceType,
        location: Optional[str],
        latitude: Optional[float],
        longitude: Optional[float],
        radius: Optional[float],
        is_active: bool,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO qr_codes(company_id, name, type, location, latitude, longitude, radius, is_active)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(company_id), name, type.value, location, latitude, longitude, radius, 1 if is_active else 0),
            )
            return int(cur.lastrowid)

    def update(
        self,
        *,
        qr_code_id: int,
        name: str,
        type: AttendanceType,
        location: Optional[str],
        latitude: Optional[float],
        longitude: Optional[float],
        radius: Optional[float],
        is_active: bool,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE qr_codes
                SET name=%s, type=%s, location=%s, latitude=%s, longitude=%s, radius=%s, is_active=%s
                WHERE qr_code_id=%s
                """,
                (name, type.value, location, latitude, longitude, radius, 1 if is_active else 0, int(qr_code_id)),
            )
            return cur.rowcount > 0

    def set_payload(self, *, qr_code_id: int, qr_data: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE qr_codes SET qr_data=%s WHERE qr_code_id=%s", (qr_data, int(qr_code_id)))

    def delete(self, *, qr_code_id: int, company_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM qr_codes WHERE qr_code_id=%s AND company_id=%s",
                (int(qr_code_id), int(company_id)),
            )
            return cur.rowcount > 0
