from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import MemberExternalMapping
from .repository import MemberRepository


class MySQLMemberRepository(MemberRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active_linked(self, brigade_id: int) -> Sequence[MemberExternalMapping]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, dlb_member_id
                FROM members
                WHERE brigade_id=%s AND dlb_member_id IS NOT NULL AND status='active'
                ORDER BY id
                """,
                (int(brigade_id),),
            )
            rows = fetchall(cur)
            return [
                MemberExternalMapping(
                    local_member_id=int(r["id"]),
                    external_member_id=int(r["dlb_member_id"]),
                    active=True,
                )
                for r in rows
            ]
