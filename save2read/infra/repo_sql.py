from __future__ import annotations

import logging
from typing import Any, Callable, Optional

import psycopg2.extras

from ..core.models import Article, ArticleData
from ..core.repository import ArticleRepository
from . import repo_sql_queries as queries
from .repo_sql_mapper import row_to_article

logger = logging.getLogger(__name__)


class PostgresArticleRepository(ArticleRepository):
    """
    Link storage on a single psycopg2 connection.

    When built with `connect`, a connection found closed (server restart,
    dropped socket) is replaced before the next statement.
    """

    def __init__(self, conn, connect: Optional[Callable[[], Any]] = None):
        self.conn = conn
        self._connect = connect

    def _ensure_connection(self):
        if self._connect is not None and getattr(self.conn, "closed", 0):
            logger.warning("Postgres connection closed; reconnecting")
            self.conn = self._connect()
        return self.conn

    def _cursor(self):
        return self.conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor)

    def close(self) -> None:
        if not getattr(self.conn, "closed", 0):
            self.conn.close()

    # ---------- writes ----------

    def add(self, article: ArticleData) -> int:
        with self._ensure_connection(), self._cursor() as cur:
            cur.execute(queries.INSERT_PENDING_SQL, article.model_dump())
            row = cur.fetchone()
        link_id = int(row["id"])
        logger.debug("Added pending link %s for user %s", link_id, article.user_id)
        return link_id

    def archive(self, user_id: int, link_id: int) -> Optional[int]:
        # psycopg2 opens a transaction on the first statement; leaving the
        # `with` block commits both statements or rolls back both.
        with self._ensure_connection(), self._cursor() as cur:
            cur.execute(queries.ARCHIVE_PENDING_SQL, {"id": link_id, "user_id": user_id})
            row = cur.fetchone()
            if not row:
                return None
            cur.execute(queries.DELETE_PENDING_SQL, (link_id, user_id))
        return int(row["id"])

    def delete_pending(self, user_id: int, link_id: int) -> None:
        with self._ensure_connection(), self._cursor() as cur:
            cur.execute(queries.DELETE_PENDING_SQL, (link_id, user_id))

    def delete_archived(self, user_id: int, link_id: int) -> None:
        with self._ensure_connection(), self._cursor() as cur:
            cur.execute(queries.DELETE_ARCHIVED_SQL, (link_id, user_id))

    # ---------- reads ----------

    def get_pending(self, link_id: int) -> Optional[Article]:
        with self._ensure_connection(), self._cursor() as cur:
            cur.execute(queries.GET_PENDING_BY_ID_SQL, (link_id,))
            row = cur.fetchone()
        return row_to_article(row) if row else None

    def pending_list(self, user_id: int) -> list[Article]:
        with self._ensure_connection(), self._cursor() as cur:
            cur.execute(queries.LIST_PENDING_FOR_USER_SQL, (user_id,))
            rows = cur.fetchall()
        return [row_to_article(r) for r in rows]

    def archived_list(self, user_id: int) -> list[Article]:
        with self._ensure_connection(), self._cursor() as cur:
            cur.execute(queries.LIST_ARCHIVED_FOR_USER_SQL, (user_id,))
            rows = cur.fetchall()
        return [row_to_article(r) for r in rows]
