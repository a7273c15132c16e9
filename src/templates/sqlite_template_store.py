from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import List, Optional

from src.templates.models import Template

ORDERABLE_COLUMNS = {"created_at", "updated_at", "title"}


class SQLiteTemplateStore:
    """
    Minimal template store.
    - templates: one row per template_id; timestamps are epoch milliseconds.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS templates (
                    template_id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    body TEXT NOT NULL,
                    created_at INTEGER NOT NULL,
                    updated_at INTEGER NOT NULL
                );
                """
            )
            conn.execute("CREATE INDEX IF NOT EXISTS idx_templates_created ON templates(created_at);")
            conn.commit()

    @staticmethod
    def _to_template(row: sqlite3.Row) -> Template:
        return Template(
            template_id=row["template_id"],
            title=row["title"],
            body=row["body"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def list_templates(self, *, order_by: str = "created_at", descending: bool = False) -> List[Template]:
        if order_by not in ORDERABLE_COLUMNS:
            raise ValueError(f"Cannot order templates by {order_by!r}")
        direction = "DESC" if descending else "ASC"

        # column name is whitelisted above
        with self._connect() as conn:
            rows = conn.execute(
                f"""
                SELECT template_id, title, body, created_at, updated_at
                FROM templates
                ORDER BY {order_by} {direction}, template_id {direction};
                """
            ).fetchall()

        return [self._to_template(r) for r in rows]

    def get_template(self, template_id: str) -> Optional[Template]:
        if not template_id:
            return None

        with self._connect() as conn:
            row = conn.execute(
                """
                SELECT template_id, title, body, created_at, updated_at
                FROM templates
                WHERE template_id = ?
                LIMIT 1;
                """,
                (template_id,),
            ).fetchone()

        return self._to_template(row) if row else None

    def upsert_template(self, template: Template) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO templates(template_id, title, body, created_at, updated_at)
                VALUES(?, ?, ?, ?, ?)
                ON CONFLICT(template_id) DO UPDATE SET
                    title=excluded.title,
                    body=excluded.body,
                    created_at=excluded.created_at,
                    updated_at=excluded.updated_at;
                """,
                (
                    template.template_id,
                    template.title,
                    template.body,
                    template.created_at,
                    template.updated_at,
                ),
            )
            conn.commit()

    def delete_template(self, template_id: str) -> bool:
        with self._connect() as conn:
            cur = conn.execute("DELETE FROM templates WHERE template_id = ?;", (template_id,))
            conn.commit()
            return cur.rowcount > 0

    def count_templates(self) -> int:
        with self._connect() as conn:
            row = conn.execute("SELECT COUNT(*) AS n FROM templates;").fetchone()
        return int(row["n"])
