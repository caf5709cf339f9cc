from __future__ import annotations

import json
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from astgate.schemas import AnalyzerQueryResult
from astgate.utils import utc_now_iso


class SQLiteStore:
    def __init__(self, path: Path) -> None:
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        # The connection's own context manager only commits; closing is ours.
        conn = sqlite3.connect(self.path)
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.executescript(
                """
                CREATE TABLE IF NOT EXISTS analyzer_results (
                    analyzer_name TEXT NOT NULL,
                    identifier TEXT NOT NULL,
                    payload TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    PRIMARY KEY (analyzer_name, identifier)
                );
                """
            )
            conn.commit()

    def get(self, analyzer_name: str, identifier: str) -> dict[str, Any] | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT payload FROM analyzer_results WHERE analyzer_name = ? AND identifier = ?",
                (analyzer_name, identifier),
            ).fetchone()
        if not row:
            return None
        try:
            payload = json.loads(row[0])
        except json.JSONDecodeError:
            return None
        return payload if isinstance(payload, dict) else None

    def put(self, analyzer_name: str, identifier: str, result: AnalyzerQueryResult) -> None:
        payload = json.dumps(result.to_wrapped(), ensure_ascii=False)
        with self._connect() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO analyzer_results(analyzer_name, identifier, payload, created_at) VALUES (?, ?, ?, ?)",
                (analyzer_name, identifier, payload, utc_now_iso()),
            )
            conn.commit()

    def delete(self, analyzer_name: str, identifier: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM analyzer_results WHERE analyzer_name = ? AND identifier = ?",
                (analyzer_name, identifier),
            )
            conn.commit()
            return cursor.rowcount > 0

    def list_identifiers(self, analyzer_name: str) -> list[str]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT identifier FROM analyzer_results WHERE analyzer_name = ? ORDER BY created_at",
                (analyzer_name,),
            ).fetchall()
        return [row[0] for row in rows]
