from __future__ import annotations

import json
import sqlite3
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator, Protocol

from .errors import StorageError
from .result import ExtractionResult
from .store_schema import initialize_sqlite

_FEE_COUNTER = "skip_due_to_fee"


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _json_dumps(value: Any) -> str:
    return json.dumps(
        value,
        ensure_ascii=False,
        sort_keys=True,
        separators=(",", ":"),
        default=str,
    )


class ResultSink(Protocol):
    """Where finished extraction results go."""

    skip_due_to_fee: int

    def add_result(self, result: ExtractionResult) -> None: ...


@dataclass
class MemoryResultStore:
    results: list[ExtractionResult] = field(default_factory=list)
    skip_due_to_fee: int = 0

    def add_result(self, result: ExtractionResult) -> None:
        self.results.append(result)

    def __len__(self) -> int:
        return len(self.results)


class SQLiteResultStore:
    """
    Results keyed by post id, plus the run counters.

    Storing a post again replaces its previous result.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        self._conn.row_factory = sqlite3.Row

    @classmethod
    def open(cls, path: str | Path) -> "SQLiteResultStore":
        db_path = str(path)
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        try:
            conn = sqlite3.connect(db_path)
        except sqlite3.DatabaseError as e:
            raise StorageError(f"Failed to open sqlite database: {db_path}: {e}") from e

        try:
            initialize_sqlite(conn)
        except Exception as e:
            conn.close()
            raise StorageError(f"Failed to initialize sqlite schema: {e}") from e

        return cls(conn)

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "SQLiteResultStore":
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.close()

    def add_result(self, result: ExtractionResult, *, stored_at: str | None = None) -> None:
        post_id = (result.post_id or "").strip()
        if not post_id:
            raise ValueError("result.post_id must be non-empty")

        ts = (stored_at or _utc_now_iso()).strip()
        payload = result.to_dict()

        try:
            with self._conn:
                self._conn.execute(
                    """
                    INSERT INTO extraction_results(
                      post_id, post_type, title, published_at, file_count,
                      link_count, result_json, stored_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT(post_id) DO UPDATE SET
                      post_type = excluded.post_type,
                      title = excluded.title,
                      published_at = excluded.published_at,
                      file_count = excluded.file_count,
                      link_count = excluded.link_count,
                      result_json = excluded.result_json,
                      stored_at = excluded.stored_at
                    """.strip(),
                    (
                        post_id,
                        result.type,
                        result.title,
                        result.date,
                        len(result.files),
                        len(result.links.text),
                        _json_dumps(payload),
                        ts,
                    ),
                )
        except sqlite3.DatabaseError as e:
            raise StorageError(f"Failed to store result for post {post_id}: {e}") from e

    def get_result(self, post_id: str) -> dict[str, Any] | None:
        pid = (post_id or "").strip()
        if not pid:
            raise ValueError("post_id must be non-empty")

        row = self._conn.execute(
            "SELECT result_json FROM extraction_results WHERE post_id = ?",
            (pid,),
        ).fetchone()
        if row is None:
            return None
        return self._decode(row["result_json"])

    def iter_results(self) -> Iterator[dict[str, Any]]:
        rows = self._conn.execute(
            "SELECT result_json FROM extraction_results ORDER BY seq"
        ).fetchall()
        for r in rows:
            yield self._decode(r["result_json"])

    def result_count(self) -> int:
        row = self._conn.execute("SELECT COUNT(1) AS n FROM extraction_results").fetchone()
        return int(row["n"]) if row is not None else 0

    @property
    def skip_due_to_fee(self) -> int:
        return self._counter(_FEE_COUNTER)

    @skip_due_to_fee.setter
    def skip_due_to_fee(self, value: int) -> None:
        self._set_counter(_FEE_COUNTER, int(value))

    def export_jsonl(self, path: str | Path) -> int:
        """Write every stored result as one JSON line; returns the number written."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)

        written = 0
        try:
            with p.open("w", encoding="utf-8", newline="\n") as fp:
                for item in self.iter_results():
                    fp.write(json.dumps(item, ensure_ascii=False) + "\n")
                    written += 1
        except OSError as e:
            raise StorageError(f"Failed to write results file: {p}: {e}") from e
        return written

    def _counter(self, name: str) -> int:
        row = self._conn.execute("SELECT value FROM counters WHERE name = ?", (name,)).fetchone()
        return int(row["value"]) if row is not None else 0

    def _set_counter(self, name: str, value: int) -> None:
        try:
            with self._conn:
                self._conn.execute(
                    """
                    INSERT INTO counters(name, value) VALUES (?, ?)
                    ON CONFLICT(name) DO UPDATE SET value = excluded.value
                    """.strip(),
                    (name, value),
                )
        except sqlite3.DatabaseError as e:
            raise StorageError(f"Failed to update counter {name}: {e}") from e

    @staticmethod
    def _decode(raw: str | None) -> dict[str, Any]:
        try:
            value = json.loads((raw or "").strip() or "{}")
        except json.JSONDecodeError as e:
            raise StorageError(f"Stored result_json could not be parsed: {e}") from e
        if not isinstance(value, dict):
            raise StorageError("Stored result_json is not an object")
        return value
