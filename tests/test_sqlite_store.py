import sqlite3

import pytest

from astgate.schemas import AnalyzerMeta, AnalyzerQueryResult, ProjectMeta, unwind_result
from astgate.storage.sqlite_store import SQLiteStore


def _result(identifier: str = "app_1.0.0__abc") -> AnalyzerQueryResult:
    return AnalyzerQueryResult(
        query_output=[{"file": "./src/a.js", "meta": None, "result": [{"source": "dep-a"}]}],
        analyzer_meta=AnalyzerMeta(
            name="find-imports",
            required_ast_dialect="javascript",
            identifier=identifier,
            configuration={"gatherFilesConfig": {"extensions": [".js"], "allowlist": []}},
            target_project=ProjectMeta(name="app", version="1.0.0"),
        ),
    )


def test_store_round_trips_wrapped_payload(tmp_path) -> None:
    store = SQLiteStore(tmp_path / "state" / "cache.db")
    result = _result()

    store.put("find-imports", result.analyzer_meta.identifier, result)
    payload = store.get("find-imports", result.analyzer_meta.identifier)

    assert payload is not None
    assert "meta" in payload and "analyzerMeta" in payload["meta"]
    assert unwind_result(payload) == result
    assert store.get("find-exports", result.analyzer_meta.identifier) is None


def test_later_write_supersedes_and_delete_forgets(tmp_path) -> None:
    store = SQLiteStore(tmp_path / "cache.db")
    store.put("find-imports", "id-1", _result("id-1"))
    store.put("find-imports", "id-1", _result("id-1"))
    store.put("find-imports", "id-2", _result("id-2"))

    assert sorted(store.list_identifiers("find-imports")) == ["id-1", "id-2"]
    assert store.delete("find-imports", "id-1") is True
    assert store.delete("find-imports", "id-1") is False
    assert store.get("find-imports", "id-1") is None


def test_unreadable_payload_counts_as_miss(tmp_path) -> None:
    path = tmp_path / "cache.db"
    store = SQLiteStore(path)
    with sqlite3.connect(path) as conn:
        conn.execute(
            "INSERT INTO analyzer_results(analyzer_name, identifier, payload, created_at) VALUES (?, ?, ?, ?)",
            ("find-imports", "broken", "{not json", "2024-01-01T00:00:00+00:00"),
        )
        conn.commit()

    assert store.get("find-imports", "broken") is None


def test_connections_are_closed_after_each_call(tmp_path, monkeypatch) -> None:
    opened: list[sqlite3.Connection] = []
    real_connect = sqlite3.connect

    def tracking_connect(*args, **kwargs):
        conn = real_connect(*args, **kwargs)
        opened.append(conn)
        return conn

    monkeypatch.setattr(sqlite3, "connect", tracking_connect)
    store = SQLiteStore(tmp_path / "cache.db")
    store.put("find-imports", "id-1", _result("id-1"))
    store.get("find-imports", "id-1")
    store.delete("find-imports", "id-1")

    assert len(opened) == 4
    for conn in opened:
        with pytest.raises(sqlite3.ProgrammingError):
            conn.execute("SELECT 1")
