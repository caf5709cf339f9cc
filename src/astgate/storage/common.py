from __future__ import annotations

import json
from typing import Any, Protocol

from astgate.schemas import AnalyzerQueryResult


class CacheStore(Protocol):
    def get(self, analyzer_name: str, identifier: str) -> dict[str, Any] | None:
        ...

    def put(self, analyzer_name: str, identifier: str, result: AnalyzerQueryResult) -> None:
        ...

    def delete(self, analyzer_name: str, identifier: str) -> bool:
        ...


class MemoryStore:
    """Process-local store holding wrapped payloads, like the SQLite one."""

    def __init__(self) -> None:
        self._entries: dict[tuple[str, str], dict[str, Any]] = {}

    def get(self, analyzer_name: str, identifier: str) -> dict[str, Any] | None:
        payload = self._entries.get((analyzer_name, identifier))
        return json.loads(json.dumps(payload)) if payload is not None else None

    def put(self, analyzer_name: str, identifier: str, result: AnalyzerQueryResult) -> None:
        self._entries[(analyzer_name, identifier)] = json.loads(json.dumps(result.to_wrapped()))

    def delete(self, analyzer_name: str, identifier: str) -> bool:
        return self._entries.pop((analyzer_name, identifier), None) is not None

    def __len__(self) -> int:
        return len(self._entries)
