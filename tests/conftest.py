from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[..., Path]:
    def _make(name: str, manifest: dict, files: dict[str, str] | None = None, root: Path | None = None) -> Path:
        project = (root or tmp_path) / name
        project.mkdir(parents=True, exist_ok=True)
        (project / "package.json").write_text(json.dumps(manifest), encoding="utf-8")
        for rel, content in (files or {}).items():
            path = project / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return project

    return _make
