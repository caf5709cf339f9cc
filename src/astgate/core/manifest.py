from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Protocol

from astgate.errors import ManifestError
from astgate.git_utils import head_commit
from astgate.schemas import ProjectMeta

MANIFEST_NAME = "package.json"


class ProjectMetaProvider(Protocol):
    def get_project_meta(self, path: str) -> ProjectMeta:
        ...


def read_manifest(project_path: str | Path) -> dict[str, Any]:
    manifest_path = Path(project_path).resolve() / MANIFEST_NAME
    try:
        data = json.loads(manifest_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ManifestError(f"manifest not found: {manifest_path}") from exc
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ManifestError(f"cannot read manifest {manifest_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ManifestError(f"manifest is not a JSON object: {manifest_path}")
    return data


class PackageJsonMetaProvider:
    def __init__(self, include_commit: bool = True) -> None:
        self.include_commit = include_commit

    def get_project_meta(self, path: str) -> ProjectMeta:
        root = Path(path).resolve()
        manifest = read_manifest(root)
        commit = head_commit(root) if self.include_commit else None
        return ProjectMeta(
            name=str(manifest.get("name", root.name)),
            version=str(manifest.get("version", "0.0.0")),
            path=str(root),
            commit_hash=commit,
        )
