from __future__ import annotations

from pathlib import Path
from typing import Protocol

from astgate.core.manifest import PackageJsonMetaProvider, ProjectMetaProvider
from astgate.schemas import FileEntry, GatherFilesConfig, ProjectInputData
from astgate.utils import is_allowed, path_matches

ALWAYS_EXCLUDED = [
    "**/.git/**",
    "**/node_modules/**",
    "**/.venv/**",
    "**/__pycache__/**",
    "**/.pytest_cache/**",
    ".git",
    "node_modules",
    ".venv",
]


class FileGatherer(Protocol):
    def create_data_object(self, paths: list[str], config: GatherFilesConfig) -> list[ProjectInputData]:
        ...


def discover_project_files(project_root: Path, config: GatherFilesConfig) -> list[str]:
    suffixes = {item.lower() for item in config.extensions}
    files: list[str] = []
    for path in project_root.rglob("*"):
        if not path.is_file():
            continue
        rel = path.relative_to(project_root).as_posix()
        if suffixes and path.suffix.lower() not in suffixes:
            continue
        if path_matches(rel, ALWAYS_EXCLUDED):
            continue
        if is_allowed(rel, config.allowlist):
            files.append(rel)
    return sorted(files)


class FilesystemGatherer:
    def __init__(self, meta_provider: ProjectMetaProvider | None = None) -> None:
        self.meta_provider = meta_provider or PackageJsonMetaProvider()

    def create_data_object(self, paths: list[str], config: GatherFilesConfig) -> list[ProjectInputData]:
        projects: list[ProjectInputData] = []
        for project_path in paths:
            root = Path(project_path).resolve()
            project = self.meta_provider.get_project_meta(str(root))
            entries: list[FileEntry] = []
            for rel in discover_project_files(root, config):
                file_path = root / rel
                try:
                    source = file_path.read_text(encoding="utf-8")
                except UnicodeDecodeError:
                    continue
                entries.append(FileEntry(file=str(file_path), source_text=source))
            projects.append(ProjectInputData(project=project, entries=entries))
        return projects
