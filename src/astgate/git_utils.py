from __future__ import annotations

import subprocess
from pathlib import Path


class GitError(RuntimeError):
    pass


def _run_git(repo: Path, args: list[str]) -> str:
    proc = subprocess.run(
        ["git", *args],
        cwd=repo,
        check=False,
        capture_output=True,
        text=True,
    )
    if proc.returncode != 0:
        raise GitError(proc.stderr.strip() or proc.stdout.strip())
    return proc.stdout.strip()


def head_commit(project_root: Path) -> str | None:
    # Only a checkout rooted at the project counts; a parent repository says
    # nothing about this project's content.
    if not (project_root / ".git").exists():
        return None
    try:
        return _run_git(project_root, ["rev-parse", "HEAD"])
    except (GitError, OSError):
        return None
