from __future__ import annotations

import json
import os
import re
from collections.abc import Iterable
from datetime import UTC, datetime
from fnmatch import fnmatch
from pathlib import Path
from typing import Any

GLOB_CHARS = set("*?[{")


def utc_now_iso() -> str:
    return datetime.now(UTC).isoformat()


def canonical_json(payload: Any) -> str:
    return json.dumps(payload, ensure_ascii=False, sort_keys=True, separators=(",", ":"), default=str)


def _expand_braces(pattern: str) -> list[str]:
    match = re.search(r"\{([^{}]+)\}", pattern)
    if not match:
        return [pattern]
    options = [item.strip() for item in match.group(1).split(",") if item.strip()]
    if not options:
        return [pattern]
    prefix = pattern[: match.start()]
    suffix = pattern[match.end() :]
    expanded: list[str] = []
    for option in options:
        expanded.extend(_expand_braces(f"{prefix}{option}{suffix}"))
    return expanded


def _pattern_matches(path: str, pattern: str) -> bool:
    # "coverage" covers the coverage folder itself and everything below it.
    if not GLOB_CHARS.intersection(pattern):
        bare = pattern.strip("/")
        return path == bare or path.startswith(f"{bare}/")
    return fnmatch(path, pattern)


def path_matches(path: str, patterns: Iterable[str]) -> bool:
    expanded_patterns: list[str] = []
    for pattern in patterns:
        expanded_patterns.extend(_expand_braces(pattern))
    return any(_pattern_matches(path, pattern) for pattern in expanded_patterns)


def is_allowed(path: str, allowlist: list[str]) -> bool:
    excludes = [item[1:] for item in allowlist if item.startswith("!")]
    includes = [item for item in allowlist if not item.startswith("!")]
    if excludes and path_matches(path, excludes):
        return False
    if not includes:
        return True
    return path_matches(path, includes)


def to_posix_path(value: str) -> str:
    return value.replace("\\", "/")


def relative_from_root(file_path: str, root_path: str) -> str:
    return f".{os.sep}{os.path.relpath(file_path, root_path)}"


def write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
