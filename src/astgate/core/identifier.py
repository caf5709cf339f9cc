from __future__ import annotations

import re
from hashlib import sha1
from typing import Any

from astgate.schemas import AnalyzerConfig, ProjectMeta
from astgate.utils import canonical_json

PATH_KEYS = ("targetProjectPath", "referenceProjectPath")
UNSAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9._-]+")


def _segment(project: ProjectMeta) -> str:
    name = UNSAFE_CHARS_RE.sub("-", project.name.lstrip("@")).strip("-") or "unknown"
    version = UNSAFE_CHARS_RE.sub("-", project.version) or "0.0.0"
    return f"{name}_{version}"


def identity_seed(
    target_project: ProjectMeta | None,
    reference_project: ProjectMeta | None,
    analyzer_config: AnalyzerConfig,
) -> dict[str, Any]:
    configuration = {key: value for key, value in analyzer_config.to_dict().items() if key not in PATH_KEYS}
    return {
        "targetProject": target_project.without_path().to_dict() if target_project else None,
        "referenceProject": reference_project.without_path().to_dict() if reference_project else None,
        "analyzerConfig": configuration,
    }


def derive_identifier(
    target_project: ProjectMeta | None,
    reference_project: ProjectMeta | None,
    analyzer_config: AnalyzerConfig,
) -> str:
    """Cache key built from logical identity only; filesystem paths never take part."""
    seed = identity_seed(target_project, reference_project, analyzer_config)
    digest = sha1(canonical_json(seed).encode("utf-8")).hexdigest()[:16]

    label = _segment(target_project) if target_project else "unknown"
    if reference_project:
        label = f"{label}_+_{_segment(reference_project)}"
    return f"{label}__{digest}"
