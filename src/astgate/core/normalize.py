"""Turn raw analyzer output into the portable result shape.

Every function here returns fresh values; inputs are never modified. The
result must be identical across machines and checkouts, so absolute paths are
removed and ``file`` values are forced into forward-slash form.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from astgate.core.identifier import PATH_KEYS
from astgate.schemas import AnalyzerConfig, AnalyzerMeta, AnalyzerQueryResult, ProjectMeta, QueryOutput
from astgate.utils import to_posix_path


def posixify(value: Any, key: str | None = None) -> Any:
    """Rewrite strings stored under a ``file`` key, at any depth, to posix form."""
    if isinstance(value, Mapping):
        return {k: posixify(v, k) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [posixify(item) for item in value]
    if isinstance(value, str) and key == "file":
        return to_posix_path(value)
    return value


def sanitize_configuration(config: AnalyzerConfig) -> dict[str, Any]:
    configuration = {key: value for key, value in config.to_dict().items() if key not in PATH_KEYS}
    # TODO: confirm whether both provided results may legitimately coexist; only
    # one half is dropped here.
    if "referenceProjectResult" in configuration:
        del configuration["referenceProjectResult"]
    elif "targetProjectResult" in configuration:
        del configuration["targetProjectResult"]
    return configuration


def _strip_project_paths(query_output: QueryOutput) -> QueryOutput:
    if not isinstance(query_output, list):
        return query_output
    cleaned: list[dict[str, Any]] = []
    for entry in query_output:
        project = entry.get("project") if isinstance(entry, Mapping) else None
        if isinstance(project, Mapping):
            entry = {**entry, "project": {k: v for k, v in project.items() if k != "path"}}
        cleaned.append(entry)
    return cleaned


def normalize_result(
    query_output: QueryOutput,
    config: AnalyzerConfig,
    name: str,
    required_ast_dialect: str,
    identifier: str,
    target_project: ProjectMeta | None = None,
    reference_project: ProjectMeta | None = None,
    path_separator: str = os.sep,
) -> AnalyzerQueryResult:
    output = _strip_project_paths(query_output)
    configuration = sanitize_configuration(config)
    if path_separator != "/":
        output = posixify(output)
        configuration = posixify(configuration)

    return AnalyzerQueryResult(
        query_output=output,
        analyzer_meta=AnalyzerMeta(
            name=name,
            required_ast_dialect=required_ast_dialect,
            identifier=identifier,
            configuration=configuration,
            target_project=target_project.without_path() if target_project else None,
            reference_project=reference_project.without_path() if reference_project else None,
        ),
    )
