"""Which target files import from the reference project, and what they take.

Works on parsed target files, or on a find-imports result for the target
passed in as ``targetProjectResult``; both give the same query output.
"""

from __future__ import annotations

from typing import Any

from astgate.analyzers.common import AnalyzerSpec
from astgate.analyzers.find_imports import FIND_IMPORTS, collect_imports
from astgate.schemas import AnalyzerQueryResult, FileAnalysis, FileContext, ProjectMeta, QueryOutput


def _targets_reference(source: str, reference_name: str) -> bool:
    return source == reference_name or source.startswith(f"{reference_name}/")


def _matching(imports: list[dict[str, Any]], reference: ProjectMeta) -> list[dict[str, Any]]:
    return [
        {
            "importSpecifiers": item["importSpecifiers"],
            "source": item["source"],
            "exportingProject": f"{reference.name}#{reference.version}",
        }
        for item in imports
        if _targets_reference(item["source"], reference.name)
    ]


def analyze_matching_imports(tree: Any, context: FileContext) -> FileAnalysis:
    reference = context.reference_meta
    if reference is None:
        return FileAnalysis(result=[])
    return FileAnalysis(result=_matching(collect_imports(tree, context.relative_path), reference))


def match_provided_imports(imports: AnalyzerQueryResult, reference: ProjectMeta | None) -> QueryOutput:
    if reference is None:
        return []
    output: list[dict[str, Any]] = []
    for entry in imports.query_output:
        matches = _matching(entry["result"], reference)
        if matches:
            output.append({"file": entry["file"], "meta": None, "result": matches})
    return output


MATCH_IMPORTS = AnalyzerSpec(
    name="match-imports",
    analyze_file=analyze_matching_imports,
    requires_reference=True,
    consumes=FIND_IMPORTS.name,
    analyze_provided=match_provided_imports,
)
