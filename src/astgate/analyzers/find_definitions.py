from __future__ import annotations

import ast

from astgate.analyzers.common import AnalyzerSpec
from astgate.schemas import FileAnalysis, FileContext


def analyze_definitions(tree: ast.AST, context: FileContext) -> FileAnalysis:
    definitions: list[dict] = []
    for node in ast.walk(tree):
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            kind = "function"
        elif isinstance(node, ast.ClassDef):
            kind = "class"
        else:
            continue
        definitions.append(
            {
                "name": node.name,
                "kind": kind,
                "line": int(getattr(node, "lineno", 1)),
                "visibility": "private" if node.name.startswith("_") else "public",
            }
        )
    definitions.sort(key=lambda item: (item["line"], item["name"]))
    return FileAnalysis(result=definitions)


FIND_DEFINITIONS = AnalyzerSpec(
    name="find-definitions",
    analyze_file=analyze_definitions,
    required_ast_dialect="python",
)
