"""AST construction per dialect.

``python`` uses the stdlib parser; ``javascript`` goes through tree-sitter.
Files that do not parse are listed in ``failed`` instead of aborting the run.
"""

from __future__ import annotations

import ast
from typing import Any, Protocol

import tree_sitter_javascript
from tree_sitter import Language, Parser

from astgate.errors import UnsupportedDialectError
from astgate.schemas import AstEntry, ProjectInputData, ProjectInputDataWithAst

DEFAULT_DIALECT = "javascript"


class AstProvider(Protocol):
    def add_ast_to(self, project_data: ProjectInputData, dialect: str) -> ProjectInputDataWithAst:
        ...


def _parse_python(source: str, file_path: str) -> Any:
    try:
        return ast.parse(source, filename=file_path)
    except SyntaxError:
        return None


class _JavaScriptParser:
    def __init__(self) -> None:
        self.language = Language(tree_sitter_javascript.language())
        self.parser = Parser()
        self.parser.language = self.language

    def __call__(self, source: str, file_path: str) -> Any:
        tree = self.parser.parse(source.encode("utf-8"))
        if tree.root_node is None or tree.root_node.has_error:
            return None
        return tree


class DialectAstProvider:
    def __init__(self) -> None:
        self._parsers: dict[str, Any] = {"python": _parse_python}

    def _parser_for(self, dialect: str) -> Any:
        if dialect not in self._parsers:
            if dialect != "javascript":
                raise UnsupportedDialectError(f"unsupported AST dialect: {dialect}")
            self._parsers[dialect] = _JavaScriptParser()
        return self._parsers[dialect]

    def add_ast_to(self, project_data: ProjectInputData, dialect: str) -> ProjectInputDataWithAst:
        parse = self._parser_for(dialect)
        annotated = ProjectInputDataWithAst(project=project_data.project)
        for entry in project_data.entries:
            tree = parse(entry.source_text, entry.file)
            if tree is None:
                annotated.failed.append(entry.file)
                continue
            annotated.entries.append(AstEntry(file=entry.file, source_text=entry.source_text, ast=tree))
        return annotated
