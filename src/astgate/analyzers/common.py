from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

from astgate.parsing.providers import DEFAULT_DIALECT
from astgate.schemas import AnalyzerQueryResult, FileAnalysis, FileContext, ProjectMeta, QueryOutput

AnalyzeFile = Callable[[Any, FileContext], FileAnalysis]
# Builds the query output from an upstream result instead of parsed files.
AnalyzeProvided = Callable[[AnalyzerQueryResult, ProjectMeta | None], QueryOutput]


class Analyzer(Protocol):
    name: str
    required_ast_dialect: str
    requires_reference: bool
    consumes: str | None
    analyze_provided: AnalyzeProvided | None

    def analyze_file(self, tree: Any, context: FileContext) -> FileAnalysis:
        ...


@dataclass(frozen=True, slots=True)
class AnalyzerSpec:
    name: str
    analyze_file: AnalyzeFile
    required_ast_dialect: str = DEFAULT_DIALECT
    requires_reference: bool = False
    consumes: str | None = None
    analyze_provided: AnalyzeProvided | None = None
