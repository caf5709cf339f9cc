"""Generic analyzer lifecycle: prepare, traverse, finalize.

One ``AnalyzerDriver`` wraps one analyzer capability. ``prepare`` may short
circuit with a skip-result (incompatible pair) or a cached result; only on a
cache miss are files gathered, parsed and analyzed, and only a successful run
writes to the cache. An analyzer that consumes another analyzer's output
works from a provided ``targetProjectResult`` instead of gathering files.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from typing import Any

from astgate.analyzers.common import AnalyzeFile, Analyzer
from astgate.core.compatibility import Compatibility, check_compatibility
from astgate.core.identifier import derive_identifier
from astgate.core.manifest import PackageJsonMetaProvider, ProjectMetaProvider
from astgate.core.normalize import normalize_result
from astgate.errors import AnalyzerConfigError
from astgate.inputs.gatherer import FileGatherer, FilesystemGatherer
from astgate.logs import Logger, StdLogger, pad
from astgate.parsing.providers import AstProvider, DialectAstProvider
from astgate.schemas import (
    AnalyzerConfig,
    AnalyzerQueryResult,
    FileContext,
    ProjectInputData,
    ProjectMeta,
    QueryOutput,
    unwind_result,
)
from astgate.storage.common import CacheStore, MemoryStore
from astgate.utils import relative_from_root

CompatibilityCheck = Callable[[str, str], Compatibility]


@dataclass(slots=True)
class PreparedRun:
    config: AnalyzerConfig
    identifier: str
    target_meta: ProjectMeta | None
    reference_meta: ProjectMeta | None
    target_data: ProjectInputData | None = None
    reference_data: ProjectInputData | None = None


def _unwind_provided(config: AnalyzerConfig) -> AnalyzerConfig:
    target = config.target_project_result
    reference = config.reference_project_result
    return replace(
        config,
        target_project_result=unwind_result(target) if target is not None else None,
        reference_project_result=unwind_result(reference) if reference is not None else None,
    )


class AnalyzerDriver:
    def __init__(
        self,
        analyzer: Analyzer,
        *,
        meta_provider: ProjectMetaProvider | None = None,
        gatherer: FileGatherer | None = None,
        ast_provider: AstProvider | None = None,
        cache: CacheStore | None = None,
        logger: Logger | None = None,
        compatibility_check: CompatibilityCheck = check_compatibility,
        path_separator: str = os.sep,
    ) -> None:
        self.analyzer = analyzer
        self.meta_provider = meta_provider or PackageJsonMetaProvider()
        self.gatherer = gatherer or FilesystemGatherer(self.meta_provider)
        self.ast_provider = ast_provider or DialectAstProvider()
        self.cache = cache if cache is not None else MemoryStore()
        self.logger = logger or StdLogger()
        self.compatibility_check = compatibility_check
        self.path_separator = path_separator

    @property
    def name(self) -> str:
        return self.analyzer.name

    def execute(self, config: AnalyzerConfig | Mapping[str, Any] | None = None) -> AnalyzerQueryResult:
        self.logger.debug(f'Analyzer "{self.name}": started execute method')
        if not isinstance(config, AnalyzerConfig):
            config = AnalyzerConfig.from_dict(config or {})

        prepared = self.prepare(config)
        if isinstance(prepared, AnalyzerQueryResult):
            return prepared

        query_output = self.traverse(prepared, self.analyzer.analyze_file)
        return self.finalize(query_output, prepared)

    def prepare(self, config: AnalyzerConfig) -> AnalyzerQueryResult | PreparedRun:
        self.logger.debug(f'Analyzer "{self.name}": started prepare method')
        config = _unwind_provided(config)
        self._validate(config)

        target_meta = self._target_meta(config)
        reference_meta = self._reference_meta(config)
        identifier = derive_identifier(target_meta, reference_meta, config)

        # Provided results are trusted to be compatible; only on-disk pairs are checked.
        if config.reference_project_path and config.target_project_path and not config.skip_check_match_compatibility:
            compatibility = self.compatibility_check(config.reference_project_path, config.target_project_path)
            if not compatibility.compatible:
                self.logger.info(
                    f"skipping {pad(self.name)} for {identifier}: ({compatibility.reason})\n"
                    f"{config.target_project_path}"
                )
                return normalize_result(
                    f"[{compatibility.reason}]",
                    config,
                    name=self.name,
                    required_ast_dialect=self.analyzer.required_ast_dialect,
                    identifier=identifier,
                    target_project=target_meta,
                    reference_project=reference_meta,
                    path_separator=self.path_separator,
                )

        cached = self._cached_result(identifier)
        if cached is not None:
            return cached

        self.logger.info(f"starting {pad(self.name)} for {identifier}")
        run = PreparedRun(
            config=config,
            identifier=identifier,
            target_meta=target_meta,
            reference_meta=reference_meta,
        )
        if config.target_project_path and self._reusable_target(config) is None:
            run.target_data = self.gatherer.create_data_object(
                [config.target_project_path],
                config.gather_files_config,
            )[0]
        if config.reference_project_path:
            run.reference_data = self.gatherer.create_data_object(
                [config.reference_project_path],
                config.gather_files_config_reference or config.gather_files_config,
            )[0]
        return run

    def traverse(self, run: PreparedRun, analyze_file: AnalyzeFile) -> QueryOutput:
        self.logger.debug(f'Analyzer "{self.name}": started traverse method')
        reusable = self._reusable_target(run.config)
        if reusable is not None:
            return self.analyzer.analyze_provided(reusable, run.reference_meta)
        if run.target_data is None:
            raise AnalyzerConfigError(f"{self.name}: no target files to analyze")

        dialect = self.analyzer.required_ast_dialect
        project_data = self.ast_provider.add_ast_to(run.target_data, dialect)
        if project_data.failed:
            self.logger.info(f"{len(project_data.failed)} file(s) could not be parsed as {dialect}")

        root = project_data.project.path or run.config.target_project_path or "."
        project_meta = run.target_meta or project_data.project
        entries: list[dict[str, Any]] = []
        for entry in project_data.entries:
            relative_path = relative_from_root(entry.file, root)
            self.logger.debug(entry.file)
            context = FileContext(
                source_text=entry.source_text,
                relative_path=relative_path,
                project_meta=project_meta,
                reference_meta=run.reference_meta,
                options=run.config.options,
            )
            analysis = analyze_file(entry.ast, context)
            entries.append({"file": relative_path, "meta": analysis.meta, "result": analysis.result})
        return [item for item in entries if item["result"]]

    def finalize(self, query_output: QueryOutput, run: PreparedRun) -> AnalyzerQueryResult:
        self.logger.debug(f'Analyzer "{self.name}": started finalize method')
        result = normalize_result(
            query_output,
            run.config,
            name=self.name,
            required_ast_dialect=self.analyzer.required_ast_dialect,
            identifier=run.identifier,
            target_project=run.target_meta,
            reference_project=run.reference_meta,
            path_separator=self.path_separator,
        )
        self.cache.put(self.name, run.identifier, result)
        self.logger.success(f"finished {pad(self.name)} for {run.identifier}")
        return result

    def _validate(self, config: AnalyzerConfig) -> None:
        if not config.target_project_path:
            if config.target_project_result is None:
                raise AnalyzerConfigError(f"{self.name}: a target project path or result is required")
            if self._reusable_target(config) is None:
                provided = unwind_result(config.target_project_result).analyzer_meta.name
                raise AnalyzerConfigError(f"{self.name}: cannot analyze a provided '{provided}' result")
        if self.analyzer.requires_reference and not (
            config.reference_project_path or config.reference_project_result is not None
        ):
            raise AnalyzerConfigError(f"{self.name}: a reference project is required")

    def _reusable_target(self, config: AnalyzerConfig) -> AnalyzerQueryResult | None:
        provided = config.target_project_result
        if provided is None or self.analyzer.analyze_provided is None:
            return None
        result = unwind_result(provided)
        # Skip-results and other analyzers' outputs are not valid input.
        if result.analyzer_meta.name != self.analyzer.consumes or not isinstance(result.query_output, list):
            return None
        return result

    def _target_meta(self, config: AnalyzerConfig) -> ProjectMeta | None:
        if config.target_project_result is None:
            return self.meta_provider.get_project_meta(config.target_project_path)
        return unwind_result(config.target_project_result).analyzer_meta.target_project

    def _reference_meta(self, config: AnalyzerConfig) -> ProjectMeta | None:
        if config.reference_project_path and config.reference_project_result is None:
            return self.meta_provider.get_project_meta(config.reference_project_path)
        if config.reference_project_result is not None:
            return unwind_result(config.reference_project_result).analyzer_meta.target_project
        return None

    def _cached_result(self, identifier: str) -> AnalyzerQueryResult | None:
        payload = self.cache.get(self.name, identifier)
        if not payload:
            return None
        try:
            result = unwind_result(payload)
        except (KeyError, TypeError):
            return None
        self.logger.success(f"cached version found for {identifier}")
        return replace(result, analyzer_meta=replace(result.analyzer_meta, from_cache=True))
