from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from astgate.analyzers.registry import get_analyzer
from astgate.config import EngineSettings
from astgate.core.driver import AnalyzerDriver
from astgate.logs import Logger
from astgate.schemas import AnalyzerConfig, AnalyzerQueryResult, GatherFilesConfig
from astgate.storage.common import CacheStore
from astgate.storage.sqlite_store import SQLiteStore


@dataclass(slots=True)
class BatchResult:
    results: list[AnalyzerQueryResult] = field(default_factory=list)

    @property
    def analyzed(self) -> list[AnalyzerQueryResult]:
        return [item for item in self.results if item.skip_reason is None]

    @property
    def skipped(self) -> list[AnalyzerQueryResult]:
        return [item for item in self.results if item.skip_reason is not None]

    @property
    def from_cache(self) -> list[AnalyzerQueryResult]:
        return [item for item in self.results if item.analyzer_meta.from_cache]


def flatten_query_outputs(results: list[AnalyzerQueryResult]) -> list[dict[str, Any]]:
    """Concatenate query outputs, leaving out skip-results such as ``[no-dependency]``."""
    flattened: list[dict[str, Any]] = []
    for result in results:
        if isinstance(result.query_output, str):
            continue
        flattened.extend(result.query_output)
    return flattened


def _driver(
    analyzer_name: str,
    cache: CacheStore | None,
    logger: Logger | None,
    settings: EngineSettings,
) -> AnalyzerDriver:
    return AnalyzerDriver(
        get_analyzer(analyzer_name),
        cache=cache if cache is not None else SQLiteStore(settings.cache_path),
        logger=logger,
    )


def run_analyzer(
    analyzer_name: str,
    config: AnalyzerConfig | Mapping[str, Any],
    cache: CacheStore | None = None,
    logger: Logger | None = None,
    settings: EngineSettings | None = None,
) -> AnalyzerQueryResult:
    settings = settings or EngineSettings.default()
    return _driver(analyzer_name, cache, logger, settings).execute(config)


def run_batch(
    analyzer_name: str,
    target_paths: list[Path],
    reference_paths: list[Path] | None = None,
    gather_files_config: GatherFilesConfig | None = None,
    gather_files_config_reference: GatherFilesConfig | None = None,
    skip_check_match_compatibility: bool = False,
    options: dict[str, Any] | None = None,
    cache: CacheStore | None = None,
    logger: Logger | None = None,
    settings: EngineSettings | None = None,
) -> BatchResult:
    """Run one analyzer over every target, or every target x reference pair, in order."""
    settings = settings or EngineSettings.default()
    driver = _driver(analyzer_name, cache, logger, settings)
    gather = gather_files_config or settings.gather
    gather_reference = gather_files_config_reference or settings.gather_reference

    pairs: list[tuple[Path, Path | None]] = []
    for target in target_paths:
        if reference_paths:
            pairs.extend((target, reference) for reference in reference_paths)
        else:
            pairs.append((target, None))

    batch = BatchResult()
    for target, reference in pairs:
        config = AnalyzerConfig(
            target_project_path=str(target.resolve()),
            reference_project_path=str(reference.resolve()) if reference else None,
            gather_files_config=gather,
            gather_files_config_reference=gather_reference if reference else None,
            skip_check_match_compatibility=True if skip_check_match_compatibility else None,
            options=dict(options or {}),
        )
        batch.results.append(driver.execute(config))
    return batch
