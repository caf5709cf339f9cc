from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from astgate.config import EngineSettings, ensure_settings
from astgate.errors import AstGateError
from astgate.logs import StdLogger, setup_logging
from astgate.pipeline import run_batch
from astgate.schemas import GatherFilesConfig
from astgate.storage.sqlite_store import SQLiteStore
from astgate.utils import write_json

app = typer.Typer(help="astgate: cached, compatibility-gated AST analysis over project pairs")


def _load_settings(path: Path) -> EngineSettings:
    if not path.exists():
        return EngineSettings.default()
    return EngineSettings.from_path(path)


def gather_overrides(
    engine: EngineSettings,
    ext: list[str],
    allowlist: list[str],
    allowlist_reference: list[str],
) -> tuple[GatherFilesConfig | None, GatherFilesConfig | None]:
    if not (ext or allowlist or allowlist_reference):
        return None, None
    gather = GatherFilesConfig(
        extensions=ext or engine.gather.extensions,
        allowlist=allowlist or engine.gather.allowlist,
    )
    gather_reference = GatherFilesConfig(
        extensions=ext or engine.gather_reference.extensions,
        allowlist=allowlist_reference or engine.gather_reference.allowlist,
    )
    return gather, gather_reference


@app.command()
def init(
    settings: Path = typer.Option(Path(".astgate/settings.yaml"), help="Settings file path"),
    force: bool = typer.Option(False, help="Overwrite existing settings"),
) -> None:
    ensure_settings(settings, force=force)
    typer.echo(f"[astgate] settings at {settings.resolve()}")


@app.command()
def run(
    analyzer: str = typer.Argument(..., help="Analyzer name, e.g. find-imports"),
    target: list[Path] = typer.Option(..., "--target", "-t", help="Target project path (repeatable)"),
    reference: list[Path] = typer.Option([], "--reference", "-r", help="Reference project path (repeatable)"),
    ext: list[str] = typer.Option([], "--ext", help="File extension to gather (repeatable)"),
    allowlist: list[str] = typer.Option([], "--allowlist", help="Gather allowlist pattern, '!' excludes"),
    allowlist_reference: list[str] = typer.Option(
        [], "--allowlist-reference", help="Allowlist pattern for reference projects, '!' excludes"
    ),
    skip_compat: bool = typer.Option(False, "--skip-compat", help="Skip the dependency/version check"),
    settings: Path = typer.Option(Path(".astgate/settings.yaml"), help="Settings file path"),
    output: Optional[Path] = typer.Option(None, help="Write results as JSON to this file"),
) -> None:
    engine = _load_settings(settings)
    setup_logging(engine.logging.level, engine.logging.format)

    gather, gather_reference = gather_overrides(engine, ext, allowlist, allowlist_reference)

    try:
        batch = run_batch(
            analyzer,
            target_paths=target,
            reference_paths=reference or None,
            gather_files_config=gather,
            gather_files_config_reference=gather_reference,
            skip_check_match_compatibility=skip_compat,
            cache=SQLiteStore(engine.cache_path.resolve()),
            logger=StdLogger(),
            settings=engine,
        )
    except AstGateError as exc:
        typer.echo(f"[astgate] error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    for result in batch.results:
        meta = result.analyzer_meta
        if result.skip_reason is not None:
            status = f"skipped ({result.skip_reason})"
        else:
            status = f"{len(result.query_output)} file(s)"
        cached = " [cached]" if meta.from_cache else ""
        typer.echo(f"- {meta.identifier}: {status}{cached}")

    if output is not None:
        write_json(output, [item.to_wrapped() for item in batch.results])
        typer.echo(f"[astgate] results: {output}")

    typer.echo(
        f"[astgate] {analyzer} complete: {len(batch.analyzed)} analyzed, "
        f"{len(batch.skipped)} skipped, {len(batch.from_cache)} from cache"
    )


@app.command()
def forget(
    analyzer: str = typer.Argument(..., help="Analyzer name"),
    identifier: str = typer.Argument(..., help="Result identifier to drop"),
    settings: Path = typer.Option(Path(".astgate/settings.yaml"), help="Settings file path"),
) -> None:
    engine = _load_settings(settings)
    store = SQLiteStore(engine.cache_path.resolve())
    if not store.delete(analyzer, identifier):
        typer.echo(f"[astgate] no cached result for {analyzer} {identifier}")
        raise typer.Exit(code=1)
    typer.echo(f"[astgate] removed {analyzer} {identifier}")


if __name__ == "__main__":
    app()
