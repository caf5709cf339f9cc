from __future__ import annotations

from dataclasses import replace

from astgate.core.identifier import derive_identifier
from astgate.schemas import AnalyzerConfig, AnalyzerMeta, AnalyzerQueryResult, GatherFilesConfig, ProjectMeta


def _config(target: str, reference: str | None = None, **options) -> AnalyzerConfig:
    return AnalyzerConfig(
        target_project_path=target,
        reference_project_path=reference,
        gather_files_config=GatherFilesConfig(extensions=[".js"], allowlist=["!test"]),
        options=options,
    )


def test_identifier_ignores_project_location() -> None:
    first = derive_identifier(
        ProjectMeta(name="app", version="1.0.0", path="/home/a/app"),
        ProjectMeta(name="dep-a", version="1.2.0", path="/home/a/dep-a"),
        _config("/home/a/app", "/home/a/dep-a"),
    )
    second = derive_identifier(
        ProjectMeta(name="app", version="1.0.0", path="/srv/checkout-2/app"),
        ProjectMeta(name="dep-a", version="1.2.0", path="/srv/checkout-2/dep-a"),
        _config("/srv/checkout-2/app", "/srv/checkout-2/dep-a"),
    )
    assert first == second


def test_identifier_changes_with_version_and_configuration() -> None:
    base = derive_identifier(ProjectMeta(name="app", version="1.0.0"), None, _config("/x"))
    bumped = derive_identifier(ProjectMeta(name="app", version="1.0.1"), None, _config("/x"))
    configured = derive_identifier(ProjectMeta(name="app", version="1.0.0"), None, _config("/x", prefix="lea"))
    committed = derive_identifier(ProjectMeta(name="app", version="1.0.0", commit_hash="abc"), None, _config("/x"))

    assert len({base, bumped, configured, committed}) == 4


def test_identifier_label_names_both_projects() -> None:
    identifier = derive_identifier(
        ProjectMeta(name="@scope/app", version="1.0.0"),
        ProjectMeta(name="dep-a", version="1.2.0"),
        _config("/x", "/y"),
    )

    assert identifier.startswith("scope-app_1.0.0_+_dep-a_1.2.0__")
    assert "/" not in identifier


def test_provided_result_from_cache_keeps_the_identifier() -> None:
    fresh = AnalyzerQueryResult(
        query_output=[{"file": "./src/a.js", "meta": None, "result": [{"source": "dep-a"}]}],
        analyzer_meta=AnalyzerMeta(
            name="find-imports",
            required_ast_dialect="javascript",
            identifier="app_1.0.0__abc",
            configuration={},
            target_project=ProjectMeta(name="app", version="1.0.0"),
        ),
    )
    cached = replace(fresh, analyzer_meta=replace(fresh.analyzer_meta, from_cache=True))
    target = ProjectMeta(name="app", version="1.0.0")

    expected = derive_identifier(target, None, AnalyzerConfig(target_project_result=fresh))

    assert derive_identifier(target, None, AnalyzerConfig(target_project_result=cached)) == expected
    assert derive_identifier(target, None, AnalyzerConfig(target_project_result=cached.to_wrapped())) == expected


def test_explicit_false_skip_flag_matches_omitted_flag() -> None:
    target = ProjectMeta(name="app", version="1.0.0")
    omitted = AnalyzerConfig.from_dict({"targetProjectPath": "/x"})
    explicit = AnalyzerConfig.from_dict({"targetProjectPath": "/x", "skipCheckMatchCompatibility": False})
    skipping = AnalyzerConfig.from_dict({"targetProjectPath": "/x", "skipCheckMatchCompatibility": True})

    assert explicit.skip_check_match_compatibility is None
    assert derive_identifier(target, None, explicit) == derive_identifier(target, None, omitted)
    assert derive_identifier(target, None, AnalyzerConfig(skip_check_match_compatibility=False)) == derive_identifier(
        target, None, AnalyzerConfig()
    )
    assert derive_identifier(target, None, skipping) != derive_identifier(target, None, omitted)
