from pathlib import Path

from astgate.analyzers.find_exports import FIND_EXPORTS
from astgate.analyzers.find_imports import FIND_IMPORTS
from astgate.analyzers.match_imports import MATCH_IMPORTS
from astgate.core.driver import AnalyzerDriver
from astgate.logs import NullLogger
from astgate.storage.common import MemoryStore

FIXTURES = Path(__file__).parent / "fixtures" / "projects"
GATHER = {"extensions": [".js"], "allowlist": ["!test"]}


def _driver(analyzer) -> AnalyzerDriver:
    return AnalyzerDriver(analyzer, cache=MemoryStore(), logger=NullLogger())


def _by_file(result) -> dict:
    return {item["file"]: item for item in result.query_output}


def test_find_imports_covers_static_require_and_dynamic_forms() -> None:
    result = _driver(FIND_IMPORTS).execute(
        {"targetProjectPath": str(FIXTURES / "importing-target"), "gatherFilesConfig": GATHER}
    )

    files = _by_file(result)
    assert list(files) == ["./src/app.js", "./src/helpers/helper.js"]
    assert files["./src/app.js"]["result"] == [
        {"importSpecifiers": ["Button", "Card"], "source": "dep-a", "normalizedSource": "dep-a"},
        {
            "importSpecifiers": ["[default]"],
            "source": "./helpers/helper.js",
            "normalizedSource": "./src/helpers/helper.js",
        },
        {"importSpecifiers": ["[file]"], "source": "dep-a/styles.js", "normalizedSource": "dep-a/styles.js"},
        {"importSpecifiers": ["[require]"], "source": "fs", "normalizedSource": "fs"},
        {"importSpecifiers": ["[dynamic]"], "source": "dep-a/lazy.js", "normalizedSource": "dep-a/lazy.js"},
    ]
    assert files["./src/helpers/helper.js"]["result"] == [
        {
            "importSpecifiers": ["[re-export]"],
            "source": "./other.js",
            "normalizedSource": "./src/helpers/other.js",
        }
    ]


def test_find_imports_only_external_sources_option() -> None:
    result = _driver(FIND_IMPORTS).execute(
        {
            "targetProjectPath": str(FIXTURES / "importing-target"),
            "gatherFilesConfig": GATHER,
            "onlyExternalSources": True,
        }
    )

    assert [item["file"] for item in result.query_output] == ["./src/app.js"]
    sources = [entry["source"] for entry in result.query_output[0]["result"]]
    assert sources == ["dep-a", "dep-a/styles.js", "fs", "dep-a/lazy.js"]
    assert result.analyzer_meta.configuration["onlyExternalSources"] is True


def test_find_exports_lists_specifiers_and_counts() -> None:
    result = _driver(FIND_EXPORTS).execute(
        {"targetProjectPath": str(FIXTURES / "importing-target"), "gatherFilesConfig": GATHER}
    )

    files = _by_file(result)
    assert files["./src/app.js"]["result"] == [{"exportSpecifiers": ["run"], "source": None}]
    assert files["./src/app.js"]["meta"] == {"exportCount": 1}
    assert files["./src/helpers/helper.js"]["result"] == [
        {"exportSpecifiers": ["[default]"], "source": None},
        {"exportSpecifiers": ["a", "b"], "source": None},
        {"exportSpecifiers": ["y"], "source": None},
        {"exportSpecifiers": ["[*]"], "source": "./other.js"},
    ]
    assert files["./src/helpers/helper.js"]["meta"] == {"exportCount": 5}


def test_match_imports_keeps_only_reference_sources() -> None:
    result = _driver(MATCH_IMPORTS).execute(
        {
            "targetProjectPath": str(FIXTURES / "importing-target"),
            "referenceProjectPath": str(FIXTURES / "dep-a"),
            "gatherFilesConfig": GATHER,
        }
    )

    assert result.skip_reason is None
    assert result.analyzer_meta.identifier.startswith("importing-target_0.4.0_+_dep-a_1.2.0__")
    assert [item["file"] for item in result.query_output] == ["./src/app.js"]
    assert result.query_output[0]["result"] == [
        {"importSpecifiers": ["Button", "Card"], "source": "dep-a", "exportingProject": "dep-a#1.2.0"},
        {"importSpecifiers": ["[file]"], "source": "dep-a/styles.js", "exportingProject": "dep-a#1.2.0"},
        {"importSpecifiers": ["[dynamic]"], "source": "dep-a/lazy.js", "exportingProject": "dep-a#1.2.0"},
    ]


def test_match_imports_skips_dev_dependency_out_of_range() -> None:
    result = _driver(MATCH_IMPORTS).execute(
        {
            "targetProjectPath": str(FIXTURES / "importing-target"),
            "referenceProjectPath": str(FIXTURES / "dep-b"),
            "gatherFilesConfig": GATHER,
        }
    )

    assert result.query_output == "[no-matched-version]"


def test_unparsable_file_is_reported_not_fatal(make_project) -> None:
    project = make_project(
        "broken",
        {"name": "broken", "version": "0.1.0"},
        {"src/ok.js": "import a from 'a';\n", "src/bad.js": "import { from ;;\n"},
    )

    result = _driver(FIND_IMPORTS).execute({"targetProjectPath": str(project), "gatherFilesConfig": GATHER})

    assert [item["file"] for item in result.query_output] == ["./src/ok.js"]


def test_match_imports_from_provided_find_imports_result() -> None:
    target = str(FIXTURES / "importing-target")
    reference = str(FIXTURES / "dep-a")
    from_files = _driver(MATCH_IMPORTS).execute(
        {"targetProjectPath": target, "referenceProjectPath": reference, "gatherFilesConfig": GATHER}
    )
    imports = _driver(FIND_IMPORTS).execute({"targetProjectPath": target, "gatherFilesConfig": GATHER})

    from_result = _driver(MATCH_IMPORTS).execute(
        {"targetProjectResult": imports.to_wrapped(), "referenceProjectPath": reference}
    )

    assert from_result.query_output == from_files.query_output
    assert from_result.analyzer_meta.target_project == from_files.analyzer_meta.target_project
    assert from_result.analyzer_meta.reference_project == from_files.analyzer_meta.reference_project


def test_chained_match_run_reuses_cache_for_cached_upstream_result() -> None:
    config = {"targetProjectPath": str(FIXTURES / "importing-target"), "gatherFilesConfig": GATHER}
    upstream = _driver(FIND_IMPORTS)
    fresh = upstream.execute(config)
    cached = upstream.execute(config)
    downstream = _driver(MATCH_IMPORTS)

    first = downstream.execute({"targetProjectResult": fresh, "referenceProjectPath": str(FIXTURES / "dep-a")})
    second = downstream.execute(
        {"targetProjectResult": cached.to_wrapped(), "referenceProjectPath": str(FIXTURES / "dep-a")}
    )

    assert cached.analyzer_meta.from_cache is True
    assert second.analyzer_meta.identifier == first.analyzer_meta.identifier
    assert second.analyzer_meta.from_cache is True
    assert second.query_output == first.query_output
