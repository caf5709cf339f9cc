from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, replace
from typing import Any, Union

SKIP_NO_DEPENDENCY = "no-dependency"
SKIP_NO_MATCHED_VERSION = "no-matched-version"

QueryOutput = Union[list[dict[str, Any]], str]


class Serializable:
    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class ProjectMeta(Serializable):
    name: str
    version: str
    path: str | None = None
    commit_hash: str | None = None

    def without_path(self) -> ProjectMeta:
        return replace(self, path=None)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "version": self.version}
        if self.commit_hash:
            data["commitHash"] = self.commit_hash
        if self.path is not None:
            data["path"] = self.path
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ProjectMeta:
        return cls(
            name=str(data.get("name", "")),
            version=str(data.get("version", "")),
            path=data.get("path"),
            commit_hash=data.get("commitHash"),
        )


@dataclass(frozen=True, slots=True)
class GatherFilesConfig(Serializable):
    extensions: list[str] = field(default_factory=lambda: [".js"])
    allowlist: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GatherFilesConfig:
        return cls(
            extensions=list(data.get("extensions", [".js"])),
            allowlist=list(data.get("allowlist", [])),
        )


@dataclass(slots=True)
class FileEntry:
    file: str
    source_text: str


@dataclass(slots=True)
class ProjectInputData:
    project: ProjectMeta
    entries: list[FileEntry] = field(default_factory=list)


@dataclass(slots=True)
class AstEntry:
    file: str
    source_text: str
    ast: Any


@dataclass(slots=True)
class ProjectInputDataWithAst:
    project: ProjectMeta
    entries: list[AstEntry] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class FileContext:
    source_text: str
    relative_path: str
    project_meta: ProjectMeta
    reference_meta: ProjectMeta | None = None
    options: Mapping[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class FileAnalysis:
    result: list[Any]
    meta: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class AnalyzerMeta(Serializable):
    name: str
    required_ast_dialect: str
    identifier: str
    configuration: dict[str, Any]
    target_project: ProjectMeta | None = None
    reference_project: ProjectMeta | None = None
    from_cache: bool = False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "requiredAstDialect": self.required_ast_dialect,
            "identifier": self.identifier,
        }
        if self.target_project is not None:
            data["targetProject"] = self.target_project.to_dict()
        if self.reference_project is not None:
            data["referenceProject"] = self.reference_project.to_dict()
        data["configuration"] = self.configuration
        if self.from_cache:
            data["__fromCache"] = True
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AnalyzerMeta:
        target = data.get("targetProject")
        reference = data.get("referenceProject")
        return cls(
            name=data.get("name", ""),
            required_ast_dialect=data.get("requiredAstDialect", ""),
            identifier=data.get("identifier", ""),
            configuration=dict(data.get("configuration", {})),
            target_project=ProjectMeta.from_dict(target) if target else None,
            reference_project=ProjectMeta.from_dict(reference) if reference else None,
            from_cache=bool(data.get("__fromCache", False)),
        )


@dataclass(frozen=True, slots=True)
class AnalyzerQueryResult(Serializable):
    query_output: QueryOutput
    analyzer_meta: AnalyzerMeta

    @property
    def skip_reason(self) -> str | None:
        if isinstance(self.query_output, str):
            return self.query_output.strip("[]")
        return None

    def to_dict(self) -> dict[str, Any]:
        return {"queryOutput": self.query_output, "analyzerMeta": self.analyzer_meta.to_dict()}

    def to_wrapped(self) -> dict[str, Any]:
        """Shape written to disk: the meta block nests ``analyzerMeta``."""
        return {"queryOutput": self.query_output, "meta": {"analyzerMeta": self.analyzer_meta.to_dict()}}


def unwind_result(value: AnalyzerQueryResult | Mapping[str, Any]) -> AnalyzerQueryResult:
    if isinstance(value, AnalyzerQueryResult):
        return value
    if "analyzerMeta" in value:
        meta = value["analyzerMeta"]
    else:
        meta = value["meta"]["analyzerMeta"]
    return AnalyzerQueryResult(
        query_output=value["queryOutput"],
        analyzer_meta=AnalyzerMeta.from_dict(meta),
    )


ProvidedResult = Union[AnalyzerQueryResult, Mapping[str, Any]]


def portable_result(value: ProvidedResult) -> dict[str, Any]:
    """Unwrapped dict of a provided result with the cache marker cleared."""
    result = unwind_result(value)
    return replace(result, analyzer_meta=replace(result.analyzer_meta, from_cache=False)).to_dict()


_CONFIG_KEYS = {
    "targetProjectPath": "target_project_path",
    "referenceProjectPath": "reference_project_path",
    "gatherFilesConfig": "gather_files_config",
    "gatherFilesConfigReference": "gather_files_config_reference",
    "skipCheckMatchCompatibility": "skip_check_match_compatibility",
    "targetProjectResult": "target_project_result",
    "referenceProjectResult": "reference_project_result",
}


@dataclass(frozen=True, slots=True)
class AnalyzerConfig(Serializable):
    target_project_path: str | None = None
    reference_project_path: str | None = None
    gather_files_config: GatherFilesConfig = field(default_factory=GatherFilesConfig)
    gather_files_config_reference: GatherFilesConfig | None = None
    skip_check_match_compatibility: bool | None = None
    target_project_result: ProvidedResult | None = None
    reference_project_result: ProvidedResult | None = None
    options: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AnalyzerConfig:
        """Build a config from camelCase keys; unknown keys become analyzer options."""
        merged: dict[str, Any] = {"targetProjectPath": None, "referenceProjectPath": None, **data}
        kwargs: dict[str, Any] = {}
        options: dict[str, Any] = dict(merged.pop("options", None) or {})
        for key, value in merged.items():
            attr = _CONFIG_KEYS.get(key)
            if attr is None:
                options[key] = value
            elif attr.startswith("gather_files_config") and isinstance(value, Mapping):
                kwargs[attr] = GatherFilesConfig.from_dict(value)
            elif attr == "skip_check_match_compatibility":
                kwargs[attr] = True if value else None
            elif attr.endswith("_path") and value is not None:
                kwargs[attr] = str(value)
            else:
                kwargs[attr] = value
        if kwargs.get("gather_files_config") is None:
            kwargs.pop("gather_files_config", None)
        return cls(options=options, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = dict(self.options)
        if self.target_project_path is not None:
            data["targetProjectPath"] = self.target_project_path
        if self.reference_project_path is not None:
            data["referenceProjectPath"] = self.reference_project_path
        data["gatherFilesConfig"] = self.gather_files_config.to_dict()
        if self.gather_files_config_reference is not None:
            data["gatherFilesConfigReference"] = self.gather_files_config_reference.to_dict()
        if self.skip_check_match_compatibility:
            data["skipCheckMatchCompatibility"] = True
        if self.target_project_result is not None:
            data["targetProjectResult"] = portable_result(self.target_project_result)
        if self.reference_project_result is not None:
            data["referenceProjectResult"] = portable_result(self.reference_project_result)
        return data
