"""Precondition for match analyzers.

A reference/target pair is only worth analyzing when the target actually
depends on the reference and the declared range accepts the reference's own
version. Anything else is reported as data so batch runs can move on.
"""

from __future__ import annotations

from dataclasses import dataclass

from nodesemver import satisfies

from astgate.core.manifest import read_manifest
from astgate.schemas import SKIP_NO_DEPENDENCY, SKIP_NO_MATCHED_VERSION

DEPENDENCY_FIELDS = ("devDependencies", "dependencies", "peerDependencies")


@dataclass(frozen=True, slots=True)
class Compatibility:
    compatible: bool
    reason: str | None = None


def _combined_dependencies(manifest: dict) -> dict[str, str]:
    combined: dict[str, str] = {}
    for key in DEPENDENCY_FIELDS:
        section = manifest.get(key) or {}
        if not isinstance(section, dict):
            continue
        for name, version_range in section.items():
            combined.setdefault(name, str(version_range))
    return combined


def _range_accepts(version: str, version_range: str) -> bool:
    try:
        return bool(satisfies(version, version_range, loose=True))
    except ValueError:
        return False


def check_compatibility(reference_path: str, target_path: str) -> Compatibility:
    reference_manifest = read_manifest(reference_path)
    target_manifest = read_manifest(target_path)

    dependencies = _combined_dependencies(target_manifest)
    reference_name = reference_manifest.get("name")
    if reference_name not in dependencies:
        return Compatibility(compatible=False, reason=SKIP_NO_DEPENDENCY)

    reference_version = str(reference_manifest.get("version", ""))
    if not _range_accepts(reference_version, dependencies[reference_name]):
        return Compatibility(compatible=False, reason=SKIP_NO_MATCHED_VERSION)
    return Compatibility(compatible=True)
