from __future__ import annotations

from astgate.analyzers.common import AnalyzerSpec
from astgate.analyzers.find_definitions import FIND_DEFINITIONS
from astgate.analyzers.find_exports import FIND_EXPORTS
from astgate.analyzers.find_imports import FIND_IMPORTS
from astgate.analyzers.match_imports import MATCH_IMPORTS
from astgate.errors import AnalyzerConfigError

ANALYZERS: dict[str, AnalyzerSpec] = {
    item.name: item for item in (FIND_IMPORTS, FIND_EXPORTS, MATCH_IMPORTS, FIND_DEFINITIONS)
}


def get_analyzer(name: str) -> AnalyzerSpec:
    try:
        return ANALYZERS[name]
    except KeyError as exc:
        known = ", ".join(sorted(ANALYZERS))
        raise AnalyzerConfigError(f"unknown analyzer '{name}' (known: {known})") from exc
