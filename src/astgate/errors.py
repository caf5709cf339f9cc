from __future__ import annotations


class AstGateError(RuntimeError):
    pass


class ManifestError(AstGateError):
    pass


class UnsupportedDialectError(AstGateError):
    pass


class AnalyzerConfigError(AstGateError):
    pass
