from __future__ import annotations

from typing import Any

from astgate.analyzers.common import AnalyzerSpec
from astgate.analyzers.js_nodes import is_relative, node_text, normalize_source, string_value, walk
from astgate.schemas import FileAnalysis, FileContext


def _import_specifiers(statement: Any) -> list[str]:
    specifiers: list[str] = []
    for child in statement.named_children:
        if child.type != "import_clause":
            continue
        for part in child.named_children:
            if part.type == "identifier":
                specifiers.append("[default]")
            elif part.type == "namespace_import":
                specifiers.append("[*]")
            elif part.type == "named_imports":
                for item in part.named_children:
                    if item.type == "import_specifier":
                        specifiers.append(node_text(item.child_by_field_name("name")))
    return specifiers


def _call_source(call: Any) -> str | None:
    function = call.child_by_field_name("function")
    if function is None:
        return None
    if function.type == "import" or (function.type == "identifier" and node_text(function) == "require"):
        arguments = call.child_by_field_name("arguments")
        if arguments is None or not arguments.named_children:
            return None
        first = arguments.named_children[0]
        if first.type == "string":
            return string_value(first)
    return None


def collect_imports(tree: Any, relative_path: str) -> list[dict[str, Any]]:
    found: list[dict[str, Any]] = []
    for node in walk(tree.root_node):
        if node.type == "import_statement":
            source = string_value(node.child_by_field_name("source"))
            specifiers = _import_specifiers(node) or ["[file]"]
        elif node.type == "export_statement" and node.child_by_field_name("source") is not None:
            source = string_value(node.child_by_field_name("source"))
            specifiers = ["[re-export]"]
        elif node.type == "call_expression":
            call_source = _call_source(node)
            if call_source is None:
                continue
            source = call_source
            specifiers = ["[dynamic]"] if node.child_by_field_name("function").type == "import" else ["[require]"]
        else:
            continue
        found.append(
            {
                "importSpecifiers": specifiers,
                "source": source,
                "normalizedSource": normalize_source(source, relative_path),
            }
        )
    return found


def analyze_imports(tree: Any, context: FileContext) -> FileAnalysis:
    entries = collect_imports(tree, context.relative_path)
    if context.options.get("onlyExternalSources"):
        entries = [item for item in entries if not is_relative(item["source"])]
    return FileAnalysis(result=entries)


FIND_IMPORTS = AnalyzerSpec(name="find-imports", analyze_file=analyze_imports)
