from __future__ import annotations

from typing import Any

from astgate.analyzers.common import AnalyzerSpec
from astgate.analyzers.js_nodes import node_text, string_value, walk
from astgate.schemas import FileAnalysis, FileContext

NAMED_DECLARATIONS = {"function_declaration", "generator_function_declaration", "class_declaration"}


def _declared_names(declaration: Any) -> list[str]:
    if declaration.type in NAMED_DECLARATIONS:
        return [node_text(declaration.child_by_field_name("name"))]
    if declaration.type in {"lexical_declaration", "variable_declaration"}:
        return [
            node_text(item.child_by_field_name("name"))
            for item in declaration.named_children
            if item.type == "variable_declarator"
        ]
    return []


def _export_specifiers(statement: Any) -> list[str]:
    if any(child.type == "default" for child in statement.children):
        return ["[default]"]
    declaration = statement.child_by_field_name("declaration")
    if declaration is not None:
        return _declared_names(declaration)

    specifiers: list[str] = []
    for child in statement.named_children:
        if child.type == "export_clause":
            for item in child.named_children:
                if item.type != "export_specifier":
                    continue
                alias = item.child_by_field_name("alias")
                specifiers.append(node_text(alias or item.child_by_field_name("name")))
        elif child.type == "namespace_export":
            specifiers.append("[*]")
    if not specifiers and any(child.type == "*" for child in statement.children):
        specifiers.append("[*]")
    return specifiers


def analyze_exports(tree: Any, context: FileContext) -> FileAnalysis:
    entries: list[dict[str, Any]] = []
    for node in walk(tree.root_node):
        if node.type != "export_statement":
            continue
        source_node = node.child_by_field_name("source")
        entries.append(
            {
                "exportSpecifiers": _export_specifiers(node),
                "source": string_value(source_node) if source_node is not None else None,
            }
        )
    meta = {"exportCount": sum(len(item["exportSpecifiers"]) for item in entries)} if entries else None
    return FileAnalysis(result=entries, meta=meta)


FIND_EXPORTS = AnalyzerSpec(name="find-exports", analyze_file=analyze_exports)
