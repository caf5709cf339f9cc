from __future__ import annotations

import posixpath
from collections.abc import Iterator
from typing import Any


def walk(node: Any) -> Iterator[Any]:
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def node_text(node: Any | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8")


def string_value(node: Any | None) -> str:
    text = node_text(node)
    if len(text) >= 2 and text[0] in "'\"`" and text[-1] == text[0]:
        return text[1:-1]
    return text


def is_relative(source: str) -> bool:
    return source.startswith("./") or source.startswith("../") or source in {".", ".."}


def normalize_source(source: str, relative_path: str) -> str:
    if not is_relative(source):
        return source
    base = posixpath.dirname(relative_path.replace("\\", "/"))
    joined = posixpath.normpath(posixpath.join(base, source))
    return joined if joined.startswith("..") else f"./{joined.removeprefix('./')}"
