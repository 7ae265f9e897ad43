"""Tree-sitter TypeScript parsing and node classification.

This is the only module that knows the tree-sitter node layout. It turns a
parse tree into a document-ordered stream of :mod:`~ds_adoption.analyzer.nodes`
variants; swapping the parser means replacing this module only.
"""

from __future__ import annotations

from typing import Callable, Iterator

import structlog
import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

from ds_adoption.analyzer.nodes import (
    ComponentClassNode,
    ImportNode,
    LazyLoadNode,
    SyntaxNode,
    TemplateKind,
    is_component_annotation,
    is_lazy_load_call,
)
from ds_adoption.exceptions import SourceParseError

log = structlog.get_logger("ds_adoption.analyzer")

TS_LANGUAGE = Language(tree_sitter_typescript.language_typescript())

_STRING_TYPES = frozenset({"string", "template_string"})


def parse_source(source: bytes, file_path: str) -> Tree:
    """Parse TypeScript source, raising ``SourceParseError`` if the tree has errors."""
    tree = Parser(TS_LANGUAGE).parse(source)
    if tree.root_node.has_error:
        raise SourceParseError(file_path, _first_error_line(tree.root_node))
    return tree


def _first_error_line(root: Node) -> int | None:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_error or node.is_missing:
            return node.start_point[0] + 1
        stack.extend(reversed(node.children))
    return None


def iter_syntax_nodes(root: Node) -> Iterator[SyntaxNode]:
    """Yield recognised shapes in pre-order (source) order."""
    stack = [root]
    while stack:
        node = stack.pop()
        classify = _CLASSIFIERS.get(node.type)
        if classify is not None:
            variant = classify(node)
            if variant is not None:
                yield variant
        stack.extend(reversed(node.named_children))


# ── helpers ──────────────────────────────────────────────────────────────


def _text(node: Node) -> str:
    return (node.text or b"").decode("utf-8", errors="replace")


def _named(node: Node) -> list[Node]:
    return [c for c in node.named_children if c.type != "comment"]


def _string_value(node: Node | None) -> str | None:
    """Literal value of a string or substitution-free template string."""
    if node is None or node.type not in _STRING_TYPES:
        return None
    if any(c.type == "template_substitution" for c in node.named_children):
        return None
    return _text(node)[1:-1]


def _property_key(node: Node | None) -> str | None:
    if node is None:
        return None
    if node.type == "property_identifier":
        return _text(node)
    return _string_value(node)


# ── classifiers ──────────────────────────────────────────────────────────


def _classify_import(node: Node) -> ImportNode | None:
    specifier = _string_value(node.child_by_field_name("source"))
    if specifier is None:
        # import x = require("...")
        return None

    bindings: list[str] = []
    for clause in _named(node):
        if clause.type != "import_clause":
            continue
        for part in _named(clause):
            if part.type == "identifier":
                bindings.append(_text(part))
            elif part.type == "named_imports":
                for spec in _named(part):
                    if spec.type != "import_specifier":
                        continue
                    local = spec.child_by_field_name("alias") or spec.child_by_field_name("name")
                    if local is not None:
                        bindings.append(_text(local))
    return ImportNode(specifier=specifier, bindings=tuple(bindings))


def _decorators(node: Node) -> list[Node]:
    own = [c for c in node.named_children if c.type == "decorator"]
    parent = node.parent
    if parent is not None and parent.type == "export_statement":
        return [c for c in parent.named_children if c.type == "decorator"] + own
    return own


def _classify_component_class(node: Node) -> ComponentClassNode | None:
    for decorator in _decorators(node):
        parts = _named(decorator)
        if not parts:
            continue
        expr = parts[0]
        if expr.type == "call_expression":
            callee = expr.child_by_field_name("function")
            arguments = expr.child_by_field_name("arguments")
        else:
            callee, arguments = expr, None
        if callee is None or not is_component_annotation(_text(callee)):
            continue

        name_node = node.child_by_field_name("name")
        selector, template = _read_component_options(arguments)
        return ComponentClassNode(
            name=_text(name_node) if name_node is not None else "default",
            selector=selector,
            template=template,
        )
    return None


def _read_component_options(arguments: Node | None) -> tuple[str | None, TemplateKind | None]:
    if arguments is None or arguments.type != "arguments":
        return None, None
    options = next((a for a in _named(arguments) if a.type == "object"), None)
    if options is None:
        return None, None

    selector: str | None = None
    template: TemplateKind | None = None
    for pair in _named(options):
        if pair.type != "pair":
            continue
        key = _property_key(pair.child_by_field_name("key"))
        if key == "selector":
            selector = _string_value(pair.child_by_field_name("value"))
        elif key in ("template", "templateUrl") and template is None:
            template = TemplateKind(key)
    return selector, template


def _classify_lazy_load(node: Node) -> LazyLoadNode | None:
    callee = node.child_by_field_name("function")
    if callee is None or callee.type != "identifier" or not is_lazy_load_call(_text(callee)):
        return None
    arguments = node.child_by_field_name("arguments")
    args = _named(arguments) if arguments is not None and arguments.type == "arguments" else []
    reference = _string_value(args[0]) if args else None
    if reference is None:
        log.debug("analyzer.lazy_load_without_literal", line=node.start_point[0] + 1)
        return None
    return LazyLoadNode(reference=reference)


_CLASSIFIERS: dict[str, Callable[[Node], SyntaxNode | None]] = {
    "import_statement": _classify_import,
    "class_declaration": _classify_component_class,
    "abstract_class_declaration": _classify_component_class,
    "call_expression": _classify_lazy_load,
}
