"""SyntaxAnalyzer: classify one file's UI declarations as an explicit fold."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
from functools import reduce
from pathlib import Path
from typing import Callable, Iterable

import structlog

from ds_adoption.analyzer.nodes import (
    ComponentClassNode,
    ImportNode,
    LazyLoadNode,
    NodeKind,
    SyntaxNode,
    TemplateKind,
)
from ds_adoption.analyzer.syntax import iter_syntax_nodes, parse_source
from ds_adoption.config import ScanConfiguration
from ds_adoption.exceptions import SourceParseError
from ds_adoption.models import (
    CUSTOM_ORIGIN,
    LAZY_LOADED_NAME,
    Classification,
    ComponentRecord,
    UsageShape,
)
from ds_adoption.resolver import ImportResolver

log = structlog.get_logger("ds_adoption.analyzer")

_USAGE_BY_TEMPLATE = {
    TemplateKind.INLINE: UsageShape(inline=1, external=0),
    TemplateKind.EXTERNAL: UsageShape(inline=0, external=1),
    None: UsageShape(inline=0, external=0),
}


@dataclass(frozen=True)
class FileContext:
    """Read-only inputs shared by every step of one file's fold."""

    file_path: str
    config: ScanConfiguration
    resolver: ImportResolver


@dataclass(frozen=True)
class FileFold:
    """Accumulator passed forward through one file's traversal."""

    design_system_seen: bool = False
    records: tuple[ComponentRecord, ...] = ()

    def emit(self, *records: ComponentRecord) -> FileFold:
        return replace(self, records=self.records + records)


def _on_import(state: FileFold, node: ImportNode, ctx: FileContext) -> FileFold:
    origin = ctx.resolver.resolve(node.specifier, ctx.file_path)
    if not ctx.config.is_design_system(origin):
        return state
    state = replace(state, design_system_seen=True)
    return state.emit(
        *(
            ComponentRecord(
                name=binding,
                classification=Classification.DESIGN_SYSTEM_IMPORT,
                origin=origin,
                file_path=ctx.file_path,
                usage_shape=UsageShape(),
            )
            for binding in node.bindings
        )
    )


def _on_component_class(state: FileFold, node: ComponentClassNode, ctx: FileContext) -> FileFold:
    return state.emit(
        ComponentRecord(
            name=node.name,
            classification=Classification.CUSTOM_COMPONENT,
            origin=CUSTOM_ORIGIN,
            file_path=ctx.file_path,
            composition_flag=state.design_system_seen,
            usage_shape=_USAGE_BY_TEMPLATE[node.template],
            selector=node.selector,
        )
    )


def _on_lazy_load(state: FileFold, node: LazyLoadNode, ctx: FileContext) -> FileFold:
    return state.emit(
        ComponentRecord(
            name=LAZY_LOADED_NAME,
            classification=Classification.DYNAMIC_IMPORT_REFERENCE,
            origin=node.reference,
            file_path=ctx.file_path,
        )
    )


HANDLERS: dict[NodeKind, Callable[[FileFold, SyntaxNode, FileContext], FileFold]] = {
    NodeKind.IMPORT: _on_import,  # type: ignore[dict-item]
    NodeKind.COMPONENT_CLASS: _on_component_class,  # type: ignore[dict-item]
    NodeKind.LAZY_LOAD: _on_lazy_load,  # type: ignore[dict-item]
}


def step(state: FileFold, node: SyntaxNode, ctx: FileContext) -> FileFold:
    """Advance the fold by one recognised node."""
    return HANDLERS[node.kind](state, node, ctx)


def fold_nodes(nodes: Iterable[SyntaxNode], ctx: FileContext) -> FileFold:
    return reduce(lambda state, node: step(state, node, ctx), nodes, FileFold())


def analyze_source(
    source: bytes,
    file_path: str,
    config: ScanConfiguration,
    resolver: ImportResolver,
) -> list[ComponentRecord]:
    """Classify one file's source. Raises ``SourceParseError`` on invalid syntax."""
    tree = parse_source(source, file_path)
    ctx = FileContext(file_path=file_path, config=config, resolver=resolver)
    return list(fold_nodes(iter_syntax_nodes(tree.root_node), ctx).records)


async def analyze_file(
    file_path: Path,
    config: ScanConfiguration,
    resolver: ImportResolver,
) -> list[ComponentRecord]:
    """Read and classify one file.

    Unreadable or unparsable files are logged and contribute no records.
    """
    path_str = str(file_path)
    try:
        content = await asyncio.to_thread(file_path.read_text, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        log.warning("analyzer.file_skipped", file=path_str, reason=f"unreadable: {exc}")
        return []

    try:
        return analyze_source(content.encode("utf-8"), path_str, config, resolver)
    except SourceParseError as exc:
        log.warning("analyzer.file_skipped", file=path_str, reason=str(exc))
        return []
