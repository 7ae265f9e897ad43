"""Per-file syntax analysis: classify UI declarations in TypeScript sources."""

from ds_adoption.analyzer.analyzer import FileFold, analyze_file, analyze_source
from ds_adoption.analyzer.nodes import NodeKind, is_component_annotation

__all__ = ["FileFold", "NodeKind", "analyze_file", "analyze_source", "is_component_annotation"]
