"""Closed set of syntax shapes the analyzer recognises.

These variants carry plain Python values only, so handlers never touch the
underlying parse tree.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union

COMPONENT_ANNOTATION = "Component"
LAZY_LOAD_ENTRY_POINT = "loadChildren"


class NodeKind(Enum):
    IMPORT = "import"
    COMPONENT_CLASS = "component_class"
    LAZY_LOAD = "lazy_load"


class TemplateKind(Enum):
    INLINE = "template"
    EXTERNAL = "templateUrl"


@dataclass(frozen=True)
class ImportNode:
    """``import a, { b as c } from "module"``; *bindings* holds local names."""

    kind: ClassVar[NodeKind] = NodeKind.IMPORT

    specifier: str
    bindings: tuple[str, ...] = ()


@dataclass(frozen=True)
class ComponentClassNode:
    kind: ClassVar[NodeKind] = NodeKind.COMPONENT_CLASS

    name: str
    selector: str | None = None
    template: TemplateKind | None = None


@dataclass(frozen=True)
class LazyLoadNode:
    kind: ClassVar[NodeKind] = NodeKind.LAZY_LOAD

    reference: str


SyntaxNode = Union[ImportNode, ComponentClassNode, LazyLoadNode]


def is_component_annotation(reference: str) -> bool:
    """True if a decorator callee names the component annotation.

    Accepts a bare reference (``Component``) or a qualified one
    (``core.Component``).
    """
    return reference.rsplit(".", 1)[-1].strip() == COMPONENT_ANNOTATION


def is_lazy_load_call(callee: str) -> bool:
    return callee == LAZY_LOAD_ENTRY_POINT
