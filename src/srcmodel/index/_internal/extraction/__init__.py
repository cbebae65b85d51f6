"""Syntax-fact extraction protocol and registry.

An extractor turns one file's bytes into a ``FileFacts`` record. Extractors
parse with tree-sitter, then walk the top-level declarations and dispatch
each one on its ``SyntaxFactKind``; the raw node-type vocabulary of a
grammar never leaves this package.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from srcmodel.index._internal.parsing import (
    LanguagePack,
    SyntaxFactKind,
    parser_for_current_thread,
)
from srcmodel.index.models import FileFacts, FunctionFact, TypeFact

if TYPE_CHECKING:
    from tree_sitter import Node


@runtime_checkable
class SyntaxFactExtractor(Protocol):
    """Boundary every language extractor satisfies."""

    @property
    def language(self) -> str: ...

    def extract(self, path: Path, content: bytes) -> FileFacts:
        """Return the syntax facts for one file.

        Raises:
            ValueError: The grammar is unavailable or the file is unsupported.
        """
        ...


@dataclass
class FactBuffer:
    """Mutable accumulator filled while visiting one file."""

    package: str = ""
    imports: list[str] = field(default_factory=list)
    types: list[TypeFact] = field(default_factory=list)
    functions: list[FunctionFact] = field(default_factory=list)

    def build(self, error_count: int = 0) -> FileFacts:
        return FileFacts(
            package=self.package,
            imports=tuple(self.imports),
            types=tuple(self.types),
            functions=tuple(self.functions),
            error_count=error_count,
        )


# =============================================================================
# Base Extractor Implementation
# =============================================================================


class BaseFactExtractor(ABC):
    """Parse-then-visit skeleton shared by language extractors.

    Subclasses provide a ``LanguagePack`` and one ``visit_*`` method per
    ``SyntaxFactKind``.
    """

    def __init__(self, pack: LanguagePack) -> None:
        self._pack = pack
        self._handlers: dict[SyntaxFactKind, Callable[[Node, FactBuffer], None]] = {
            SyntaxFactKind.PACKAGE_CLAUSE: self.visit_package_clause,
            SyntaxFactKind.IMPORT_DECLARATION: self.visit_import_declaration,
            SyntaxFactKind.TYPE_DECLARATION: self.visit_type_declaration,
            SyntaxFactKind.FUNCTION_DECLARATION: self.visit_function_declaration,
            SyntaxFactKind.METHOD_DECLARATION: self.visit_method_declaration,
        }

    @property
    def language(self) -> str:
        return self._pack.name

    @property
    def extensions(self) -> frozenset[str]:
        return self._pack.extensions

    def extract(self, path: Path, content: bytes) -> FileFacts:
        result = parser_for_current_thread().parse(path, content, language=self._pack.name)
        buffer = FactBuffer()
        for node in self._top_level_nodes(result.root_node):
            kind = self._pack.fact_nodes.get(node.type)
            if kind is not None:
                self._handlers[kind](node, buffer)
        return buffer.build(error_count=result.error_count)

    @staticmethod
    def _top_level_nodes(root: Node) -> list[Node]:
        """Top-level declarations, including ones stranded inside ERROR nodes."""
        nodes: list[Node] = []
        for child in root.named_children:
            if child.type == "ERROR":
                nodes.extend(child.named_children)
            else:
                nodes.append(child)
        return nodes

    @abstractmethod
    def visit_package_clause(self, node: Node, facts: FactBuffer) -> None: ...

    @abstractmethod
    def visit_import_declaration(self, node: Node, facts: FactBuffer) -> None: ...

    @abstractmethod
    def visit_type_declaration(self, node: Node, facts: FactBuffer) -> None: ...

    @abstractmethod
    def visit_function_declaration(self, node: Node, facts: FactBuffer) -> None: ...

    @abstractmethod
    def visit_method_declaration(self, node: Node, facts: FactBuffer) -> None: ...


# =============================================================================
# Extractor Registry
# =============================================================================


class ExtractorRegistry:
    """Registry of fact extractors keyed by file extension."""

    def __init__(self) -> None:
        self._by_ext: dict[str, BaseFactExtractor] = {}

    def register(self, extractor: BaseFactExtractor) -> None:
        for ext in extractor.extensions:
            self._by_ext[ext] = extractor

    def get_for_path(self, path: Path) -> BaseFactExtractor | None:
        return self._by_ext.get(path.suffix.lower().lstrip("."))

    def supported_extensions(self) -> list[str]:
        return sorted(f".{ext}" for ext in self._by_ext)


_registry: ExtractorRegistry | None = None


def get_registry() -> ExtractorRegistry:
    """Get the global extractor registry, initializing if needed."""
    global _registry
    if _registry is None:
        _registry = ExtractorRegistry()
        _register_builtin_extractors(_registry)
    return _registry


def _register_builtin_extractors(registry: ExtractorRegistry) -> None:
    # Import here to avoid circular imports
    from srcmodel.index._internal.extraction.go import GoFactExtractor

    registry.register(GoFactExtractor())


__all__ = [
    "BaseFactExtractor",
    "ExtractorRegistry",
    "FactBuffer",
    "SyntaxFactExtractor",
    "get_registry",
]
