"""Tree-sitter parsing for syntactic analysis.

This module only turns bytes into a concrete syntax tree and reports how
healthy that tree is. Turning the tree into syntax facts is the job of the
per-language extractors in ``srcmodel.index._internal.extraction``.

``tree_sitter.Parser`` is not safe to share between threads; use
``parser_for_current_thread()`` from worker threads.
"""

from __future__ import annotations

import importlib
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tree_sitter

from srcmodel.index._internal.parsing.packs import LanguagePack, get_pack, get_pack_for_ext


@dataclass
class ParseResult:
    """Result of parsing a file."""

    tree: Any  # Tree-sitter Tree (not serializable)
    language: str
    error_count: int
    total_nodes: int
    root_node: Any  # Tree-sitter Node

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0


@dataclass
class TreeSitterParser:
    """
    Tree-sitter parser with per-instance grammar caching.

    Usage::

        parser = TreeSitterParser()
        result = parser.parse(Path("cmd/main.go"), content)
        if result.has_errors:
            ...
    """

    _parser: Any = field(default=None, repr=False)
    _languages: dict[str, Any] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        self._parser = tree_sitter.Parser()
        self._languages = {}

    def _get_language(self, pack: LanguagePack) -> Any:
        """Get or load the tree-sitter Language for a pack."""
        if pack.grammar_name in self._languages:
            return self._languages[pack.grammar_name]

        try:
            mod = importlib.import_module(pack.grammar_module)
            lang_fn = getattr(mod, pack.language_func or "language")
        except (ImportError, AttributeError) as err:
            raise ValueError(
                f"Language not available: {pack.name} (install {pack.grammar_package}>={pack.min_version})"
            ) from err

        lang = tree_sitter.Language(lang_fn())
        self._languages[pack.grammar_name] = lang
        return lang

    def detect_pack(self, path: Path) -> LanguagePack | None:
        return get_pack_for_ext(path.suffix)

    def parse(self, path: Path, content: bytes | None = None, language: str | None = None) -> ParseResult:
        """
        Parse a file with Tree-sitter.

        Args:
            path: Path to file (used for language detection)
            content: File content as bytes. If None, reads from path.
            language: Force a language instead of detecting from the extension.

        Returns:
            ParseResult with tree, language, and error info.

        Raises:
            ValueError: Unsupported extension or grammar not installed.
        """
        if content is None:
            content = path.read_bytes()

        pack = get_pack(language) if language else self.detect_pack(path)
        if pack is None:
            raise ValueError(f"Unsupported file extension: {path.suffix.lstrip('.')}")

        self._parser.language = self._get_language(pack)
        tree = self._parser.parse(content)

        error_count, total_nodes = _count_nodes(tree.root_node)

        return ParseResult(
            tree=tree,
            language=pack.name,
            error_count=error_count,
            total_nodes=total_nodes,
            root_node=tree.root_node,
        )


def _count_nodes(root: Any) -> tuple[int, int]:
    """Count ERROR/missing nodes and total nodes without recursion."""
    error_count = 0
    total_nodes = 0
    stack = [root]
    while stack:
        node = stack.pop()
        total_nodes += 1
        if node.type == "ERROR" or node.is_missing:
            error_count += 1
        stack.extend(node.children)
    return error_count, total_nodes


_local = threading.local()


def parser_for_current_thread() -> TreeSitterParser:
    """Return this thread's parser, creating it on first use."""
    parser: TreeSitterParser | None = getattr(_local, "parser", None)
    if parser is None:
        parser = TreeSitterParser()
        _local.parser = parser
    return parser
