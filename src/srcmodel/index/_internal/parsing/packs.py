"""LanguagePack registry: single source of truth for tree-sitter config.

Each supported language has exactly ONE LanguagePack that consolidates:
- Grammar install metadata (package, module, version, loader function)
- File extension detection
- The mapping from grammar node types to syntax-fact kinds

The mapping is what keeps the aggregator ignorant of any grammar's node
vocabulary: extractors dispatch on ``SyntaxFactKind``, never on raw
node-type strings.

The PACKS registry is the canonical lookup: ``PACKS["go"]``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class SyntaxFactKind(str, Enum):
    """Closed set of top-level declarations an extractor understands."""

    PACKAGE_CLAUSE = "package_clause"
    IMPORT_DECLARATION = "import_declaration"
    TYPE_DECLARATION = "type_declaration"
    FUNCTION_DECLARATION = "function_declaration"
    METHOD_DECLARATION = "method_declaration"


@dataclass(frozen=True)
class LanguagePack:
    """Complete tree-sitter configuration for a single language."""

    # -- Identity --
    name: str  # Canonical language name ("go")
    grammar_name: str  # tree-sitter grammar key

    # -- Grammar install --
    grammar_package: str  # PyPI package ("tree-sitter-go")
    grammar_module: str  # Python import ("tree_sitter_go")
    min_version: str
    language_func: str | None = None  # Non-standard loader function name

    # -- File detection --
    extensions: frozenset[str] = field(default_factory=frozenset)

    # -- Top-level node type -> fact kind --
    fact_nodes: dict[str, SyntaxFactKind] = field(default_factory=dict)


# =========================================================================
# GO
# =========================================================================

GO_PACK = LanguagePack(
    name="go",
    grammar_name="go",
    grammar_package="tree-sitter-go",
    grammar_module="tree_sitter_go",
    min_version="0.23.0",
    extensions=frozenset({"go"}),
    fact_nodes={
        "package_clause": SyntaxFactKind.PACKAGE_CLAUSE,
        "import_declaration": SyntaxFactKind.IMPORT_DECLARATION,
        "type_declaration": SyntaxFactKind.TYPE_DECLARATION,
        "function_declaration": SyntaxFactKind.FUNCTION_DECLARATION,
        "method_declaration": SyntaxFactKind.METHOD_DECLARATION,
    },
)


PACKS: dict[str, LanguagePack] = {
    "go": GO_PACK,
    "golang": GO_PACK,
}

_EXT_INDEX: dict[str, LanguagePack] = {ext: pack for pack in PACKS.values() for ext in pack.extensions}


def get_pack(name: str) -> LanguagePack | None:
    """Look up a pack by canonical name or alias."""
    return PACKS.get(name)


def get_pack_for_ext(ext: str) -> LanguagePack | None:
    """Look up a pack by file extension (with or without the leading dot)."""
    return _EXT_INDEX.get(ext.lower().lstrip("."))
