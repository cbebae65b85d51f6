"""Tree-sitter parsing for syntactic analysis."""

from srcmodel.index._internal.parsing.packs import (
    PACKS,
    LanguagePack,
    SyntaxFactKind,
    get_pack,
    get_pack_for_ext,
)
from srcmodel.index._internal.parsing.treesitter import (
    ParseResult,
    TreeSitterParser,
    parser_for_current_thread,
)

__all__ = [
    "PACKS",
    "LanguagePack",
    "ParseResult",
    "SyntaxFactKind",
    "TreeSitterParser",
    "get_pack",
    "get_pack_for_ext",
    "parser_for_current_thread",
]
