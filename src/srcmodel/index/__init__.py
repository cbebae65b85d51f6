"""Index module - source-structure indexing.

This module provides:
- Syntax extraction: tree-sitter parsing into per-file FileFacts
- Aggregation: folding FileFacts into one ProjectModel
- Relation detection: contains/embeds/implements/depends_on by name matching

Public API is in `srcmodel.index.ops`:
- IndexCoordinator / index_project: High-level orchestration
- IndexResult, IndexStats: Result types

Internal implementations are in `srcmodel.index._internal/`.
"""

from srcmodel.index._internal.discovery import FileWalker
from srcmodel.index._internal.extraction import SyntaxFactExtractor, get_registry
from srcmodel.index._internal.extraction.go import GoFactExtractor
from srcmodel.index._internal.indexing import (
    Aggregator,
    RelationDetector,
    detect_relations,
    first_wins,
    merge_fields,
)
from srcmodel.index.export import dump_json, dump_yaml, model_to_dict, result_to_dict
from srcmodel.index.models import (
    Diagnostic,
    DiagnosticKind,
    FieldFact,
    FileFacts,
    FunctionFact,
    FunctionModel,
    PackageModel,
    Parameter,
    ProjectModel,
    TypeFact,
    TypeKind,
    TypeModel,
)
from srcmodel.index.ops import IndexCoordinator, IndexResult, IndexStats, index_project

__all__ = [
    # Orchestration
    "IndexCoordinator",
    "IndexResult",
    "IndexStats",
    "index_project",
    # Components
    "Aggregator",
    "FileWalker",
    "GoFactExtractor",
    "RelationDetector",
    "SyntaxFactExtractor",
    "detect_relations",
    "first_wins",
    "get_registry",
    "merge_fields",
    # Export
    "dump_json",
    "dump_yaml",
    "model_to_dict",
    "result_to_dict",
    # Models
    "Diagnostic",
    "DiagnosticKind",
    "FieldFact",
    "FileFacts",
    "FunctionFact",
    "FunctionModel",
    "PackageModel",
    "Parameter",
    "ProjectModel",
    "TypeFact",
    "TypeKind",
    "TypeModel",
]
