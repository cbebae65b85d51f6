"""Aggregation of syntax facts into a ProjectModel."""

from srcmodel.index._internal.indexing.aggregator import Aggregator
from srcmodel.index._internal.indexing.policies import (
    DUPLICATE_POLICIES,
    DuplicatePolicy,
    first_wins,
    get_policy,
    merge_fields,
)
from srcmodel.index._internal.indexing.relations import (
    RelationDetector,
    RelationStats,
    detect_relations,
)

__all__ = [
    "DUPLICATE_POLICIES",
    "Aggregator",
    "DuplicatePolicy",
    "RelationDetector",
    "RelationStats",
    "detect_relations",
    "first_wins",
    "get_policy",
    "merge_fields",
]
