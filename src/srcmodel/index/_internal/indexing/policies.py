"""Duplicate type-declaration policies.

A policy decides what happens when a second declaration of an already
registered (package, type) pair arrives. Policies mutate ``existing`` in
place and never replace it, so the first declaration keeps its identity.
"""

from __future__ import annotations

from collections.abc import Callable

from srcmodel.index.models import FunctionModel, TypeFact, TypeKind, TypeModel

DuplicatePolicy = Callable[[TypeModel, TypeFact, str], None]


def first_wins(existing: TypeModel, duplicate: TypeFact, file_path: str) -> None:
    """Ignore the duplicate entirely."""


def merge_fields(existing: TypeModel, duplicate: TypeFact, file_path: str) -> None:
    """Fold the duplicate's missing fields, embeds and interface methods in.

    Kind and already-present entries are left untouched.
    """
    for field_fact in duplicate.fields:
        if field_fact.embedded:
            if field_fact.type_expr not in existing.embeds:
                existing.embeds.append(field_fact.type_expr)
            if duplicate.kind is TypeKind.INTERFACE:
                continue
        existing.fields.setdefault(field_fact.name, field_fact.type_expr)
    for method in duplicate.methods:
        if method.name not in existing.methods:
            existing.methods[method.name] = FunctionModel.from_fact(method, file_path)


DUPLICATE_POLICIES: dict[str, DuplicatePolicy] = {
    "first_wins": first_wins,
    "merge_fields": merge_fields,
}


def get_policy(name: str) -> DuplicatePolicy:
    try:
        return DUPLICATE_POLICIES[name]
    except KeyError:
        raise ValueError(f"Unknown duplicate policy: {name}") from None
