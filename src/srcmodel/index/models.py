"""Data models for the source-structure index.

Two groups of types live here:

- Syntax facts (``FileFacts`` and its parts): the parser-agnostic record an
  extractor produces for one file. This is the only input the aggregator
  accepts.
- The project model (``ProjectModel`` and its parts): the cross-file view
  built by folding every file's facts together.

Identity rules:
- A package is identified by its declared name, never by a directory.
- A type is identified by (package, name); the first declaration wins.
- Free functions and types live in separate namespaces of a package.
- A method lives only under its receiver type's ``methods``.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

# =============================================================================
# Enums
# =============================================================================


class TypeKind(str, Enum):
    """Best-effort classification of a declared type."""

    STRUCT = "struct"
    INTERFACE = "interface"
    OTHER = "other"


class DiagnosticKind(str, Enum):
    """Category of a recoverable per-file problem."""

    EXTRACTION_FAILED = "extraction_failed"
    MISSING_PACKAGE = "missing_package"
    UNRESOLVED_RECEIVER = "unresolved_receiver"


# =============================================================================
# Syntax facts (extractor output)
# =============================================================================


@dataclass(frozen=True)
class Parameter:
    """One (name, type-expression) pair. Unnamed parameters have name ''."""

    name: str
    type_expr: str


@dataclass(frozen=True)
class FieldFact:
    """A struct field or an embedded interface.

    Embedded fields are named after their base type.
    """

    name: str
    type_expr: str
    embedded: bool = False


@dataclass(frozen=True)
class FunctionFact:
    """A top-level function or method declaration."""

    name: str
    receiver: str | None = None  # Base type name, pointer and type args stripped
    parameters: tuple[Parameter, ...] = ()
    returns: tuple[str, ...] = ()
    line: int = 0

    @property
    def is_method(self) -> bool:
        return self.receiver is not None


@dataclass(frozen=True)
class TypeFact:
    """A top-level type declaration.

    ``methods`` holds interface method elements; it is always empty for
    structs (their methods arrive as receiver-bearing FunctionFacts).
    """

    name: str
    kind: TypeKind = TypeKind.OTHER
    fields: tuple[FieldFact, ...] = ()
    methods: tuple[FunctionFact, ...] = ()
    line: int = 0

    @property
    def embeds(self) -> tuple[str, ...]:
        return tuple(f.type_expr for f in self.fields if f.embedded)


@dataclass(frozen=True)
class FileFacts:
    """Everything the aggregator needs from one source file."""

    package: str = ""
    imports: tuple[str, ...] = ()
    types: tuple[TypeFact, ...] = ()
    functions: tuple[FunctionFact, ...] = ()
    error_count: int = 0  # Parse error nodes; informational only


# =============================================================================
# Project model (aggregator output)
# =============================================================================


@dataclass
class FunctionModel:
    """A free function, a method, or an interface method element."""

    name: str
    receiver: str | None = None
    parameters: list[Parameter] = field(default_factory=list)
    returns: list[str] = field(default_factory=list)
    file: str | None = None

    @property
    def is_method(self) -> bool:
        return self.receiver is not None

    @classmethod
    def from_fact(cls, fact: FunctionFact, file: str | None = None) -> FunctionModel:
        return cls(
            name=fact.name,
            receiver=fact.receiver,
            parameters=list(fact.parameters),
            returns=list(fact.returns),
            file=file,
        )


@dataclass
class TypeModel:
    """A declared type with its fields and attached methods."""

    name: str
    kind: TypeKind = TypeKind.OTHER
    fields: dict[str, str] = field(default_factory=dict)
    methods: dict[str, FunctionModel] = field(default_factory=dict)
    implements: set[str] = field(default_factory=set)
    embeds: list[str] = field(default_factory=list)
    file: str | None = None

    @classmethod
    def from_fact(cls, fact: TypeFact, file: str | None = None) -> TypeModel:
        model = cls(name=fact.name, kind=fact.kind, file=file)
        for field_fact in fact.fields:
            if field_fact.embedded:
                model.embeds.append(field_fact.type_expr)
                # Embedded interfaces contribute methods, not fields
                if fact.kind is TypeKind.INTERFACE:
                    continue
            model.fields.setdefault(field_fact.name, field_fact.type_expr)
        for method in fact.methods:
            model.methods.setdefault(method.name, FunctionModel.from_fact(method, file))
        return model


@dataclass
class PackageModel:
    """One logical package, aggregated across every file that declares it."""

    name: str
    types: dict[str, TypeModel] = field(default_factory=dict)
    functions: dict[str, FunctionModel] = field(default_factory=dict)
    files: list[str] = field(default_factory=list)


@dataclass
class ProjectModel:
    """Root aggregate of one indexing run."""

    packages: dict[str, PackageModel] = field(default_factory=dict)
    imports: dict[str, list[str]] = field(default_factory=dict)
    relations: dict[str, list[str]] = field(default_factory=dict)

    def get_package(self, name: str) -> PackageModel | None:
        return self.packages.get(name)

    def get_type(self, package: str, name: str) -> TypeModel | None:
        pkg = self.packages.get(package)
        return pkg.types.get(name) if pkg is not None else None

    def iter_packages(self) -> Iterator[PackageModel]:
        yield from self.packages.values()

    def iter_types(self) -> Iterator[tuple[PackageModel, TypeModel]]:
        for pkg in self.packages.values():
            for type_model in pkg.types.values():
                yield pkg, type_model

    def iter_functions(self) -> Iterator[tuple[PackageModel, FunctionModel]]:
        """Free functions only; see iter_methods() for receiver-bound ones."""
        for pkg in self.packages.values():
            for func in pkg.functions.values():
                yield pkg, func

    def iter_methods(self) -> Iterator[tuple[PackageModel, TypeModel, FunctionModel]]:
        for pkg, type_model in self.iter_types():
            for method in type_model.methods.values():
                yield pkg, type_model, method

    def add_relation(self, key: str, source: str, target: str) -> None:
        """Append one (source, target) edge to a relation group."""
        self.relations.setdefault(key, []).extend((source, target))

    def relation_pairs(self, key: str) -> list[tuple[str, str]]:
        """Read a relation group back as (source, target) edges."""
        flat = self.relations.get(key, [])
        return [(flat[i], flat[i + 1]) for i in range(0, len(flat) - 1, 2)]


@dataclass(frozen=True)
class Diagnostic:
    """A recoverable per-file problem recorded during a run."""

    file_path: str
    message: str
    kind: DiagnosticKind = DiagnosticKind.EXTRACTION_FAILED

    def as_pair(self) -> tuple[str, str]:
        return self.file_path, self.message
