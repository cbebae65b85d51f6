"""Fold per-file syntax facts into one ProjectModel.

Merge rules, applied per file:

1. A file with no package clause is recorded as a diagnostic and ignored.
2. The package entry is created on first sight; later files reuse it.
3. Import paths are appended in arrival order, duplicates kept.
4. Each type is registered once per (package, name). Further declarations
   are handed to the duplicate policy.
5. Receiver-bearing functions attach to their receiver type in the same
   package; free functions go to the package's function namespace.

``merge()`` applies all five rules at once, so a method whose receiver type
arrives in a later file is dropped. ``register()`` (rules 1-4) followed by
``attach()`` (rule 5) for every file removes that ordering dependency.

Per-file problems never raise. Each one becomes a ``Diagnostic``.
"""

from __future__ import annotations

import threading

import structlog

from srcmodel.core.errors import IndexingError
from srcmodel.index._internal.indexing.policies import DuplicatePolicy, first_wins
from srcmodel.index.models import (
    Diagnostic,
    DiagnosticKind,
    FileFacts,
    FunctionFact,
    FunctionModel,
    PackageModel,
    ProjectModel,
    TypeModel,
)

log = structlog.get_logger(__name__)


class Aggregator:
    """Thread-safe builder of a single ProjectModel.

    Usage::

        agg = Aggregator()
        for path, facts in extracted:
            agg.register(path, facts)
        for path, facts in extracted:
            agg.attach(path, facts)
        model = agg.finish()
    """

    def __init__(self, duplicate_policy: DuplicatePolicy = first_wins) -> None:
        self._model = ProjectModel()
        self._diagnostics: list[Diagnostic] = []
        self._duplicate_policy = duplicate_policy
        self._lock = threading.Lock()
        self._closed = False

    @property
    def model(self) -> ProjectModel:
        return self._model

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """Diagnostics recorded so far, in recording order."""
        with self._lock:
            return list(self._diagnostics)

    @property
    def closed(self) -> bool:
        return self._closed

    def add_diagnostic(
        self,
        file_path: str,
        message: str,
        kind: DiagnosticKind = DiagnosticKind.EXTRACTION_FAILED,
    ) -> None:
        """Record a problem found outside the aggregator (read or parse failure)."""
        with self._lock:
            self._check_open()
            self._diagnostics.append(Diagnostic(file_path, message, kind))

    def merge(self, file_path: str, facts: FileFacts) -> None:
        """Single-pass merge: register and attach in one step."""
        with self._lock:
            self._check_open()
            pkg = self._register(file_path, facts)
            if pkg is not None:
                self._attach(file_path, facts, pkg)

    def register(self, file_path: str, facts: FileFacts) -> None:
        """First pass: package, imports and types; functions are left for attach()."""
        with self._lock:
            self._check_open()
            self._register(file_path, facts)

    def attach(self, file_path: str, facts: FileFacts) -> None:
        """Second pass: place functions and methods.

        Must follow register() of every file so receiver lookups see every
        type of the package.
        """
        with self._lock:
            self._check_open()
            # Missing package was already reported by register()
            if not facts.package:
                return
            pkg = self._model.packages.get(facts.package)
            if pkg is None:
                pkg = self._register(file_path, facts)
                if pkg is None:
                    return
            self._attach(file_path, facts, pkg)

    def finish(self) -> ProjectModel:
        """Close the aggregator and hand the model to the caller."""
        with self._lock:
            self._closed = True
            log.debug(
                "aggregation_finished",
                packages=len(self._model.packages),
                diagnostics=len(self._diagnostics),
            )
            return self._model

    # -- internals (lock held) -------------------------------------------

    def _check_open(self) -> None:
        if self._closed:
            raise IndexingError.aggregator_closed()

    def _register(self, file_path: str, facts: FileFacts) -> PackageModel | None:
        if not facts.package:
            self._diagnostics.append(
                Diagnostic(file_path, "no package clause; file ignored", DiagnosticKind.MISSING_PACKAGE)
            )
            log.debug("missing_package", file=file_path)
            return None

        pkg = self._model.packages.get(facts.package)
        if pkg is None:
            pkg = PackageModel(name=facts.package)
            self._model.packages[facts.package] = pkg
        pkg.files.append(file_path)

        self._model.imports.setdefault(facts.package, []).extend(facts.imports)

        for type_fact in facts.types:
            existing = pkg.types.get(type_fact.name)
            if existing is None:
                pkg.types[type_fact.name] = TypeModel.from_fact(type_fact, file_path)
                continue
            log.debug(
                "duplicate_type",
                package=pkg.name,
                type=type_fact.name,
                file=file_path,
                first_file=existing.file,
            )
            self._duplicate_policy(existing, type_fact, file_path)
        return pkg

    def _attach(self, file_path: str, facts: FileFacts, pkg: PackageModel) -> None:
        for func in facts.functions:
            if func.is_method:
                self._attach_method(file_path, func, pkg)
            else:
                pkg.functions.setdefault(func.name, FunctionModel.from_fact(func, file_path))

    def _attach_method(self, file_path: str, func: FunctionFact, pkg: PackageModel) -> None:
        receiver = pkg.types.get(func.receiver) if func.receiver else None
        if receiver is None:
            self._diagnostics.append(
                Diagnostic(
                    file_path,
                    f"method {func.name}: receiver type {func.receiver or '?'} not found "
                    f"in package {pkg.name}; method dropped",
                    DiagnosticKind.UNRESOLVED_RECEIVER,
                )
            )
            log.debug("method_dropped", package=pkg.name, receiver=func.receiver, method=func.name)
            return
        receiver.methods.setdefault(func.name, FunctionModel.from_fact(func, file_path))
