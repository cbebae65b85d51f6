"""Name-matching relation detection over a finished ProjectModel.

Runs after aggregation and fills ``ProjectModel.relations`` and
``TypeModel.implements``. Matching is purely by name:

- ``contains``: a struct field's type expression mentions another declared
  type, either unqualified (same package) or as ``pkg.Name``.
- ``embeds``: a struct or interface embeds a declared type.
- ``implements``: a non-interface type's method names cover every method
  name of an interface (its own and those of interfaces it embeds).
  Signatures are not compared. Interfaces embedding a type that is not
  indexed are skipped, their method set being unknown.
- ``depends_on``: a package imports a path whose last segment is the name
  of another indexed package.

Entities in relation groups are written as ``package.Type`` or, for
``depends_on``, as bare package names.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

import structlog

from srcmodel.index.models import PackageModel, ProjectModel, TypeKind, TypeModel

log = structlog.get_logger(__name__)

CONTAINS = "contains"
EMBEDS = "embeds"
IMPLEMENTS = "implements"
DEPENDS_ON = "depends_on"

_IDENT_RE = re.compile(r"[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)?")


def _base_name(type_expr: str) -> str:
    """``*pkg.Base[T]`` -> ``Base``."""
    return type_expr.lstrip("*").split("[", 1)[0].rsplit(".", 1)[-1]


@dataclass
class RelationStats:
    """Edge counts from one detection run."""

    contains: int = 0
    embeds: int = 0
    implements: int = 0
    depends_on: int = 0

    @property
    def total(self) -> int:
        return self.contains + self.embeds + self.implements + self.depends_on


class RelationDetector:
    """Populates relation groups on a ProjectModel.

    Usage::

        stats = RelationDetector(model).detect()
        model.relation_pairs("implements")
    """

    def __init__(self, model: ProjectModel) -> None:
        self._model = model
        self._seen: set[tuple[str, str, str]] = set()

    def detect(self) -> RelationStats:
        stats = RelationStats()
        for pkg, type_model in self._model.iter_types():
            stats.contains += self._detect_contains(pkg, type_model)
            stats.embeds += self._detect_embeds(pkg, type_model)
        stats.implements = self._detect_implements()
        stats.depends_on = self._detect_depends_on()
        log.debug(
            "relations_detected",
            contains=stats.contains,
            embeds=stats.embeds,
            implements=stats.implements,
            depends_on=stats.depends_on,
        )
        return stats

    # -- helpers -------------------------------------------------------------

    def _add(self, key: str, source: str, target: str) -> int:
        if (key, source, target) in self._seen:
            return 0
        self._seen.add((key, source, target))
        self._model.add_relation(key, source, target)
        return 1

    def _resolve(self, pkg: PackageModel, ref: str) -> str | None:
        """Map a type reference to ``package.Type`` if it names an indexed type."""
        if "." in ref:
            qualifier, name = ref.split(".", 1)
            if self._model.get_type(qualifier, name) is not None:
                return ref
            return None
        if ref in pkg.types:
            return f"{pkg.name}.{ref}"
        return None

    def _detect_contains(self, pkg: PackageModel, type_model: TypeModel) -> int:
        if type_model.kind is not TypeKind.STRUCT:
            return 0
        source = f"{pkg.name}.{type_model.name}"
        # Embedded fields are keyed by their base type name
        embedded_names = {_base_name(e) for e in type_model.embeds}
        added = 0
        for name, type_expr in type_model.fields.items():
            if name in embedded_names and _base_name(type_expr) == name:
                continue
            for ref in _IDENT_RE.findall(type_expr):
                target = self._resolve(pkg, ref)
                if target is not None:
                    added += self._add(CONTAINS, source, target)
        return added

    def _detect_embeds(self, pkg: PackageModel, type_model: TypeModel) -> int:
        source = f"{pkg.name}.{type_model.name}"
        added = 0
        for type_expr in type_model.embeds:
            target = self._resolve(pkg, type_expr.lstrip("*").split("[", 1)[0])
            if target is not None:
                added += self._add(EMBEDS, source, target)
        return added

    def _interface_method_set(
        self, pkg: PackageModel, iface: TypeModel, visiting: set[str]
    ) -> tuple[set[str], bool]:
        """Return (method names, complete).

        The set is incomplete when an embedded interface is not indexed
        (e.g. ``io.Reader``) since its methods are unknown.
        """
        key = f"{pkg.name}.{iface.name}"
        if key in visiting:
            return set(), True
        visiting.add(key)
        names = set(iface.methods)
        complete = True
        for type_expr in iface.embeds:
            target = self._resolve(pkg, type_expr.split("[", 1)[0])
            if target is None:
                complete = False
                continue
            target_pkg, target_name = target.split(".", 1)
            embedded = self._model.get_type(target_pkg, target_name)
            owner = self._model.get_package(target_pkg)
            if embedded is None or owner is None or embedded.kind is not TypeKind.INTERFACE:
                complete = False
                continue
            embedded_names, embedded_complete = self._interface_method_set(owner, embedded, visiting)
            names |= embedded_names
            complete = complete and embedded_complete
        return names, complete

    def _detect_implements(self) -> int:
        interfaces: list[tuple[PackageModel, TypeModel, set[str]]] = []
        for pkg, type_model in self._model.iter_types():
            if type_model.kind is TypeKind.INTERFACE:
                method_set, complete = self._interface_method_set(pkg, type_model, set())
                if not complete:
                    log.debug("interface_skipped_unresolved_embed", interface=f"{pkg.name}.{type_model.name}")
                    continue
                # The empty interface is satisfied by everything; not informative
                if method_set:
                    interfaces.append((pkg, type_model, method_set))

        added = 0
        for pkg, type_model in self._model.iter_types():
            if type_model.kind is TypeKind.INTERFACE or not type_model.methods:
                continue
            own = set(type_model.methods)
            for iface_pkg, iface, method_set in interfaces:
                if not method_set <= own:
                    continue
                same_pkg = iface_pkg.name == pkg.name
                type_model.implements.add(iface.name if same_pkg else f"{iface_pkg.name}.{iface.name}")
                added += self._add(
                    IMPLEMENTS,
                    f"{pkg.name}.{type_model.name}",
                    f"{iface_pkg.name}.{iface.name}",
                )
        return added

    def _detect_depends_on(self) -> int:
        added = 0
        for pkg_name, paths in self._model.imports.items():
            for path in paths:
                target = path.rstrip("/").rsplit("/", 1)[-1]
                if target != pkg_name and target in self._model.packages:
                    added += self._add(DEPENDS_ON, pkg_name, target)
        return added


def detect_relations(model: ProjectModel) -> RelationStats:
    """Convenience wrapper: run a RelationDetector over ``model``."""
    return RelationDetector(model).detect()
