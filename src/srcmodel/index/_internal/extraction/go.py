"""Go syntax-fact extractor.

Walks the top-level declarations of a tree-sitter-go tree and records:
package name, import paths, type declarations (struct fields, embedded
types, interface method elements) and function/method signatures.

Type expressions are kept as source text with whitespace collapsed; no
attempt is made to resolve them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from srcmodel.index._internal.extraction import BaseFactExtractor, FactBuffer
from srcmodel.index._internal.parsing.packs import GO_PACK
from srcmodel.index.models import FieldFact, FunctionFact, Parameter, TypeFact, TypeKind

if TYPE_CHECKING:
    from tree_sitter import Node

_TYPE_SPEC_NODES = frozenset({"type_spec", "type_alias"})
_METHOD_ELEM_NODES = frozenset({"method_elem", "method_spec"})
_WRAPPER_TYPE_NODES = frozenset({"pointer_type", "parenthesized_type"})


def _text(node: Node | None) -> str:
    if node is None or node.text is None:
        return ""
    return " ".join(node.text.decode("utf-8", errors="replace").split())


def _line(node: Node) -> int:
    return node.start_point[0] + 1


def _base_name(type_expr: str) -> str:
    """``*pkg.Base[T]`` -> ``Base``."""
    name = type_expr.lstrip("*( ").split("[", 1)[0].rstrip(") ")
    return name.rsplit(".", 1)[-1]


class GoFactExtractor(BaseFactExtractor):
    """Extracts syntax facts from Go source files."""

    def __init__(self) -> None:
        super().__init__(GO_PACK)

    # -- package / imports -----------------------------------------------

    def visit_package_clause(self, node: Node, facts: FactBuffer) -> None:
        if facts.package:
            return
        for child in node.named_children:
            if child.type == "package_identifier":
                facts.package = _text(child)
                return

    def visit_import_declaration(self, node: Node, facts: FactBuffer) -> None:
        for child in node.named_children:
            if child.type == "import_spec":
                self._add_import(child, facts)
            elif child.type == "import_spec_list":
                for spec in child.named_children:
                    if spec.type == "import_spec":
                        self._add_import(spec, facts)

    @staticmethod
    def _add_import(spec: Node, facts: FactBuffer) -> None:
        path = _text(spec.child_by_field_name("path")).strip("\"`")
        if path:
            facts.imports.append(path)

    # -- types -------------------------------------------------------------

    def visit_type_declaration(self, node: Node, facts: FactBuffer) -> None:
        for spec in node.named_children:
            if spec.type not in _TYPE_SPEC_NODES:
                continue
            name = _text(spec.child_by_field_name("name"))
            if not name:
                continue
            type_node = spec.child_by_field_name("type")
            facts.types.append(self._type_fact(name, spec, type_node))

    def _type_fact(self, name: str, spec: Node, type_node: Node | None) -> TypeFact:
        # Aliases (type A = B) are never structs or interfaces in their own right
        if type_node is None or spec.type == "type_alias":
            return TypeFact(name=name, kind=TypeKind.OTHER, line=_line(spec))
        if type_node.type == "struct_type":
            return TypeFact(
                name=name,
                kind=TypeKind.STRUCT,
                fields=tuple(self._struct_fields(type_node)),
                line=_line(spec),
            )
        if type_node.type == "interface_type":
            embeds, methods = self._interface_elems(name, type_node)
            return TypeFact(
                name=name,
                kind=TypeKind.INTERFACE,
                fields=tuple(embeds),
                methods=tuple(methods),
                line=_line(spec),
            )
        return TypeFact(name=name, kind=TypeKind.OTHER, line=_line(spec))

    @staticmethod
    def _struct_fields(struct_node: Node) -> list[FieldFact]:
        fields: list[FieldFact] = []
        for body in struct_node.named_children:
            if body.type != "field_declaration_list":
                continue
            for decl in body.named_children:
                if decl.type != "field_declaration":
                    continue
                type_expr = _text(decl.child_by_field_name("type"))
                names = decl.children_by_field_name("name")
                if names:
                    fields.extend(FieldFact(name=_text(n), type_expr=type_expr) for n in names)
                    continue
                # Embedded: the optional '*' is a sibling token, not part of the type node
                if any(child.type == "*" for child in decl.children):
                    type_expr = f"*{type_expr}"
                fields.append(FieldFact(name=_base_name(type_expr), type_expr=type_expr, embedded=True))
        return fields

    def _interface_elems(self, iface: str, iface_node: Node) -> tuple[list[FieldFact], list[FunctionFact]]:
        embeds: list[FieldFact] = []
        methods: list[FunctionFact] = []
        for elem in iface_node.named_children:
            if elem.type in _METHOD_ELEM_NODES:
                name = _text(elem.child_by_field_name("name"))
                if not name:
                    continue
                methods.append(
                    FunctionFact(
                        name=name,
                        receiver=iface,
                        parameters=self._parameters(elem.child_by_field_name("parameters")),
                        returns=self._results(elem.child_by_field_name("result")),
                        line=_line(elem),
                    )
                )
            elif elem.type == "type_elem":
                # Only plain embedded interfaces; unions and ~T constraints are skipped
                terms = elem.named_children
                if len(terms) == 1 and terms[0].type in ("type_identifier", "qualified_type", "generic_type"):
                    type_expr = _text(terms[0])
                    embeds.append(FieldFact(name=_base_name(type_expr), type_expr=type_expr, embedded=True))
        return embeds, methods

    # -- functions ---------------------------------------------------------

    def visit_function_declaration(self, node: Node, facts: FactBuffer) -> None:
        name = _text(node.child_by_field_name("name"))
        if not name:
            return
        facts.functions.append(
            FunctionFact(
                name=name,
                parameters=self._parameters(node.child_by_field_name("parameters")),
                returns=self._results(node.child_by_field_name("result")),
                line=_line(node),
            )
        )

    def visit_method_declaration(self, node: Node, facts: FactBuffer) -> None:
        name = _text(node.child_by_field_name("name"))
        receiver = self._receiver_type(node.child_by_field_name("receiver"))
        if not name:
            return
        facts.functions.append(
            FunctionFact(
                name=name,
                # An unreadable receiver still marks this as a method
                receiver=receiver,
                parameters=self._parameters(node.child_by_field_name("parameters")),
                returns=self._results(node.child_by_field_name("result")),
                line=_line(node),
            )
        )

    @staticmethod
    def _receiver_type(receiver: Node | None) -> str:
        if receiver is None:
            return ""
        for decl in receiver.named_children:
            if decl.type != "parameter_declaration":
                continue
            node = decl.child_by_field_name("type")
            while node is not None:
                if node.type in _WRAPPER_TYPE_NODES:
                    node = node.named_children[0] if node.named_children else None
                elif node.type == "generic_type":
                    node = node.child_by_field_name("type")
                else:
                    return _base_name(_text(node))
        return ""

    @staticmethod
    def _parameters(param_list: Node | None) -> tuple[Parameter, ...]:
        if param_list is None:
            return ()
        params: list[Parameter] = []
        for decl in param_list.named_children:
            if decl.type == "parameter_declaration":
                type_expr = _text(decl.child_by_field_name("type"))
                names = decl.children_by_field_name("name")
                if names:
                    params.extend(Parameter(name=_text(n), type_expr=type_expr) for n in names)
                else:
                    params.append(Parameter(name="", type_expr=type_expr))
            elif decl.type == "variadic_parameter_declaration":
                type_expr = f"...{_text(decl.child_by_field_name('type'))}"
                params.append(Parameter(name=_text(decl.child_by_field_name("name")), type_expr=type_expr))
        return tuple(params)

    @classmethod
    def _results(cls, result: Node | None) -> tuple[str, ...]:
        if result is None:
            return ()
        if result.type != "parameter_list":
            return (_text(result),)
        # Named results repeat their type once per name: (a, b int) -> int, int
        return tuple(p.type_expr for p in cls._parameters(result))
