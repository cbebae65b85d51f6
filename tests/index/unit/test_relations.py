"""Unit tests for relation detection (indexing/relations.py)."""

from __future__ import annotations

from srcmodel.index._internal.indexing import Aggregator, RelationDetector, detect_relations
from srcmodel.index.models import FieldFact, FileFacts, FunctionFact, ProjectModel, TypeFact, TypeKind


def _build(*files: tuple[str, FileFacts]) -> ProjectModel:
    agg = Aggregator()
    for path, facts in files:
        agg.register(path, facts)
    for path, facts in files:
        agg.attach(path, facts)
    return agg.finish()


def _iface(name: str, *methods: str, embeds: tuple[str, ...] = ()) -> TypeFact:
    return TypeFact(
        name=name,
        kind=TypeKind.INTERFACE,
        fields=tuple(FieldFact(e.rsplit(".", 1)[-1], e, embedded=True) for e in embeds),
        methods=tuple(FunctionFact(m, receiver=name) for m in methods),
    )


STORE = FileFacts(
    package="store",
    types=(
        _iface("Reader", "Get"),
        _iface("ReadWriter", "Put", embeds=("Reader",)),
        _iface("Any"),
        TypeFact("Item", TypeKind.STRUCT, fields=(FieldFact("Key", "string"),)),
        TypeFact(
            "Memory",
            TypeKind.STRUCT,
            fields=(
                FieldFact("items", "map[string]*Item"),
                FieldFact("Base", "*Base", embedded=True),
            ),
        ),
        TypeFact("Base", TypeKind.STRUCT),
    ),
    functions=(
        FunctionFact("Get", receiver="Memory"),
        FunctionFact("Put", receiver="Memory"),
        FunctionFact("Get", receiver="Item"),
    ),
)

API = FileFacts(
    package="api",
    imports=("fmt", "example.com/app/store"),
    types=(TypeFact("Handler", TypeKind.STRUCT, fields=(FieldFact("db", "store.ReadWriter"),)),),
)


class TestImplements:
    """Method-name subset matching."""

    def test_type_with_all_methods_implements_interface(self) -> None:
        # Given
        model = _build(("store/s.go", STORE))

        # When
        RelationDetector(model).detect()

        # Then
        memory = model.get_type("store", "Memory")
        assert memory.implements == {"Reader", "ReadWriter"}

    def test_embedded_interface_methods_are_required(self) -> None:
        """Item has Get but not Put, so it satisfies Reader only."""
        model = _build(("store/s.go", STORE))

        detect_relations(model)

        assert model.get_type("store", "Item").implements == {"Reader"}

    def test_empty_interface_is_not_reported(self) -> None:
        model = _build(("store/s.go", STORE))

        detect_relations(model)

        assert all("Any" not in t.implements for _, t in model.iter_types())

    def test_interfaces_do_not_implement_interfaces(self) -> None:
        model = _build(("store/s.go", STORE))

        detect_relations(model)

        assert model.get_type("store", "ReadWriter").implements == set()

    def test_interface_embedding_unindexed_type_is_skipped(self) -> None:
        """Shape embeds io.Reader, whose methods are unknown, so Circle cannot be said to satisfy it."""
        # Given
        shapes = FileFacts(
            package="shapes",
            types=(
                _iface("Shape", "Area", embeds=("io.Reader",)),
                _iface("Sized", "Area"),
                TypeFact("Circle", TypeKind.STRUCT),
            ),
            functions=(FunctionFact("Area", receiver="Circle"),),
        )
        model = _build(("shapes/s.go", shapes))

        # When
        detect_relations(model)

        # Then
        assert model.get_type("shapes", "Circle").implements == {"Sized"}
        assert ("shapes.Circle", "shapes.Shape") not in model.relation_pairs("implements")

    def test_cross_package_interface_is_qualified(self) -> None:
        # Given
        other = FileFacts(package="io2", types=(_iface("Getter", "Get"),))
        model = _build(("store/s.go", STORE), ("io2/g.go", other))

        # When
        detect_relations(model)

        # Then
        assert "io2.Getter" in model.get_type("store", "Memory").implements
        assert ("store.Memory", "io2.Getter") in model.relation_pairs("implements")


class TestStructuralRelations:
    """contains / embeds / depends_on."""

    def test_contains_from_field_type_expression(self) -> None:
        model = _build(("store/s.go", STORE))

        detect_relations(model)

        assert model.relation_pairs("contains") == [("store.Memory", "store.Item")]

    def test_embeds_resolves_pointer_embedding(self) -> None:
        model = _build(("store/s.go", STORE))

        detect_relations(model)

        assert ("store.Memory", "store.Base") in model.relation_pairs("embeds")
        assert ("store.ReadWriter", "store.Reader") in model.relation_pairs("embeds")

    def test_qualified_field_type_crosses_packages(self) -> None:
        model = _build(("store/s.go", STORE), ("api/h.go", API))

        detect_relations(model)

        assert ("api.Handler", "store.ReadWriter") in model.relation_pairs("contains")

    def test_depends_on_matches_last_import_segment(self) -> None:
        # Given
        model = _build(("store/s.go", STORE), ("api/h.go", API))

        # When
        stats = detect_relations(model)

        # Then
        assert model.relation_pairs("depends_on") == [("api", "store")]
        assert stats.depends_on == 1

    def test_relations_are_flat_pairwise_lists(self) -> None:
        model = _build(("store/s.go", STORE), ("api/h.go", API))

        detect_relations(model)

        assert model.relations["depends_on"] == ["api", "store"]

    def test_running_twice_adds_no_duplicate_edges(self) -> None:
        model = _build(("store/s.go", STORE))
        detector = RelationDetector(model)

        first = detector.detect()
        second = detector.detect()

        assert first.total > 0
        assert second.total == 0

    def test_named_field_of_embedded_type_still_contains(self) -> None:
        # Given
        node = FileFacts(
            package="tree",
            types=(
                TypeFact("Base", TypeKind.STRUCT),
                TypeFact(
                    "Node",
                    TypeKind.STRUCT,
                    fields=(
                        FieldFact("Base", "*Base", embedded=True),
                        FieldFact("Parent", "*Base"),
                    ),
                ),
            ),
        )
        model = _build(("tree/n.go", node))

        # When
        detect_relations(model)

        # Then
        assert model.relation_pairs("contains") == [("tree.Node", "tree.Base")]
        assert model.relation_pairs("embeds") == [("tree.Node", "tree.Base")]
