# tests/test_renderer.py
"""
Tests for Python rendering.

Verifies:
1. Rendered modules compile and import
2. Field annotations and transformer bodies
3. Access levels, header and helper methods
4. Rendered witnesses behave like in-process ones
"""

import dataclasses
import sys
import types

import pytest

from witnesskit.codegen.generator import WitnessGenerator
from witnesskit.codegen.renderer import HEADER, render_type
from witnesskit.core.config import GeneratorSettings
from witnesskit.core.schema import (
    AccessLevel,
    GenerationOption,
    InterfaceSchema,
    MethodRequirement,
    Parameter,
)
from witnesskit.core.types import (
    SELF,
    VOID,
    FunctionType,
    GenericType,
    OptionalType,
    TupleType,
    TypeIdentifier,
)

pytestmark = pytest.mark.tier1


def render(*schemas, settings=None):
    generator = WitnessGenerator(settings)
    report = generator.generate_all(list(schemas))
    assert report.success, report.failures
    return generator.render(report)


@pytest.fixture
def load_source(monkeypatch):
    """Import rendered source as a throwaway module."""

    def load(source, name="rendered_witnesses"):
        module = types.ModuleType(name)
        monkeypatch.setitem(sys.modules, name, module)
        exec(compile(source, f"<{name}>", "exec"), module.__dict__)
        return module

    return load


class TestRenderType:
    """Interface types map onto Python annotations."""

    @pytest.mark.parametrize(
        "type_expr, expected",
        [
            (TypeIdentifier("Bool"), "bool"),
            (TypeIdentifier("Data"), "bytes"),
            (VOID, "None"),
            (GenericType("Array", (TypeIdentifier("A"),)), "list[A]"),
            (GenericType("Dictionary", (TypeIdentifier("String"), TypeIdentifier("A"))), "dict[str, A]"),
            (OptionalType(TypeIdentifier("A")), "Optional[A]"),
            (TupleType((TypeIdentifier("Int"), TypeIdentifier("Double"))), "tuple[int, float]"),
            (FunctionType((TypeIdentifier("A"),), TypeIdentifier("Bool")), "Callable[[A], bool]"),
            (FunctionType((), VOID), "Callable[[], None]"),
        ],
    )
    def test_mapping(self, type_expr, expected):
        assert render_type(type_expr) == expected


class TestModuleLayout:
    """Header, imports and access levels."""

    def test_header_and_future_import(self, combinable):
        source = render(combinable)
        assert source.startswith(HEADER)
        assert "from __future__ import annotations" in source

    def test_header_can_be_disabled(self, combinable):
        source = render(combinable, settings=GeneratorSettings(emit_header=False))
        assert not source.startswith(HEADER)

    def test_type_vars(self, snapshottable, diffable):
        source = render(diffable, snapshottable)
        assert 'A = TypeVar("A")' in source
        assert 'B = TypeVar("B")' in source
        assert 'Format = TypeVar("Format")' in source

    def test_public_and_private(self, combinable, randomizable):
        public = dataclasses.replace(combinable, access_level=AccessLevel.PUBLIC)
        source = render(public, randomizable)
        assert "__all__ = ['CombinableWitness']" in source
        assert "class _RandomizableWitness(Generic[A]):" in source

    def test_internal_is_not_exported(self, comparable):
        assert "__all__ = []" in render(comparable)

    def test_lifting_imported_only_when_needed(self, comparable):
        assert "witnesskit.runtime.lifting" not in render(comparable)


class TestClassBodies:
    """Fields and transformer bodies."""

    def test_combinable(self, combinable):
        source = render(combinable)
        assert "class CombinableWitness(Generic[A]):" in source
        assert "    combine: Callable[[A, A], A]" in source
        assert "def iso(self, to: Callable[[B], A], from_: Callable[[A], B]) -> CombinableWitness[B]:" in source
        assert "combine=lambda b0, b1: from_(self.combine(to(b0), to(b1)))," in source
        assert "def map(" not in source

    def test_comparable(self, comparable):
        source = render(comparable)
        assert "def pullback(self, transform: Callable[[B], A]) -> ComparableWitness[B]:" in source
        assert "compare=lambda b0, b1: self.compare(transform(b0), transform(b1))," in source

    def test_nested_witness(self, diffable, snapshottable):
        source = render(diffable, snapshottable)
        assert "class SnapshottableWitness(Generic[A, Format]):" in source
        assert "    format: DiffableWitness[Format]" in source
        assert "format=self.format," in source
        assert "pathExtension=self.pathExtension," in source

    def test_keyword_field(self, diffable):
        source = render(diffable)
        assert "from_: Callable[[bytes], A]" in source
        assert "from_=lambda b0: from_(self.from_(b0))," in source

    def test_no_transformer(self, randomizable):
        source = render(randomizable)
        assert "random: Callable[[], float]" in source
        assert "def iso" not in source and "def map" not in source


class TestRenderedBehavior:
    """Rendered code runs like the in-process witnesses."""

    def test_combinable_iso(self, combinable, load_source):
        module = load_source(render(combinable))
        int_sum = module.CombinableWitness(combine=lambda a, b: a + b)
        assert int_sum.iso(to=int, from_=str).combine("4", "5") == "9"

    def test_comparable_pullback(self, comparable, load_source):
        module = load_source(render(comparable))
        less = module.ComparableWitness(compare=lambda a, b: a < b)
        assert less.pullback(len).compare("a", "bb") is True

    def test_structural_conversion(self, load_source):
        schema = InterfaceSchema(
            name="Splitting",
            requirements=(
                MethodRequirement(
                    "split",
                    (Parameter(TypeIdentifier("String")),),
                    return_type=GenericType("Array", (OptionalType(SELF),)),
                    is_static=True,
                ),
            ),
        )
        source = render(schema)
        assert "from witnesskit.runtime.lifting import lift_optional, lift_sequence" in source

        module = load_source(source)
        splitter = module.SplittingWitness(
            split=lambda text: [int(t) if t.isdigit() else None for t in text.split(",")]
        )
        assert splitter.map(lambda n: n * 10).split("1,x,2") == [10, None, 20]

    def test_fold_helper(self, monoid, load_source):
        module = load_source(render(monoid))
        sum_ = module.MonoidWitness(empty=lambda: 0, combine=lambda a, b: a + b)
        assert sum_.fold_combine([1, 2, 3]) == 6
        assert sum_.fold_combine([1, 2], 10) == 13

    def test_conformance_init(self, diffable, snapshottable, load_source):
        options = frozenset({GenerationOption.CONFORMANCE_INIT})
        source = render(
            dataclasses.replace(diffable, options=options),
            dataclasses.replace(snapshottable, options=options),
        )
        assert "def from_conformance(cls, conforming: Any, *, format: DiffableWitness[Format])" in source
        assert "from_=lambda data: getattr(conforming, 'from')(data)," in source

        module = load_source(source)

        class Page:
            pathExtension = "html"

            def __init__(self, body):
                self.snapshot = body

        diffing = object()
        snapshotting = module.SnapshottableWitness.from_conformance(Page, format=diffing)
        assert snapshotting.format is diffing
        assert snapshotting.pathExtension() == "html"
        assert snapshotting.snapshot(Page("<p>")) == "<p>"

    def test_examples_document_renders(self, examples_file, load_source):
        from witnesskit.schema.loader import load_schema_file

        generator = WitnessGenerator()
        report = generator.generate_all(load_schema_file(examples_file))
        assert report.success
        module = load_source(generator.render(report))
        assert hasattr(module, "SnapshottableWitness")
        assert hasattr(module, "_RandomizableWitness")
