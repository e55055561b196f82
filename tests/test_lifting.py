# tests/test_lifting.py
"""
Tests for converter combinators.
"""

import pytest

from witnesskit.codegen.transforms import IDENTITY, Conversion, ConversionKind, Direction, FieldRewrite
from witnesskit.runtime.lifting import (
    converter_for,
    identity,
    lift_function,
    lift_mapping,
    lift_optional,
    lift_sequence,
    lift_tuple,
    rewrite_value,
)

pytestmark = pytest.mark.tier1

TO = Conversion(ConversionKind.APPLY, direction=Direction.TO)
FROM = Conversion(ConversionKind.APPLY, direction=Direction.FROM)
FUNCTIONS = {Direction.TO: int, Direction.FROM: str}


class TestCombinators:
    def test_identity(self):
        value = object()
        assert identity(value) is value

    def test_optional_skips_none(self):
        assert lift_optional(str)(None) is None
        assert lift_optional(str)(1) == "1"

    def test_tuple_is_elementwise(self):
        assert lift_tuple(identity, str)((1, 2)) == (1, "2")

    def test_sequence_rebuilds_container(self):
        assert lift_sequence(set, str)([1, 1, 2]) == {"1", "2"}
        assert lift_sequence(list, str)((1, 2)) == ["1", "2"]

    def test_mapping(self):
        assert lift_mapping(identity, str)({"a": 1}) == {"a": "1"}

    def test_function_wraps_both_ends(self):
        length_then_str = lift_function((str,), str)(len)
        assert length_then_str(12345) == "5"


class TestConverterFor:
    def test_apply_uses_direction(self):
        assert converter_for(TO, FUNCTIONS)("3") == 3
        assert converter_for(FROM, FUNCTIONS)(3) == "3"

    def test_identity(self):
        assert converter_for(IDENTITY, FUNCTIONS) is identity

    def test_nested(self):
        conversion = Conversion(
            ConversionKind.SEQUENCE,
            children=(Conversion(ConversionKind.OPTIONAL, children=(FROM,)),),
            container="list",
        )
        assert converter_for(conversion, FUNCTIONS)([1, None]) == ["1", None]


class TestRewriteValue:
    def test_passthrough_is_forwarded(self):
        original = object()
        assert rewrite_value(original, FieldRewrite("nested", nested=True), FUNCTIONS) is original

    def test_arguments_and_result(self):
        rewrite = FieldRewrite("combine", arguments=(TO, TO), result=FROM)
        combine = rewrite_value(lambda a, b: a + b, rewrite, FUNCTIONS)
        assert combine("2", "3") == "5"

    def test_arity_is_checked(self):
        rewrite = FieldRewrite("combine", arguments=(TO, TO), result=FROM)
        combine = rewrite_value(lambda a, b: a + b, rewrite, FUNCTIONS)
        with pytest.raises(TypeError, match="takes 2 argument"):
            combine("2")
