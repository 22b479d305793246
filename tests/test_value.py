"""Tests for values: equality, truthiness and printing."""

import math

import pytest

from loxvm.errors import LoxInternalError
from loxvm.value import (FALSE, NIL, TRUE, Value, ValueArray, ValueType,
                         box, format_value, is_falsey, number_value,
                         values_equal)


class TestEquality:
    def test_nil_equals_nil(self):
        assert values_equal(NIL, NIL)

    def test_cross_type_is_never_equal(self):
        assert not values_equal(NIL, FALSE)
        assert not values_equal(number_value(0), FALSE)
        assert not values_equal(number_value(1), TRUE)

    def test_numbers_compare_by_payload(self):
        assert values_equal(number_value(2), number_value(2.0))
        assert not values_equal(number_value(2), number_value(3))

    def test_nan_is_not_equal_to_itself(self):
        nan = number_value(math.nan)
        assert not values_equal(nan, nan)

    def test_reserved_obj_type_is_internal_error(self):
        with pytest.raises(LoxInternalError):
            values_equal(Value(ValueType.OBJ), Value(ValueType.OBJ))


class TestTruthiness:
    def test_falsey_set(self):
        assert is_falsey(NIL)
        assert is_falsey(FALSE)

    def test_zero_is_truthy(self):
        assert not is_falsey(number_value(0))
        assert not is_falsey(TRUE)


class TestFormatting:
    @pytest.mark.parametrize("value,text", [
        (NIL, "nil"),
        (TRUE, "true"),
        (FALSE, "false"),
        (number_value(1.2), "1.2"),
        (number_value(100), "100"),
        (number_value(-3), "-3"),
        (number_value(3.14159265), "3.14159265"),
        (number_value(123456789), "123456789"),
        (number_value(0.1), "0.1"),
        (number_value(-0.0), "-0"),
        (number_value(1e21), "1e+21"),
        (number_value(math.inf), "inf"),
        (number_value(-math.inf), "-inf"),
        (number_value(math.nan), "nan"),
    ])
    def test_format(self, value, text):
        assert format_value(value) == text
        assert str(value) == text


class TestAccessors:
    def test_wrong_kind_access_is_an_assertion(self):
        with pytest.raises(AssertionError):
            NIL.as_number()
        with pytest.raises(AssertionError):
            number_value(1).as_bool()

    def test_box(self):
        assert box(None) is NIL
        assert box(True) is TRUE
        assert box(False) is FALSE
        assert box(3).is_number()
        assert box(3).as_number() == 3.0

    def test_box_rejects_strings(self):
        with pytest.raises(LoxInternalError):
            box("text")


class TestValueArray:
    def test_append_returns_index(self):
        values = ValueArray()
        assert values.append(number_value(1)) == 0
        assert values.append(number_value(2)) == 1
        assert len(values) == 2

    def test_index_finds_equal_value(self):
        values = ValueArray()
        values.append(number_value(1))
        values.append(TRUE)
        assert values.index(TRUE) == 1
        with pytest.raises(ValueError):
            values.index(NIL)
