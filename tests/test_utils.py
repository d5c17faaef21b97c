"""Tests for utility functions."""

import pytest

from formspace.utils import as_value_name, as_value_set, format_names


class TestAsValueSet:
    """Test as_value_set normalization."""

    def test_none(self):
        assert as_value_set(None) == frozenset()

    def test_string(self):
        assert as_value_set("Hard") == frozenset({"Hard"})

    def test_empty_string(self):
        """Test a cleared dropdown counts as no selection."""
        assert as_value_set("") == frozenset()

    def test_iterables(self):
        assert as_value_set(["a", "b", "a"]) == frozenset({"a", "b"})
        assert as_value_set(("a",)) == frozenset({"a"})
        assert as_value_set({"a", ""}) == frozenset({"a"})
        assert as_value_set(v for v in ["a"]) == frozenset({"a"})

    def test_scalars_coerced(self):
        """Test numbers and booleans read the same way as condition leaves."""
        assert as_value_set(5) == frozenset({"5"})
        assert as_value_set([1, True, 2.5]) == frozenset({"1", "true", "2.5"})

    def test_non_iterable_error(self):
        with pytest.raises(TypeError, match="iterable of strings"):
            as_value_set(object())

    def test_non_scalar_item_error(self):
        with pytest.raises(TypeError, match="at index 1"):
            as_value_set(["a", ["b"]])


class TestAsValueName:
    """Test as_value_name coercion."""

    @pytest.mark.parametrize(
        "value,expected",
        [("x", "x"), (True, "true"), (False, "false"), (3, "3"), (1.5, "1.5")],
    )
    def test_scalars(self, value, expected):
        assert as_value_name(value) == expected

    @pytest.mark.parametrize("value", [None, ["x"], {"a": "b"}])
    def test_non_scalars(self, value):
        assert as_value_name(value) is None


class TestFormatNames:
    """Test format_names."""

    def test_sorted_and_quoted(self):
        assert format_names({"b", "a"}) == "'a', 'b'"

    def test_empty(self):
        assert format_names([]) == ""
