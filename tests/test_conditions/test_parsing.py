"""Tests for condition document parsing and evaluate()."""

import logging

import pytest

from formspace.conditions import (
    AllOf,
    Always,
    AnyOf,
    Equals,
    evaluate,
    parse_condition,
)
from formspace.selection import SelectionState


class TestParseCondition:
    """Test parse_condition on well-formed documents."""

    def test_empty_mapping(self):
        """Test {} parses to Always."""
        assert parse_condition({}) == Always()

    def test_none(self):
        """Test None parses to Always."""
        assert parse_condition(None) == Always()

    def test_leaf(self):
        """Test a single-entry mapping parses to Equals."""
        assert parse_condition({"Level": "Hard"}) == Equals("Level", "Hard")

    def test_multi_entry_leaf_is_conjunction(self):
        """Test several entries in one mapping are ANDed."""
        cond = parse_condition({"A": "x", "B": "y"})
        assert cond == AllOf([Equals("A", "x"), Equals("B", "y")])

    def test_all_of(self):
        """Test allOf parsing."""
        cond = parse_condition({"allOf": [{"A": "x"}, {"B": "y"}]})
        assert cond == AllOf([Equals("A", "x"), Equals("B", "y")])

    def test_any_of(self):
        """Test anyOf parsing."""
        cond = parse_condition({"anyOf": [{"A": "x"}, {"A": "y"}]})
        assert cond == AnyOf([Equals("A", "x"), Equals("A", "y")])

    def test_nested(self):
        """Test arbitrarily nested documents."""
        cond = parse_condition(
            {"allOf": [{"anyOf": [{"A": "x"}, {"allOf": [{"B": "y"}, {}]}]}]}
        )
        assert cond == AllOf(
            [AnyOf([Equals("A", "x"), AllOf([Equals("B", "y"), Always()])])]
        )

    def test_empty_operators(self):
        """Test empty operator lists are kept as such."""
        assert parse_condition({"allOf": []}) == AllOf([])
        assert parse_condition({"anyOf": []}) == AnyOf([])

    def test_condition_passthrough(self):
        """Test an existing Condition is returned unchanged."""
        cond = Equals("A", "x")
        assert parse_condition(cond) is cond

    def test_round_trip(self):
        """Test to_dict output parses back to an equal tree."""
        document = {"allOf": [{"anyOf": [{"A": "x"}, {"A": "y"}]}, {"B": "z"}]}
        cond = parse_condition(document)
        assert cond.to_dict() == document
        assert parse_condition(cond.to_dict()) == cond


class TestParseConditionPermissive:
    """Test parse_condition never raises on malformed documents."""

    def test_all_of_takes_precedence(self):
        """Test allOf wins when both operators are present."""
        cond = parse_condition({"allOf": [{"A": "x"}], "anyOf": [{"B": "y"}]})
        assert cond == AllOf([Equals("A", "x")])

    def test_operator_hides_leaf_keys(self):
        """Test sibling leaf keys next to an operator are ignored."""
        cond = parse_condition({"anyOf": [{"A": "x"}], "B": "y"})
        assert cond == AnyOf([Equals("A", "x")])

    def test_non_list_operand(self):
        """Test an operator with a non-list operand is unconditioned."""
        assert parse_condition({"allOf": {"A": "x"}}) == Always()
        assert parse_condition({"anyOf": "A"}) == Always()

    def test_non_mapping_children_skipped(self):
        """Test non-mapping operator children are skipped."""
        cond = parse_condition({"anyOf": [{"A": "x"}, "junk", 5]})
        assert cond == AnyOf([Equals("A", "x")])

    def test_non_mapping_document(self):
        """Test a non-mapping document is unconditioned."""
        assert parse_condition("Level=Hard") == Always()
        assert parse_condition(["A", "x"]) == Always()

    def test_scalar_values_coerced(self):
        """Test numbers and booleans become strings."""
        assert parse_condition({"Count": 3}) == Equals("Count", "3")
        assert parse_condition({"Enabled": True}) == Equals("Enabled", "true")

    def test_non_scalar_values_skipped(self):
        """Test list or mapping leaf values are skipped."""
        assert parse_condition({"A": ["x", "y"]}) == Always()
        assert parse_condition({"A": {"x": 1}, "B": "y"}) == Equals("B", "y")

    def test_malformed_fragments_logged(self, caplog):
        """Test dropped fragments are reported at DEBUG level."""
        with caplog.at_level(logging.DEBUG, logger="formspace.conditions.parsing"):
            parse_condition({"anyOf": "A"})
        assert "expected a list" in caplog.text


class TestEvaluate:
    """Test evaluate() on documents and trees."""

    def test_empty_tree_always_true(self):
        """Test the empty tree passes for any selection."""
        assert evaluate({}, {}) is True
        assert evaluate({}, {"A": ["x"], "B": ["y", "z"]}) is True

    def test_none_selections(self):
        """Test None selections mean nothing is selected."""
        assert evaluate({"A": "x"}, None) is True

    def test_leaf_semantics(self):
        """Test the three leaf outcomes."""
        assert evaluate({"X": "v"}, {}) is True
        assert evaluate({"X": "v"}, {"X": ["w"]}) is False
        assert evaluate({"X": "v"}, {"X": ["v"]}) is True
        assert evaluate({"X": "v"}, {"X": ["v", "w"]}) is True

    def test_accepts_condition_and_state(self):
        """Test evaluate with Condition and SelectionState arguments."""
        state = SelectionState({"A": ["x"]})
        assert evaluate(Equals("A", "x"), state) is True
        assert evaluate(Equals("A", "y"), state) is False

    @pytest.mark.parametrize(
        ("selections", "expected"),
        [
            ({}, True),
            ({"A": ["x"]}, True),
            ({"A": ["y"]}, True),
            ({"A": ["w"]}, False),
            ({"B": ["z"]}, True),
            ({"B": ["q"]}, False),
            ({"A": ["y"], "B": ["z"]}, True),
            ({"A": ["x"], "B": ["q"]}, False),
            ({"A": ["w", "x"], "B": ["z"]}, True),
        ],
    )
    def test_nested_tree(self, selections, expected):
        """Test (A empty or x or y) AND (B empty or z)."""
        tree = {"allOf": [{"anyOf": [{"A": "x"}, {"A": "y"}]}, {"B": "z"}]}
        assert evaluate(tree, selections) is expected

    def test_unknown_keys_unconditioned(self):
        """Test unrecognized documents evaluate to True."""
        assert evaluate({"allOf": "nonsense"}, {"A": ["x"]}) is True

    def test_empty_any_of_false(self):
        """Test an explicit empty anyOf evaluates to False."""
        assert evaluate({"anyOf": []}, {}) is False

    def test_scalar_selections_match_scalar_leaves(self):
        """Test numeric and boolean selections compare like the leaf values."""
        assert evaluate({"Level": 1}, {"Level": [1]}) is True
        assert evaluate({"Level": 1}, {"Level": [2]}) is False
        assert evaluate({"Enabled": True}, {"Enabled": True}) is True
