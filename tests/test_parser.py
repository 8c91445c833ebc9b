"""
Tests for the formula parser, priority table and depth tracking.
"""

import pytest

from backend.formulaexec.errors import FormulaErrorKind
from backend.formulaexec.logic import FormulaParser, OperationNode
from backend.formulaexec.logic.depth import nest_drop_point, update_depth, validates_nest
from backend.formulaexec.logic.priority import (
    NOT_AN_OPERATOR,
    OPERATOR_PRIORITIES,
    UNARY_MINUS,
    is_operator,
    priority,
)


class TestPriorityTable:
    """Tests for the operator priority table."""

    def test_arithmetic_priorities(self):
        """Test that multiplication binds tighter than addition."""
        assert priority("*") == priority("/") == 5
        assert priority("+") == priority("-") == 4

    def test_comparison_and_logic_priorities(self):
        """Test comparison, logical and equality levels."""
        assert priority("?") == priority("\\") == priority("<") == priority(">") == 3
        assert priority("&") == priority("|") == 2
        assert priority("=") == priority("!") == 1

    def test_unary_minus_is_highest(self):
        """Test that unary minus outranks every binary operator."""
        others = [p for s, p in OPERATOR_PRIORITIES.items() if s != UNARY_MINUS]
        assert priority(UNARY_MINUS) > max(others)

    def test_unknown_symbol(self):
        """Test that non-operators get the sentinel priority."""
        assert priority("7") == NOT_AN_OPERATOR
        assert priority("(") == NOT_AN_OPERATOR
        assert not is_operator("x")

    def test_table_is_read_only(self):
        """Test that the table cannot be mutated."""
        with pytest.raises(TypeError):
            OPERATOR_PRIORITIES["^"] = 7


class TestDepthTracker:
    """Tests for parenthesis depth helpers."""

    def test_update_depth(self):
        """Test depth changes per character."""
        assert update_depth("(", 0) == 1
        assert update_depth(")", 1) == 0
        assert update_depth("5", 3) == 3

    @pytest.mark.parametrize("formula", ["", "1+2", "(1+2)", "((1)+(2))*3"])
    def test_balanced(self, formula):
        """Test balanced formulas pass."""
        assert validates_nest(formula) is True

    @pytest.mark.parametrize("formula", ["(2+3", "2+3)", ")(", "(()"])
    def test_unbalanced(self, formula):
        """Test unbalanced formulas fail."""
        assert validates_nest(formula) is False

    def test_nest_drop_point(self):
        """Test the first return to depth zero."""
        assert nest_drop_point("(1+2)") == 4
        assert nest_drop_point("(1)+(2)") == 2
        assert nest_drop_point("((") == 2


class TestPreprocess:
    """Tests for operator folding."""

    def test_compound_operators(self):
        """Test two-character operators become single tokens."""
        parser = FormulaParser()
        assert parser.preprocess("1>=2") == "1?2"
        assert parser.preprocess("1<=2") == "1\\2"
        assert parser.preprocess("1!=2") == "1!2"

    def test_sign_folding(self):
        """Test double negation and plus-minus collapse."""
        parser = FormulaParser()
        assert parser.preprocess("5--3") == "5+3"
        assert parser.preprocess("5+-3") == "5-3"

    def test_whitespace_removed(self):
        """Test ASCII and full-width spaces are dropped."""
        parser = FormulaParser()
        assert parser.preprocess(" 1 +　2 ") == "1+2"

    def test_keywords(self):
        """Test And/Or keywords become symbols."""
        parser = FormulaParser()
        assert parser.preprocess("1 And 0 Or 1") == "1&0|1"

    def test_keywords_are_case_sensitive(self):
        """Test lowercase keywords are left alone."""
        parser = FormulaParser()
        assert parser.preprocess("1 and 0") == "1and0"


class TestBracketNormalizer:
    """Tests for outer bracket stripping."""

    def test_strip_redundant_brackets(self):
        """Test nested enclosing pairs are all removed."""
        parser = FormulaParser()
        assert parser.strip_outer_brackets("((1+2))") == "1+2"
        assert parser.strip_outer_brackets("(1)") == "1"

    def test_sibling_groups_kept(self):
        """Test two bracketed groups side by side are not stripped."""
        parser = FormulaParser()
        assert parser.most_outers_are_brackets("(1+2)*(3+4)") is False
        assert parser.strip_outer_brackets("(1+2)*(3+4)") == "(1+2)*(3+4)"

    def test_empty_brackets(self):
        """Test empty parentheses reduce to an empty formula."""
        parser = FormulaParser()
        assert parser.strip_outer_brackets("(())") == ""

    def test_not_bracketed(self):
        """Test formulas without enclosing brackets."""
        parser = FormulaParser()
        assert parser.most_outers_are_brackets("") is False
        assert parser.most_outers_are_brackets("1+(2)") is False

    @pytest.mark.parametrize("formula", ["1+2", "(1+2)*3", "-5", "1?2&3"])
    def test_normalize_is_idempotent(self, formula):
        """Test normalizing a normalized formula changes nothing."""
        parser = FormulaParser()
        once = parser.normalize(formula)
        assert once == formula
        assert parser.normalize(once) == once


class TestUnaryMinus:
    """Tests for unary minus detection."""

    def test_leading_minus(self):
        """Test minus at start is unary."""
        assert FormulaParser().is_unary_minus("-2", 0) is True

    def test_minus_after_operator(self):
        """Test minus after an operator is unary."""
        assert FormulaParser().is_unary_minus("3*-2", 2) is True

    def test_minus_after_open_bracket(self):
        """Test minus after '(' is unary."""
        assert FormulaParser().is_unary_minus("(-2)", 1) is True

    def test_minus_after_digit_or_close_bracket(self):
        """Test minus after a digit or ')' subtracts."""
        parser = FormulaParser()
        assert parser.is_unary_minus("3-2", 1) is False
        assert parser.is_unary_minus("(3)-2", 3) is False

    def test_other_characters(self):
        """Test non-minus characters are never unary."""
        assert FormulaParser().is_unary_minus("3+2", 1) is False


class TestSplitIndex:
    """Tests for split point selection."""

    @pytest.mark.parametrize("formula,expected", [
        ("2+3*4", 1),
        ("2*3+4", 3),
        ("8-3-2", 3),
        ("-5+3", 2),
        ("-5", 0),
        ("2*-3", 1),
        ("--5", 0),
        ("---5", 0),
        ("2*--5", 1),
        ("-(1)-(2)", 4),
        ("(1+2)*3", 5),
        ("1?0&2<3", 3),
        ("42", -1),
        ("", -1),
    ])
    def test_lookup(self, formula, expected):
        """Test the lowest-priority, rightmost operator is chosen."""
        assert FormulaParser().lookup_split_index(formula) == expected


class TestBuild:
    """Tests for tree building."""

    def test_leaf(self):
        """Test a bare number builds a leaf."""
        result = FormulaParser().build("(42)")
        assert result.success
        assert result.node.is_leaf
        assert result.node.label == "42"
        assert result.formula == "42"

    def test_precedence(self):
        """Test multiplication is nested under addition."""
        result = FormulaParser().build("2 + 3 * 4")
        assert result.node.label == "+"
        assert result.node.traverse() == ["2", "3", "4", "*", "+"]

    def test_brackets_override(self):
        """Test brackets change the tree shape."""
        result = FormulaParser().build("(2+3)*4")
        assert result.node.traverse() == ["2", "3", "+", "4", "*"]

    def test_left_associative(self):
        """Test equal-priority operators group left to right."""
        result = FormulaParser().build("8-3-2")
        assert result.node.traverse() == ["8", "3", "-", "2", "-"]

    def test_unary_node(self):
        """Test unary minus builds a right-only node."""
        result = FormulaParser().build("-5+3")
        left = result.node.left
        assert left.label == UNARY_MINUS
        assert left.is_unary
        assert left.left is None
        assert left.right.label == "5"
        assert result.node.traverse() == ["5", UNARY_MINUS, "3", "+"]

    def test_double_unary(self):
        """Test nested negation."""
        result = FormulaParser().build("-(-5)")
        assert result.node.traverse() == ["5", UNARY_MINUS, UNARY_MINUS]

    def test_chained_unary(self):
        """Test every minus in a leading run becomes its own negation."""
        result = FormulaParser().build("- - -5")
        assert result.node.traverse() == ["5", UNARY_MINUS, UNARY_MINUS, UNARY_MINUS]

    def test_unary_after_binary_minus(self):
        """Test a minus run after an operand starts with subtraction."""
        result = FormulaParser().build("1 - - 2")
        assert result.node.traverse() == ["1", "2", UNARY_MINUS, "-"]

    def test_long_flat_formula(self):
        """Test a formula longer than the recursion limit builds and traverses."""
        result = FormulaParser().build("+".join(["1"] * 1500))
        assert result.success
        sequence = result.node.traverse()
        assert len(sequence) == 2999
        assert sequence[:3] == ["1", "1", "+"]
        assert sequence[-1] == "+"

    def test_logic_tree(self):
        """Test comparisons nest under logical operators."""
        result = FormulaParser().build("1 >= 0 And 2 < 3")
        assert result.node.traverse() == ["1", "0", "?", "2", "3", "<", "&"]

    @pytest.mark.parametrize("formula", ["", "()", "5-", "*3", "1+()"])
    def test_malformed(self, formula):
        """Test formulas with an empty operand fail to build."""
        result = FormulaParser().build(formula)
        assert not result.success
        assert result.node is None
        assert result.error.kind == FormulaErrorKind.MALFORMED_FORMAT

    def test_traverse_does_not_mutate(self):
        """Test traversal is repeatable."""
        node = FormulaParser().build("1+2*3").node
        assert node.traverse() == node.traverse()

    def test_traverse_extends_list(self):
        """Test traversal appends to a supplied list."""
        out = ["x"]
        OperationNode("7").traverse(out)
        assert out == ["x", "7"]

    def test_to_dict(self):
        """Test tree rendering."""
        node = FormulaParser().build("-1*2").node
        assert node.to_dict() == {
            "op": "*",
            "left": {"op": "neg", "left": None, "right": {"value": "1"}},
            "right": {"value": "2"},
        }


class TestValidate:
    """Tests for FormulaParser.validate."""

    def test_valid(self):
        """Test a valid formula."""
        assert FormulaParser().validate("(1+2)*3") == (True, None)

    def test_unbalanced(self):
        """Test unbalanced parentheses are reported."""
        is_valid, message = FormulaParser().validate("(1+2")
        assert is_valid is False
        assert "parentheses" in message

    def test_empty_operand(self):
        """Test an empty operand is reported."""
        is_valid, message = FormulaParser().validate("1+")
        assert is_valid is False
        assert message
