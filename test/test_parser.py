"""
Parser tests
"""

import pytest
from parsing import (
  tokenize, parse, parse_string, expression_to_list, pretty_print_expression,
  Number, Call
)
from error_handling import ParseError


class TestParse:
  """Building expression trees from tokens"""

  def test_nested_call(self):
    tree = parse(tokenize("(+ -1 2 (* 1 3 5))"))
    assert expression_to_list(tree) == ["+", -1, 2, ["*", 1, 3, 5]]

  def test_tree_types(self):
    tree = parse(tokenize("(- 4 1.5)"))
    assert tree == Call('-', (Number(4, "4"), Number(1.5, "1.5")))

  def test_single_number(self):
    assert parse(tokenize("42")) == Number(42, "42")

  def test_single_operand_call(self):
    assert expression_to_list(parse_string("(- 7)")) == ["-", 7]

  def test_deep_nesting_mirrors_parentheses(self):
    tree = parse_string("(+ (+ (+ 1 2) 3) 4)")
    assert expression_to_list(tree) == ["+", ["+", ["+", 1, 2], 3], 4]

  def test_literal_text_is_kept(self):
    tree = parse_string("(+ 1.50 -0)")
    assert [operand.text for operand in tree.operands] == ["1.50", "-0"]

  def test_tree_is_immutable(self):
    tree = parse_string("(+ 1 2)")
    with pytest.raises(AttributeError):
      tree.operator = '*'

  def test_pretty_print(self):
    output = pretty_print_expression(parse_string("(* 2 (+ 1 1))"))
    assert output == "CALL('*')\n  NUMBER(2)\n  CALL('+')\n    NUMBER(1)\n    NUMBER(1)\n"


class TestParseErrors:
  """Structural malformation"""

  def test_missing_closing_paren(self):
    with pytest.raises(ParseError) as exc_info:
      parse(tokenize("(+ 1 2"))
    assert "never closed" in exc_info.value.message

  def test_missing_closing_paren_nested(self):
    with pytest.raises(ParseError):
      parse(tokenize("(+ 1 (* 2 3)"))

  def test_unmatched_closing_paren(self):
    with pytest.raises(ParseError) as exc_info:
      parse(tokenize("(+ 1 2))"))
    assert exc_info.value.position == 7

  def test_leading_closing_paren(self):
    with pytest.raises(ParseError):
      parse(tokenize(")"))

  def test_empty_input(self):
    with pytest.raises(ParseError):
      parse([])

  def test_operator_position_holds_number(self):
    with pytest.raises(ParseError) as exc_info:
      parse(tokenize("(1 2 3)"))
    assert exc_info.value.got == "'1'"

  def test_operator_position_holds_paren(self):
    with pytest.raises(ParseError):
      parse(tokenize("((+ 1 2) 3)"))

  def test_operator_in_operand_position(self):
    with pytest.raises(ParseError):
      parse(tokenize("(+ 1 * 2)"))

  def test_unknown_atom(self):
    with pytest.raises(ParseError) as exc_info:
      parse(tokenize("(+ 1 x)"))
    assert "'x'" in str(exc_info.value)

  def test_call_without_operands(self):
    with pytest.raises(ParseError):
      parse(tokenize("(+)"))

  def test_only_open_paren(self):
    with pytest.raises(ParseError):
      parse(tokenize("("))

  def test_trailing_expression(self):
    with pytest.raises(ParseError):
      parse(tokenize("(+ 1 2) 3"))

  def test_bare_operator(self):
    with pytest.raises(ParseError):
      parse(tokenize("+"))


class TestDeepNesting:
  """Nesting depth is bounded by memory, not the recursion limit"""

  def test_deeply_nested_input_parses(self):
    depth = 5000
    tree = parse_string("(+ 1 " * depth + "1" + ")" * depth)
    for _ in range(depth - 1):
      assert tree.operator == '+'
      tree = tree.operands[1]
    assert expression_to_list(tree) == ["+", 1, 1]

  def test_deeply_unclosed_input(self):
    with pytest.raises(ParseError) as exc_info:
      parse(tokenize("(+ 1 " * 2000))
    assert "never closed" in exc_info.value.message
    # The innermost unclosed '(' is reported
    assert exc_info.value.position == 5 * 1999

  def test_deep_tree_helpers(self):
    depth = 3000
    tree = parse_string("(* " * depth + "2" + ")" * depth)
    nested = expression_to_list(tree)
    for _ in range(depth):
      assert nested[0] == '*'
      nested = nested[1]
    assert nested == 2
    assert pretty_print_expression(tree).count("CALL('*')") == depth
    assert str(tree).startswith("(* (* ")
