"""
Arith Compiler
Renders an expression tree as a fully-parenthesized infix string
"""

from typing import Callable, List

from parsing import Number, Call, Expression, walk_expression
from stdlib import lookup_operator
from error_handling import ArithError


def emit_expression(expression: Expression, debug: bool = False) -> str:
  """Render an expression tree"""
  def enter(node: Expression, depth: int) -> None:
    if isinstance(node, Call):
      lookup_operator(node.operator)
      if not node.operands:
        raise ArithError(f"operator '{node.operator}' applied to no operands")

  def emit(call: Call, rendered: List[str], depth: int) -> str:
    return emit_call(call, rendered, debug)

  return walk_expression(expression, emit_number, emit, enter)


def emit_number(expression: Number, depth: int = 0) -> str:
  """Literal text as written in the source"""
  return str(expression)


def emit_call(expression: Call, rendered: List[str], debug: bool = False) -> str:
  """( o1 OP o2 OP ... OP on ), one space between every token"""
  output = "( " + f" {expression.operator} ".join(rendered) + " )"

  if debug:
    print(f"Compiled: {expression} -> {output}")

  return output


def compile_to_infix(expression: Expression, debug: bool = False) -> str:
  """Compile a parsed expression tree to infix notation"""
  return emit_expression(expression, debug)


# ============================================================================
# FACTORY FUNCTIONS
# ============================================================================

def create_compiler(debug: bool = False) -> Callable[[Expression], str]:
  """Factory function returning a compiler"""
  def compiler(expression: Expression) -> str:
    return emit_expression(expression, debug)

  return compiler


def create_debug_compiler() -> Callable[[Expression], str]:
  """Factory function returning a debug compiler"""
  return create_compiler(debug=True)
