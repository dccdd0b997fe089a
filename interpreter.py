"""
Arith Interpreter - Pure Functional Style
Reduces an expression tree to a single number without mutating it
"""

from typing import List, Callable

from parsing import Number, Call, Expression, walk_expression
from stdlib import Num, lookup_operator, fold_operands


# ============================================================================
# EVALUATION FUNCTIONS
# ============================================================================

def eval_expression(expression: Expression, debug: bool = False) -> Num:
  """
  Evaluate an expression tree and return its numeric value.
  Operands are evaluated left to right before the operator is applied.
  """
  def enter(node: Expression, depth: int) -> None:
    if debug:
      print("  " * depth + f"Evaluating: {type(node).__name__.upper()} {node}")
    if isinstance(node, Call):
      # Unknown operators fail before any operand is evaluated
      lookup_operator(node.operator)

  def apply(call: Call, values: List[Num], depth: int) -> Num:
    return eval_call(call, values, debug, depth)

  return walk_expression(expression, eval_number, apply, enter)


def eval_number(expression: Number, depth: int = 0) -> Num:
  """Evaluate number literal"""
  return expression.value


def eval_call(expression: Call, values: List[Num], debug: bool = False, depth: int = 0) -> Num:
  """Apply an operator to its already evaluated operands"""
  result = fold_operands(expression.operator, values)

  if debug:
    print("  " * depth + f"Result: ({expression.operator} {' '.join(str(v) for v in values)}) = {result}")

  return result


def interpret(expression: Expression, debug: bool = False) -> Num:
  """Evaluate a parsed expression tree to a number"""
  return eval_expression(expression, debug)


# ============================================================================
# FACTORY FUNCTIONS
# ============================================================================

def create_interpreter(debug: bool = False) -> Callable[[Expression], Num]:
  """Factory function returning an interpreter"""
  def interpreter(expression: Expression) -> Num:
    return eval_expression(expression, debug)

  return interpreter


def create_debug_interpreter() -> Callable[[Expression], Num]:
  """Factory function returning a debug interpreter"""
  return create_interpreter(debug=True)
