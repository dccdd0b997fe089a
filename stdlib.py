"""
Arith Standard Library
Built-in arithmetic operators shared by the interpreter and the compiler
"""

from typing import Dict, Callable, Union
from functools import reduce
import operator

from error_handling import ArithError, ArithmeticOverflowError, DivisionByZeroError, UnknownOperatorError


Num = Union[int, float]


# ============================================================================
# ARITHMETIC
# ============================================================================

def arith_add(x: Num, y: Num) -> Num:
  """Addition"""
  return operator.add(x, y)


def arith_sub(x: Num, y: Num) -> Num:
  """Subtraction"""
  return operator.sub(x, y)


def arith_mul(x: Num, y: Num) -> Num:
  """Multiplication"""
  return operator.mul(x, y)


def arith_div(x: Num, y: Num) -> Num:
  """Division"""
  if y == 0:
    raise DivisionByZeroError(f"division by zero: {x} / {y}")
  return operator.truediv(x, y)


BUILTIN_OPERATORS: Dict[str, Callable[[Num, Num], Num]] = {
    '+': arith_add,
    '-': arith_sub,
    '*': arith_mul,
    '/': arith_div,
}


# ============================================================================
# OPERATOR LOOKUP
# ============================================================================

def is_operator(symbol) -> bool:
  return isinstance(symbol, str) and symbol in BUILTIN_OPERATORS


def lookup_operator(symbol) -> Callable[[Num, Num], Num]:
  """Return the binary function for an operator symbol"""
  if not is_operator(symbol):
    raise UnknownOperatorError(symbol)
  return BUILTIN_OPERATORS[symbol]


def fold_operands(symbol: str, values) -> Num:
  """
  Reduce operand values left to right with an operator

  (- a b c) is ((a - b) - c) and (/ a b c) is ((a / b) / c).
  A single operand reduces to itself. Results that cannot be represented
  as a float raise ArithmeticOverflowError.
  """
  op_func = lookup_operator(symbol)
  values = list(values)
  if not values:
    raise ArithError(f"operator '{symbol}' applied to no operands")
  try:
    return reduce(op_func, values)
  except OverflowError as e:
    raise ArithmeticOverflowError(f"result of '{symbol}' too large: {e}") from e
