"""
Arith - s-expression arithmetic front end

    >>> from arith import tokenize, parse, interpret, compile, token_texts
    >>> interpret(parse(tokenize("(+ -1 2 (* 1 3 5))")))
    16
    >>> compile(parse(tokenize("(+ -1 2 (* 1 3 5))")))
    '( -1 + 2 + ( 1 * 3 * 5 ) )'

tokenize returns Token objects; token_texts gives the plain string view:

    >>> token_texts(tokenize("(+ 1 2 3)"))
    ['(', '+', '1', '2', '3', ')']
"""

from typing import List

from parsing import Token, Expression, Number, Call, token_texts, tokenize as tokenize_source, parse as parse_tokens
from interpreter import interpret as interpret_expression
from compiler import compile_to_infix
from stdlib import Num
from error_handling import (
    ArithError, LexError, ParseError, DivisionByZeroError, ArithmeticOverflowError, UnknownOperatorError
)
from actors import evaluate_many, make_batch_context

__all__ = [
    "tokenize", "parse", "interpret", "compile", "evaluate", "token_texts", "evaluate_many", "make_batch_context",
    "Token", "Expression", "Number", "Call",
    "ArithError", "LexError", "ParseError", "DivisionByZeroError", "ArithmeticOverflowError",
    "UnknownOperatorError",
]


def tokenize(source: str, debug: bool = False) -> List[Token]:
    """Split a source string into tokens"""
    return tokenize_source(source, debug)


def parse(tokens: List[Token], debug: bool = False) -> Expression:
    """Build an expression tree from tokens"""
    return parse_tokens(tokens, debug)


def interpret(expression: Expression, debug: bool = False) -> Num:
    """Evaluate an expression tree to a number"""
    return interpret_expression(expression, debug)


def compile(expression: Expression, debug: bool = False) -> str:
    """Render an expression tree in infix notation"""
    return compile_to_infix(expression, debug)


def evaluate(source: str, debug: bool = False) -> Num:
    """Tokenize, parse and interpret a source string"""
    return interpret(parse(tokenize(source, debug), debug), debug)
