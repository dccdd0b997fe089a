"""
Arith tokenizer and parser
Turns an s-expression string into tokens, and tokens into an expression tree
"""

from typing import List, Any, Union, Tuple, Optional, Callable
from dataclasses import dataclass

from pyparsing import Literal, Regex, MatchFirst, ZeroOrMore, ParserElement, ParseFatalException

from error_handling import ArithError, ParseError, create_checked_scanner


# Token types
OPEN_PAREN = "OPEN_PAREN"
CLOSE_PAREN = "CLOSE_PAREN"
OPERATOR = "OPERATOR"
NUMBER = "NUMBER"
ATOM = "ATOM"  # stray text, rejected by the parser

OPERATORS = ('+', '-', '*', '/')

WHITESPACE = " \t\n\r\f\v"


@dataclass(frozen=True)
class Token:
    """Lexical token with its source offset"""
    type: str
    text: str
    value: Any = None
    position: int = 0

    def __str__(self) -> str:
        return f"{self.type}({self.text})"


@dataclass(frozen=True)
class Number:
    """Numeric leaf of an expression tree"""
    value: Union[int, float]
    text: Optional[str] = None

    def __str__(self) -> str:
        return self.text if self.text is not None else str(self.value)


@dataclass(frozen=True)
class Call:
    """Operator applied to one or more operand expressions"""
    operator: str
    operands: Tuple[Union['Number', 'Call'], ...]

    def __str__(self) -> str:
        return walk_expression(
            self,
            lambda number, depth: str(number),
            lambda call, parts, depth: f"({call.operator} {' '.join(parts)})")


Expression = Union[Number, Call]


def walk_expression(
    expression: Expression,
    on_number: Callable[[Number, int], Any],
    on_call: Callable[[Call, List[Any], int], Any],
    on_enter: Optional[Callable[[Expression, int], None]] = None
) -> Any:
    """
    Post-order fold over an expression tree.

    on_enter(node, depth) runs before a node's operands are visited,
    on_number(number, depth) produces a leaf result and
    on_call(call, operand_results, depth) combines a call's operand results.
    Open calls are kept on an explicit stack, so nesting depth is not bound
    by the interpreter's recursion limit.
    """
    def visit_leaf(node, depth: int) -> Any:
        if on_enter:
            on_enter(node, depth)
        if isinstance(node, Number):
            return on_number(node, depth)
        raise ArithError(f"Unknown expression node: {node!r}")

    if not isinstance(expression, Call):
        return visit_leaf(expression, 0)

    if on_enter:
        on_enter(expression, 0)
    stack: List[Tuple[Call, List[Any], int]] = [(expression, [], 0)]

    while True:
        call, results, depth = stack[-1]
        if len(results) < len(call.operands):
            operand = call.operands[len(results)]
            if isinstance(operand, Call):
                if on_enter:
                    on_enter(operand, depth + 1)
                stack.append((operand, [], depth + 1))
            else:
                results.append(visit_leaf(operand, depth + 1))
            continue

        stack.pop()
        value = on_call(call, results, depth)
        if not stack:
            return value
        stack[-1][1].append(value)


def to_number(text: str) -> Union[int, float]:
    return float(text) if '.' in text else int(text)


def number_token(source: str, loc: int, text: str) -> 'Token':
    try:
        return Token(NUMBER, text, to_number(text), loc)
    except ValueError as e:
        # int() refuses literals beyond the interpreter's digit limit
        raise ParseFatalException(source, loc, f"numeric literal too long ({len(text)} characters)") from e


# ============================================================================
# TOKENIZER
# ============================================================================

class Tokenizer:
    """Scanner for arith source strings"""

    def __init__(self, debug: bool = False):
        self.debug = debug
        self._setup_token_patterns()

    def _setup_token_patterns(self):
        """Setup the token grammar, longest and most specific patterns first"""

        # Atoms must end at whitespace, a parenthesis or the end of input
        delimited = r'(?=[\s()]|$)'

        # Numbers, a leading minus glued to digits is part of the literal
        number = Regex(r'-?\d+(?:\.\d+)?' + delimited)
        number.set_parse_action(lambda s, loc, t: number_token(s, loc, t[0]))

        # Operators standing alone
        operator = Regex(r'[-+*/]' + delimited)
        operator.set_parse_action(lambda s, loc, t: Token(OPERATOR, t[0], t[0], loc))

        open_paren = Literal("(")
        open_paren.set_parse_action(lambda s, loc, t: Token(OPEN_PAREN, "(", None, loc))

        close_paren = Literal(")")
        close_paren.set_parse_action(lambda s, loc, t: Token(CLOSE_PAREN, ")", None, loc))

        # Anything else printable is passed through for the parser to reject
        atom = Regex(r'[^\s()\x00-\x1f\x7f]+')
        atom.set_parse_action(lambda s, loc, t: Token(ATOM, t[0], None, loc))

        patterns: List[ParserElement] = [number, operator, open_paren, close_paren, atom]
        for pattern in patterns:
            pattern.set_whitespace_chars(WHITESPACE)

        self.token = MatchFirst(patterns).set_whitespace_chars(WHITESPACE)
        self.token_stream = ZeroOrMore(self.token).set_whitespace_chars(WHITESPACE)
        # Keep tabs so token positions are real source offsets
        self.token_stream.parse_with_tabs()

    def tokenize(self, text: str) -> List[Token]:
        """Split source text into tokens, in source order"""
        scan = create_checked_scanner(self.token_stream.parse_string, text)
        tokens = list(scan(text, parse_all=True))

        if self.debug:
            print(f"Tokens: {' '.join(str(token) for token in tokens)}")

        return tokens


def token_texts(tokens: List[Token]) -> List[str]:
    """Plain string view of a token sequence"""
    return [token.text for token in tokens]


# ============================================================================
# PARSER
# ============================================================================

class ExpressionParser:
    """Parser over a token sequence, tracking a read position"""

    def __init__(self, tokens: List[Token], debug: bool = False):
        self.tokens = list(tokens)
        self.pos = 0
        self.debug = debug

    def parse(self) -> Expression:
        """Parse exactly one expression, consuming every token"""
        if not self.tokens:
            raise ParseError("empty input", expected=["expression"], got="end of input")

        expression = self._parse_expression()

        if self.pos < len(self.tokens):
            token = self.tokens[self.pos]
            if token.type == CLOSE_PAREN:
                raise ParseError("')' without matching '('", position=token.position, got="')'")
            raise ParseError("unexpected token after complete expression",
                             position=token.position, expected=["end of input"], got=repr(token.text))

        return expression

    def _end_position(self) -> int:
        if not self.tokens:
            return 0
        last = self.tokens[-1]
        return last.position + len(last.text)

    def _peek(self) -> Optional[Token]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def _advance(self) -> Token:
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def _parse_expression(self) -> Expression:
        """
        Parse a number or a parenthesized call.

        Open calls are kept on an explicit stack of
        (open paren, operator token, operands) frames, so arbitrarily deep
        nesting parses without recursion.
        """
        stack: List[Tuple[Token, Token, List[Expression]]] = []

        while True:
            token = self._peek()
            if token is None:
                if stack:
                    raise ParseError("'(' is never closed", position=stack[-1][0].position,
                                     expected=["')'"], got="end of input")
                raise ParseError("unexpected end of input", position=self._end_position(),
                                 expected=["number", "'('"], got="end of input")

            if token.type == OPEN_PAREN:
                stack.append(self._open_call())
                continue

            if token.type == CLOSE_PAREN:
                if not stack:
                    raise ParseError("')' without matching '('", position=token.position,
                                     expected=["number", "'('"], got="')'")
                self._advance()
                node = self._close_call(*stack.pop())
            elif token.type == NUMBER:
                self._advance()
                if self.debug:
                    print(f"  Number: {token.value}")
                node = Number(token.value, token.text)
            elif token.type == OPERATOR:
                raise ParseError(f"operator '{token.text}' outside operator position",
                                 position=token.position, expected=["number", "'('"], got=repr(token.text))
            else:
                raise ParseError(f"unrecognized token '{token.text}'", position=token.position,
                                 expected=["number", "'('"], got=repr(token.text))

            if not stack:
                return node
            stack[-1][2].append(node)

    def _open_call(self) -> Tuple[Token, Token, List[Expression]]:
        """Consume '(' OPERATOR and return a new open-call frame"""
        open_token = self._advance()

        op_token = self._peek()
        if op_token is None:
            raise ParseError("'(' is never closed", position=open_token.position,
                             expected=["operator"], got="end of input")
        if op_token.type != OPERATOR:
            raise ParseError("operator position holds a non-operator", position=op_token.position,
                             expected=[f"'{op}'" for op in OPERATORS], got=repr(op_token.text))
        self._advance()

        if self.debug:
            print(f"  Call: {op_token.value}")

        return open_token, op_token, []

    def _close_call(self, open_token: Token, op_token: Token, operands: List[Expression]) -> Call:
        if not operands:
            raise ParseError(f"operator '{op_token.value}' needs at least one operand",
                             position=op_token.position, expected=["number", "'('"], got="')'")
        return Call(op_token.value, tuple(operands))


# ============================================================================
# MODULE API
# ============================================================================

def tokenize(text: str, debug: bool = False) -> List[Token]:
    """Tokenize arith source code"""
    return Tokenizer(debug).tokenize(text)


def parse(tokens: List[Token], debug: bool = False) -> Expression:
    """Parse a token sequence into a single expression tree"""
    return ExpressionParser(tokens, debug).parse()


def parse_string(text: str, debug: bool = False) -> Expression:
    """Tokenize and parse in one step"""
    return parse(tokenize(text, debug), debug)


# Utility functions for working with expression trees
def expression_to_list(expression: Expression) -> Any:
    """Convert a tree to nested lists, operator first"""
    return walk_expression(
        expression,
        lambda number, depth: number.value,
        lambda call, parts, depth: [call.operator] + parts)


def pretty_print_expression(expression: Expression, indent: int = 0) -> str:
    """Pretty print an expression tree for debugging"""
    return walk_expression(
        expression,
        lambda number, depth: "  " * (indent + depth) + f"NUMBER({number.value!r})\n",
        lambda call, parts, depth: "  " * (indent + depth) + f"CALL({call.operator!r})\n" + "".join(parts))
