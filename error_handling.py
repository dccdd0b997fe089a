"""
Error taxonomy and error formatting for the arith pipeline
Errors are raised where they are detected and propagate to the caller
"""

from typing import List, Optional, Dict
from pyparsing import ParseException, ParseBaseException


# ============================================================================
# DATA STRUCTURES (Immutable Dictionaries)
# ============================================================================

def make_error_info(
    message: str,
    position: int = 0,
    line: int = 1,
    column: int = 1,
    expected: Optional[List[str]] = None,
    got: Optional[str] = None,
    context: Optional[str] = None
) -> Dict:
    """Create an immutable error structure"""
    return {
        'message': message,
        'position': position,
        'line': line,
        'column': column,
        'expected': expected or [],
        'got': got,
        'context': context
    }


def format_error_info(kind: str, error: Dict) -> str:
    """Format error info as string"""
    error_msg = f"{kind} at line {error['line']}, column {error['column']}: {error['message']}"

    if error['expected']:
        error_msg += f"\n  Expected: {', '.join(error['expected'])}"

    if error['got']:
        error_msg += f"\n  Got: {error['got']}"

    if error['context']:
        error_msg += f"\n{error['context']}"

    return error_msg


# ============================================================================
# PURE FUNCTIONS
# ============================================================================

def get_context_line(source_text: str, line_num: int, col_num: int) -> str:
    """Get the offending source line with a caret under the error column"""
    lines = source_text.split('\n')
    if not 1 <= line_num <= len(lines):
        return ""

    line_prefix = f"{line_num:4d}: "
    return f"{line_prefix}{lines[line_num - 1]}\n{' ' * len(line_prefix)}{' ' * (col_num - 1)}^"


def describe_char(char: str) -> str:
    """Printable description of a single character"""
    if char.isprintable():
        return f"'{char}'"
    return f"U+{ord(char):04X}"


def lex_error_info_from_exception(exc: ParseBaseException, source_text: str) -> Dict:
    """Convert a pyparsing exception raised while scanning into error info"""
    # Fatal exceptions come from parse actions and carry their own message
    message = "unrecognized character" if isinstance(exc, ParseException) else exc.msg
    got = describe_char(source_text[exc.loc]) if exc.loc < len(source_text) else "end of input"
    return make_error_info(
        message=message,
        position=exc.loc,
        line=exc.lineno,
        column=exc.column,
        expected=["number", "operator", "'('", "')'", "whitespace"],
        got=got,
        context=get_context_line(source_text, exc.lineno, exc.column)
    )


# ============================================================================
# EXCEPTION CLASSES
# ============================================================================

class ArithError(Exception):
    """Base class for every error raised by the pipeline"""
    kind = "Error"

    def __init__(self, message: str, position: int = 0, line: int = 1, column: int = 1,
                 expected: Optional[List[str]] = None, got: Optional[str] = None,
                 context: Optional[str] = None):
        self.message = message
        self.position = position
        self.line = line
        self.column = column
        self.expected = expected or []
        self.got = got
        self.context = context
        super().__init__(message)

    @classmethod
    def from_info(cls, error: Dict) -> "ArithError":
        return cls(
            message=error['message'],
            position=error['position'],
            line=error['line'],
            column=error['column'],
            expected=error['expected'],
            got=error['got'],
            context=error['context']
        )

    def __str__(self) -> str:
        error_dict = make_error_info(
            self.message, self.position, self.line, self.column,
            self.expected, self.got, self.context
        )
        return format_error_info(self.kind, error_dict)


class LexError(ArithError):
    """Malformed character sequence in the source string"""
    kind = "Lex error"


class ParseError(ArithError):
    """Structural malformation: unbalanced parentheses, missing operator, misplaced token"""
    kind = "Parse error"

    def __str__(self) -> str:
        # Tokens carry source offsets but not the source text
        error_msg = f"{self.kind} at offset {self.position}: {self.message}"
        if self.expected:
            error_msg += f"\n  Expected: {', '.join(self.expected)}"
        if self.got:
            error_msg += f"\n  Got: {self.got}"
        return error_msg


class DivisionByZeroError(ArithError, ZeroDivisionError):
    """Division by zero while interpreting"""
    kind = "Arithmetic error"

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


class ArithmeticOverflowError(ArithError, OverflowError):
    """Result too large for a float while interpreting"""
    kind = "Arithmetic error"

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


class UnknownOperatorError(ArithError):
    """Operator tag outside the supported set"""
    kind = "Unknown operator"

    def __init__(self, operator, **kwargs):
        self.operator = operator
        super().__init__(f"unsupported operator {operator!r}", got=repr(operator), **kwargs)

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


def lex_error_from_exception(exc: ParseBaseException, source_text: str) -> LexError:
    """Convert pyparsing exception to a LexError"""
    return LexError.from_info(lex_error_info_from_exception(exc, source_text))


def create_checked_scanner(scan_func, source_text: str):
    """Wrapper translating pyparsing failures of a scanner into LexError"""
    def checked_scan(*args, **kwargs):
        try:
            return scan_func(*args, **kwargs)
        except ParseBaseException as e:
            raise lex_error_from_exception(e, source_text) from e

    return checked_scan
