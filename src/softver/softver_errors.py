"""
Error taxonomy for the softver front end.

Every failure is fatal for the parse that raised it. All classes derive from
`SyntaxError`, so callers that only care about "the program is malformed" can
catch that, while tests and tools can match the precise kind.

Classes:
    LexError: Raised by the lexer on characters it cannot classify.
    ParseError: Base for all reduction-engine failures. Carries the offending
        operator (a lexeme or node description) and the sequence position.
    IndexOutOfRange: A pass addressed a slot outside the node sequence.
    UnexpectedNodeKind: A slot held a node of a kind its pass does not accept.
    MissingOperand / MissingLeftOperand / MissingRightOperand: An operator
        has no neighbour to bind to.
    TypeMismatch: An operand exists but belongs to the wrong category.
    UnbalancedParentheses: An opener has no matching closer, or vice versa.
    MalformedExpression / MalformedSubexpression: A (sub)sequence did not
        reduce to exactly one node of the expected category.
    UnboundVariable: Evaluation read a variable missing from the state.
"""


class LexError(SyntaxError):
    """Raised when the source text contains a character sequence with no token."""

    def __init__(self, message: str, line: int = 0, col: int = 0):
        super().__init__(f"{message} at line {line}, col {col}")
        self.line = line
        self.col = col


class ParseError(SyntaxError):
    """Base class for reduction failures.

    Attributes:
        operator (str | None): The operator or node that triggered the failure.
        position (int | None): Index in the node sequence where it happened.
    """

    def __init__(
        self,
        message: str,
        operator: str | None = None,
        position: int | None = None,
    ):
        details = []
        if operator is not None:
            details.append(f"operator={operator!r}")
        if position is not None:
            details.append(f"position={position}")
        if details:
            message = f"{message} ({', '.join(details)})"
        super().__init__(message)
        self.operator = operator
        self.position = position

    @property
    def kind(self) -> str:
        return type(self).__name__


class IndexOutOfRange(ParseError, IndexError):
    pass


class UnexpectedNodeKind(ParseError):
    pass


class MissingOperand(ParseError):
    pass


class MissingLeftOperand(MissingOperand):
    pass


class MissingRightOperand(MissingOperand):
    pass


class TypeMismatch(ParseError):
    pass


class UnbalancedParentheses(ParseError):
    pass


class MalformedExpression(ParseError):
    pass


class MalformedSubexpression(MalformedExpression):
    pass


class UnboundVariable(NameError):
    """Raised when an expression reads a variable the state does not bind."""

    def __init__(self, name: str):
        super().__init__(f"Unbound variable: {name}")
        self.name = name


__all__ = [
    "LexError",
    "ParseError",
    "IndexOutOfRange",
    "UnexpectedNodeKind",
    "MissingOperand",
    "MissingLeftOperand",
    "MissingRightOperand",
    "TypeMismatch",
    "UnbalancedParentheses",
    "MalformedExpression",
    "MalformedSubexpression",
    "UnboundVariable",
]
