"""
softver Expression Reduction Engine

Rewrites a flat token sequence, in place, into a single typed expression node.

The engine works on a `NodeSequence` whose slots start out as lexer tokens and
are progressively replaced by AST nodes. A full reduction runs four passes in
a fixed order, each restarting its scan at slot 0 of the (now shorter)
sequence:

    1. atomic      numerals, identifiers, `true`/`false` and `skip` become leaves
    2. unary       `-` in unary position binds the operand on its right
    3. arithmetic  `+`, `-`, `*` bind their immediate neighbours
    4. boolean     `=`, `<`, `<=`, `>`, `>=`, `&&`, `||` bind their neighbours

Binding Rule
------------
Operators bind strictly in the order the scan meets them; there is no
precedence ladder. `2 + 3 * 4` reduces to `Product(Add(2, 3), 4)`. Grouping is
controlled only by parentheses. The one refinement is inside the boolean
scan: when a connective's right operand is an arithmetic value followed by a
comparison, that comparison is reduced first, so `a < b && c < d` reads as
`And(Less(a, b), Less(c, d))`.

Parenthesized Groups
--------------------
A group is cut out of the sequence, reduced on its own fresh `NodeSequence`
and spliced back as a single node. Groups reached as the right operand of an
operator are reduced in the category that operator requires. Groups reached
directly by a scan are classified by content: a group holding a relational or
logical operator, or a boolean node, is boolean and is left for the boolean
scan; anything else is arithmetic.

Entry Points
------------
- `reduce_arithmetic(tokens)`: Reduce to an `ArithmeticExpression`.
- `reduce_boolean(tokens)`: Reduce to a `BooleanExpression`.
- `parse_expression(source)`: Tokenize and reduce to whichever node results.

Raises
------
ParseError
    Any subclass from `softver.softver_errors`. The first failure aborts the
    whole reduction; the partially rewritten sequence is discarded.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Union

from softver.softver_ast import (
    Add,
    And,
    ArithmeticExpression,
    BooleanExpression,
    BooleanLiteral,
    Equal,
    Great,
    GreatEqual,
    Less,
    LessEqual,
    Minus,
    Numeral,
    Or,
    Product,
    Skip,
    Statement,
    Uminus,
    Variable,
)
from softver.softver_constants import (
    AND,
    EQ,
    FALSE,
    GE,
    GT,
    IDENT,
    LE,
    LPAREN,
    LT,
    MINUS,
    MULT,
    NUMERAL,
    OR,
    PLUS,
    RPAREN,
    SKIP,
    TRUE,
    boolean_ops,
    opaque_ops,
    relational_ops,
)
from softver.softver_errors import (
    MalformedExpression,
    MalformedSubexpression,
    MissingLeftOperand,
    MissingOperand,
    MissingRightOperand,
    TypeMismatch,
    UnbalancedParentheses,
    UnexpectedNodeKind,
)
from softver.softver_lexer import Token, tokenize
from softver.softver_sequence import Node, NodeSequence, describe, is_token

logger = logging.getLogger(__name__)

ARITHMETIC = "arithmetic"
BOOLEAN = "boolean"

TraceSink = Callable[[str, NodeSequence], None]
ReducedNode = Union[ArithmeticExpression, BooleanExpression, Statement]

_CATEGORY: dict[str, type] = {
    ARITHMETIC: ArithmeticExpression,
    BOOLEAN: BooleanExpression,
}

# Leaf constructors for the atomic pass, keyed by token kind.
ATOMS: dict[str, Callable[[Token], Node]] = {
    NUMERAL: lambda tok: Numeral(int(tok.value)),
    IDENT: lambda tok: Variable(str(tok.value)),
    TRUE: lambda tok: BooleanLiteral(True),
    FALSE: lambda tok: BooleanLiteral(False),
    SKIP: lambda tok: Skip(),
}


@dataclass(frozen=True)
class BinaryRule:
    """How one binary operator reduces.

    Attributes:
        build: Node constructor taking (left, right).
        operands: Category both operands must belong to.
    """

    build: Callable[[Node, Node], Node]
    operands: str


ARITHMETIC_RULES: dict[str, BinaryRule] = {
    PLUS: BinaryRule(Add, ARITHMETIC),
    MINUS: BinaryRule(Minus, ARITHMETIC),
    MULT: BinaryRule(Product, ARITHMETIC),
}

BOOLEAN_RULES: dict[str, BinaryRule] = {
    AND: BinaryRule(And, BOOLEAN),
    OR: BinaryRule(Or, BOOLEAN),
    EQ: BinaryRule(Equal, ARITHMETIC),
    LT: BinaryRule(Less, ARITHMETIC),
    LE: BinaryRule(LessEqual, ARITHMETIC),
    GT: BinaryRule(Great, ARITHMETIC),
    GE: BinaryRule(GreatEqual, ARITHMETIC),
}


class Reducer:
    """
    Runs the reduction passes over node sequences.

    A Reducer holds no per-parse state beyond its optional trace sink, so one
    instance may be reused for any number of independent reductions.

    Attributes
    ----------
    trace : TraceSink | None
        Called as `trace(pass_name, sequence)` after every pass, including
        the passes run on parenthesized groups. Never needed for correctness.

    Methods
    -------
    reduce(nodes, category) -> ReducedNode
        Run every pass and return the single resulting node.
    run(sequence) -> NodeSequence
        Run every pass over `sequence` in place.
    resolve_atomic / resolve_unary / reduce_arithmetic / reduce_boolean
        The individual passes.
    extract(sequence, opener, category) -> Node
        Reduce the parenthesized group starting at `opener`.
    """

    def __init__(self, trace: TraceSink | None = None) -> None:
        self.trace = trace

    # ------------------------------------------------------------ orchestration

    def reduce(self, nodes: Iterable[Node], category: str | None = None) -> ReducedNode:
        """Reduce `nodes` to exactly one expression node.

        Args:
            nodes: Tokens (or already reduced nodes) in source order.
            category: ARITHMETIC or BOOLEAN to demand that category, or None
                to accept any completed node.

        Raises:
            MalformedExpression: If the sequence is empty, nests deeper than
                the interpreter stack allows, does not collapse to one node, or
                collapses to the wrong category.
        """
        sequence = NodeSequence(nodes)
        if not len(sequence):
            raise MalformedExpression("Empty expression")
        try:
            self.run(sequence)
        except RecursionError:
            raise MalformedExpression("Expression nesting too deep") from None

        if len(sequence) != 1:
            for position, node in enumerate(sequence):
                if is_token(node, *opaque_ops):
                    raise MalformedExpression(
                        f"'{describe(node)}' is not an expression operator",
                        operator=describe(node),
                        position=position,
                    )
            leftover = sequence.get(1)
            raise MalformedExpression(
                "Expression did not reduce to a single node",
                operator=describe(leftover),
                position=1,
            )
        result = sequence.get(0)
        expected: type | tuple[type, ...] = (
            ArithmeticExpression,
            BooleanExpression,
            Statement,
        )
        if category is not None:
            expected = _CATEGORY[category]
        if not isinstance(result, expected):
            raise MalformedExpression(
                f"Expected {category or 'an'} expression, got {describe(result)}",
                operator=describe(result),
                position=0,
            )
        return result

    def run(self, sequence: NodeSequence) -> NodeSequence:
        for name, step in (
            ("atomic", self.resolve_atomic),
            ("unary", self.resolve_unary),
            ("arithmetic", self.reduce_arithmetic),
            ("boolean", self.reduce_boolean),
        ):
            step(sequence)
            logger.debug("after %s pass: %r", name, sequence)
            if self.trace is not None:
                self.trace(name, sequence)
        return sequence

    # ------------------------------------------------------------------ atomic

    def resolve_token(self, sequence: NodeSequence, index: int) -> None:
        """Replace the token at `index` with its leaf node, if it is a leaf."""
        node = sequence.get(index)
        if not isinstance(node, Token):
            raise UnexpectedNodeKind(
                f"Expected a token, found {describe(node)}",
                operator=describe(node),
                position=index,
            )
        build = ATOMS.get(node.type)
        if build is not None:
            sequence.splice(index, index + 1, build(node))

    def resolve_atomic(self, sequence: NodeSequence) -> None:
        for index in range(len(sequence)):
            if is_token(sequence.get(index)):
                self.resolve_token(sequence, index)

    # ------------------------------------------------------------------- unary

    def resolve_unary(self, sequence: NodeSequence) -> None:
        index = 0
        while index < len(sequence):
            if is_token(sequence.get(index), MINUS) and self._in_unary_position(
                sequence, index
            ):
                self._negate(sequence, index)
            index += 1

    @staticmethod
    def _in_unary_position(sequence: NodeSequence, index: int) -> bool:
        # A `-` after a complete operand (or a closing group) is binary minus.
        if index == 0:
            return True
        previous = sequence.get(index - 1)
        return (
            isinstance(previous, Token)
            and previous.type != RPAREN
            and previous.type not in ATOMS
        )

    def _negate(self, sequence: NodeSequence, index: int) -> None:
        # A run of `-` signs shares one operand; the innermost sign sits last.
        slot = index + 1
        while slot < len(sequence) and is_token(sequence.get(slot), MINUS):
            slot += 1
        innermost = slot - 1
        if slot >= len(sequence):
            raise MissingOperand(
                "Negation has no operand", operator="-", position=innermost
            )

        operand = sequence.get(slot)
        if is_token(operand, LPAREN):
            self.extract(sequence, slot, ARITHMETIC)
        elif isinstance(operand, Token):
            self.resolve_token(sequence, slot)

        operand = sequence.get(slot)
        if isinstance(operand, Token):
            raise MissingOperand(
                f"Negation followed by {describe(operand)!r} instead of an operand",
                operator="-",
                position=innermost,
            )
        if not isinstance(operand, ArithmeticExpression):
            raise TypeMismatch(
                f"Negation needs an arithmetic operand, got {describe(operand)}",
                operator="-",
                position=innermost,
            )
        node: ArithmeticExpression = operand
        for _ in range(slot - index):
            node = Uminus(node)
        sequence.splice(index, slot + 1, node)
        logger.debug("reduced %d unary '-' at %d", slot - index, index)

    # ----------------------------------------------------------- subexpression

    def extract(
        self,
        sequence: NodeSequence,
        opener: int,
        category: str,
        closer: int | None = None,
    ) -> Node:
        """Reduce the group opened at `opener` and splice its node back in.

        The slots `[opener, closer]` are replaced by the single result, which
        then sits at `opener`. Callers that already matched the parenthesis
        pass `closer` to skip the search.

        Raises:
            UnbalancedParentheses: If the group never closes.
            MalformedSubexpression: If the group does not reduce to exactly one
                node of `category`.
        """
        if not is_token(sequence.get(opener), LPAREN):
            raise UnexpectedNodeKind(
                f"Expected '(', found {describe(sequence.get(opener))}",
                operator=describe(sequence.get(opener)),
                position=opener,
            )
        if closer is None:
            closer = sequence.find_closer(opener)
        group = NodeSequence(sequence.get(i) for i in range(opener + 1, closer))
        self.run(group)

        if len(group) != 1 or not isinstance(group.get(0), _CATEGORY[category]):
            raise MalformedSubexpression(
                f"Parenthesized group is not a single {category} expression",
                operator="(",
                position=opener,
            )
        node = group.get(0)
        sequence.splice(opener, closer + 1, node)
        logger.debug("reduced %s group at %d..%d", category, opener, closer)
        return node

    @staticmethod
    def classify_group(sequence: NodeSequence, opener: int, closer: int) -> str:
        for index in range(opener + 1, closer):
            node = sequence.get(index)
            if isinstance(node, BooleanExpression) or is_token(node, *boolean_ops):
                return BOOLEAN
        return ARITHMETIC

    # ------------------------------------------------------------ binary scans

    def reduce_arithmetic(self, sequence: NodeSequence) -> None:
        self._scan(sequence, ARITHMETIC_RULES, ARITHMETIC)

    def reduce_boolean(self, sequence: NodeSequence) -> None:
        self._scan(sequence, BOOLEAN_RULES, BOOLEAN)

    def _scan(
        self, sequence: NodeSequence, rules: dict[str, BinaryRule], category: str
    ) -> None:
        index = 0
        while index < len(sequence):
            node = sequence.get(index)
            if is_token(node, LPAREN):
                closer = sequence.find_closer(index)
                group = self.classify_group(sequence, index, closer)
                if group == ARITHMETIC or category == BOOLEAN:
                    self.extract(sequence, index, group, closer)
                else:
                    # Boolean group; the boolean scan owns it.
                    index = closer
            elif is_token(node, RPAREN):
                raise UnbalancedParentheses(
                    "Unmatched closing parenthesis", operator=")", position=index
                )
            elif isinstance(node, Token) and node.type in rules:
                index = self._reduce_binary(sequence, index, rules)
            index += 1

    def _reduce_binary(
        self, sequence: NodeSequence, index: int, rules: dict[str, BinaryRule]
    ) -> int:
        """Bind the operator at `index` to its neighbours.

        Returns:
            int: Index of the new combined node (the old left operand slot).
        """
        op = sequence.get(index)
        assert isinstance(op, Token)  # for mypy
        rule = rules[op.type]
        symbol = str(op.value)

        if index == 0:
            raise MissingLeftOperand(
                f"'{symbol}' has no left operand", operator=symbol, position=index
            )
        left = sequence.get(index - 1)
        self._check_operand(left, rule.operands, symbol, index, "left")

        if index + 1 >= len(sequence):
            raise MissingRightOperand(
                f"'{symbol}' has no right operand", operator=symbol, position=index
            )
        right = sequence.get(index + 1)
        if is_token(right, LPAREN):
            closer = sequence.find_closer(index + 1)
            category = rule.operands
            if category == BOOLEAN:
                category = self.classify_group(sequence, index + 1, closer)
            right = self.extract(sequence, index + 1, category, closer)
        elif isinstance(right, Token) and right.type in ATOMS:
            self.resolve_token(sequence, index + 1)
            right = sequence.get(index + 1)

        if (
            rule.operands == BOOLEAN
            and isinstance(right, ArithmeticExpression)
            and index + 2 < len(sequence)
            and is_token(sequence.get(index + 2), *relational_ops)
        ):
            # Comparison on the right of a connective is reduced on the spot.
            self._reduce_binary(sequence, index + 2, rules)
            right = sequence.get(index + 1)
        self._check_operand(right, rule.operands, symbol, index, "right")

        node = rule.build(left, right)
        sequence.splice(index - 1, index + 2, node)
        logger.debug("reduced '%s' at %d -> %s", symbol, index, type(node).__name__)
        return index - 1

    @staticmethod
    def _check_operand(
        node: Node, category: str, symbol: str, index: int, side: str
    ) -> None:
        if isinstance(node, _CATEGORY[category]):
            return
        if isinstance(node, Token) and node.type != RPAREN:
            missing = MissingLeftOperand if side == "left" else MissingRightOperand
            raise missing(
                f"'{symbol}' has {describe(node)!r} where its {side} operand should be",
                operator=symbol,
                position=index,
            )
        raise TypeMismatch(
            f"'{symbol}' needs a {category} {side} operand, got {describe(node)}",
            operator=symbol,
            position=index,
        )


def reduce_arithmetic(
    tokens: Iterable[Node], trace: TraceSink | None = None
) -> ArithmeticExpression:
    """Reduce `tokens` to a single arithmetic expression."""
    result = Reducer(trace).reduce(tokens, ARITHMETIC)
    assert isinstance(result, ArithmeticExpression)  # for mypy
    return result


def reduce_boolean(
    tokens: Iterable[Node], trace: TraceSink | None = None
) -> BooleanExpression:
    """Reduce `tokens` to a single boolean expression."""
    result = Reducer(trace).reduce(tokens, BOOLEAN)
    assert isinstance(result, BooleanExpression)  # for mypy
    return result


def parse_expression(
    source: str, category: str | None = None, trace: TraceSink | None = None
) -> ReducedNode:
    """Tokenize `source` and reduce it.

    Args:
        source: Expression text, e.g. "(x + 1) * 2 <= y".
        category: ARITHMETIC, BOOLEAN, or None to accept either (or `skip`).
        trace: Optional sink for the sequence after every pass.
    """
    return Reducer(trace).reduce(tokenize(source), category)


__all__ = [
    "ARITHMETIC",
    "BOOLEAN",
    "ATOMS",
    "ARITHMETIC_RULES",
    "BOOLEAN_RULES",
    "BinaryRule",
    "Reducer",
    "TraceSink",
    "ReducedNode",
    "reduce_arithmetic",
    "reduce_boolean",
    "parse_expression",
]
