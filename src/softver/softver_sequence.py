"""
Mutable node sequence used as the working state of the reduction engine.

Each slot holds exactly one `Node`: a lexical `Token` or a completed
arithmetic, boolean or statement node. Reductions only ever replace whole
slots, through `get`, `remove`, `insert` and `splice`.
"""

from collections.abc import Iterable, Iterator
from typing import Union

from softver.softver_ast import ArithmeticExpression, BooleanExpression, Statement
from softver.softver_constants import LPAREN, RPAREN
from softver.softver_errors import IndexOutOfRange, UnbalancedParentheses
from softver.softver_lexer import Token

Node = Union[Token, ArithmeticExpression, BooleanExpression, Statement]


def is_token(node: Node, *types: str) -> bool:
    """True if `node` is a Token (of one of `types`, when any are given)."""
    return isinstance(node, Token) and (not types or node.type in types)


def describe(node: Node) -> str:
    """Short human-readable label for a slot, used in error messages."""
    if isinstance(node, Token):
        return str(node.value)
    return type(node).__name__


class NodeSequence:
    """Ordered, index-addressable collection of nodes.

    Attributes:
        nodes (list[Node]): Underlying storage, in source order.
    """

    def __init__(self, nodes: Iterable[Node] = ()) -> None:
        self.nodes: list[Node] = list(nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes)

    def __repr__(self) -> str:
        return f"NodeSequence({self.nodes!r})"

    def _check(self, index: int, upper: int) -> None:
        if index < 0 or index >= upper:
            raise IndexOutOfRange(
                f"Slot {index} outside sequence of length {len(self.nodes)}",
                position=index,
            )

    def get(self, index: int) -> Node:
        self._check(index, len(self.nodes))
        return self.nodes[index]

    def remove(self, index: int) -> Node:
        self._check(index, len(self.nodes))
        return self.nodes.pop(index)

    def insert(self, index: int, node: Node) -> None:
        # Inserting at len() appends.
        self._check(index, len(self.nodes) + 1)
        self.nodes.insert(index, node)

    def splice(self, start: int, stop: int, node: Node) -> list[Node]:
        """Replace slots `[start, stop)` with the single slot `node`.

        Returns:
            list[Node]: The removed slots, in order.
        """
        if start >= stop:
            raise IndexOutOfRange(
                f"Empty splice range [{start}, {stop})", position=start
            )
        self._check(start, len(self.nodes))
        self._check(stop - 1, len(self.nodes))
        removed = self.nodes[start:stop]
        self.nodes[start:stop] = [node]
        return removed

    def find_closer(self, opener: int) -> int:
        """Return the index of the `)` matching the `(` at `opener`.

        Raises:
            UnbalancedParentheses: If the sequence ends before depth returns to zero.
        """
        depth = 1
        index = opener + 1
        while index < len(self.nodes):
            node = self.nodes[index]
            if is_token(node, LPAREN):
                depth += 1
            elif is_token(node, RPAREN):
                depth -= 1
                if depth == 0:
                    return index
            index += 1
        raise UnbalancedParentheses(
            "Missing closing parenthesis", operator="(", position=opener
        )


__all__ = ["Node", "NodeSequence", "is_token", "describe"]
