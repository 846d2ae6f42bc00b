"""
Abstract syntax tree for softver expressions and statements.

The tree is a closed tagged union per category:

    ArithmeticExpression: Numeral, Variable, Add, Minus, Product, Uminus
    BooleanExpression:    BooleanLiteral, And, Or,
                          Equal, Less, LessEqual, Great, GreatEqual
    Statement:            Skip

Nodes are frozen dataclasses. A node exclusively owns its operand sub-trees
and is never mutated after construction, so structural equality (`==`) and
hashing are safe to rely on in tests and caches.

Every node supports:
    to_dict(): Recursive plain-dict form, suitable for JSON output.
    evaluate(state): Value of the node against a program state, a mapping
        from variable names to integers.

Example:
    >>> expr = Add(Numeral(2), Variable("x"))
    >>> expr.evaluate({"x": 40})
    42
    >>> expr.to_dict()
    {'kind': 'add', 'left': {'kind': 'numeral', 'value': 2}, 'right': {'kind': 'variable', 'value': 'x'}}
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, TypedDict

from softver.softver_errors import UnboundVariable

State = Mapping[str, int]


class NodeDict(TypedDict, total=False):
    """Serialized form of a node produced by `to_dict()`.

    Fields:
        kind (str): Lowercase node kind (e.g. "add", "less", "skip").
        value (Any): Leaf payload (numeral value, variable name, boolean).
        left / right (NodeDict): Binary operands.
        operand (NodeDict): Unary operand.
    """

    kind: str
    value: Any
    left: "NodeDict"
    right: "NodeDict"
    operand: "NodeDict"


class Expression:
    """Common base for every tree node."""

    kind: ClassVar[str] = ""

    def to_dict(self) -> NodeDict:  # pragma: no cover
        raise NotImplementedError


# ------------------------------------------------------------------ arithmetic


class ArithmeticExpression(Expression):
    """Base for expressions that evaluate to an integer."""

    def evaluate(self, state: State) -> int:  # pragma: no cover
        raise NotImplementedError


@dataclass(frozen=True)
class Numeral(ArithmeticExpression):
    value: int

    kind: ClassVar[str] = "numeral"

    def evaluate(self, state: State) -> int:
        return self.value

    def to_dict(self) -> NodeDict:
        return {"kind": self.kind, "value": self.value}


@dataclass(frozen=True)
class Variable(ArithmeticExpression):
    name: str

    kind: ClassVar[str] = "variable"

    def evaluate(self, state: State) -> int:
        try:
            return state[self.name]
        except KeyError:
            raise UnboundVariable(self.name) from None

    def to_dict(self) -> NodeDict:
        return {"kind": self.kind, "value": self.name}


@dataclass(frozen=True)
class BinaryArithmetic(ArithmeticExpression):
    left: ArithmeticExpression
    right: ArithmeticExpression

    def to_dict(self) -> NodeDict:
        return {
            "kind": self.kind,
            "left": self.left.to_dict(),
            "right": self.right.to_dict(),
        }


@dataclass(frozen=True)
class Add(BinaryArithmetic):
    kind: ClassVar[str] = "add"

    def evaluate(self, state: State) -> int:
        return self.left.evaluate(state) + self.right.evaluate(state)


@dataclass(frozen=True)
class Minus(BinaryArithmetic):
    kind: ClassVar[str] = "minus"

    def evaluate(self, state: State) -> int:
        return self.left.evaluate(state) - self.right.evaluate(state)


@dataclass(frozen=True)
class Product(BinaryArithmetic):
    kind: ClassVar[str] = "product"

    def evaluate(self, state: State) -> int:
        return self.left.evaluate(state) * self.right.evaluate(state)


@dataclass(frozen=True)
class Uminus(ArithmeticExpression):
    operand: ArithmeticExpression

    kind: ClassVar[str] = "uminus"

    def evaluate(self, state: State) -> int:
        return -self.operand.evaluate(state)

    def to_dict(self) -> NodeDict:
        return {"kind": self.kind, "operand": self.operand.to_dict()}


# --------------------------------------------------------------------- boolean


class BooleanExpression(Expression):
    """Base for expressions that evaluate to a truth value."""

    def evaluate(self, state: State) -> bool:  # pragma: no cover
        raise NotImplementedError


@dataclass(frozen=True)
class BooleanLiteral(BooleanExpression):
    value: bool

    kind: ClassVar[str] = "boolean"

    def evaluate(self, state: State) -> bool:
        return self.value

    def to_dict(self) -> NodeDict:
        return {"kind": self.kind, "value": self.value}


@dataclass(frozen=True)
class Connective(BooleanExpression):
    left: BooleanExpression
    right: BooleanExpression

    def to_dict(self) -> NodeDict:
        return {
            "kind": self.kind,
            "left": self.left.to_dict(),
            "right": self.right.to_dict(),
        }


@dataclass(frozen=True)
class And(Connective):
    kind: ClassVar[str] = "and"

    def evaluate(self, state: State) -> bool:
        return self.left.evaluate(state) and self.right.evaluate(state)


@dataclass(frozen=True)
class Or(Connective):
    kind: ClassVar[str] = "or"

    def evaluate(self, state: State) -> bool:
        return self.left.evaluate(state) or self.right.evaluate(state)


@dataclass(frozen=True)
class Comparison(BooleanExpression):
    """Relational test between two arithmetic operands."""

    left: ArithmeticExpression
    right: ArithmeticExpression

    def to_dict(self) -> NodeDict:
        return {
            "kind": self.kind,
            "left": self.left.to_dict(),
            "right": self.right.to_dict(),
        }


@dataclass(frozen=True)
class Equal(Comparison):
    kind: ClassVar[str] = "equal"

    def evaluate(self, state: State) -> bool:
        return self.left.evaluate(state) == self.right.evaluate(state)


@dataclass(frozen=True)
class Less(Comparison):
    kind: ClassVar[str] = "less"

    def evaluate(self, state: State) -> bool:
        return self.left.evaluate(state) < self.right.evaluate(state)


@dataclass(frozen=True)
class LessEqual(Comparison):
    kind: ClassVar[str] = "less_equal"

    def evaluate(self, state: State) -> bool:
        return self.left.evaluate(state) <= self.right.evaluate(state)


@dataclass(frozen=True)
class Great(Comparison):
    kind: ClassVar[str] = "great"

    def evaluate(self, state: State) -> bool:
        return self.left.evaluate(state) > self.right.evaluate(state)


@dataclass(frozen=True)
class GreatEqual(Comparison):
    kind: ClassVar[str] = "great_equal"

    def evaluate(self, state: State) -> bool:
        return self.left.evaluate(state) >= self.right.evaluate(state)


# ------------------------------------------------------------------- statement


class Statement(Expression):
    """Base for statements. Evaluating a statement yields the next state."""

    def evaluate(self, state: State) -> State:  # pragma: no cover
        raise NotImplementedError


@dataclass(frozen=True)
class Skip(Statement):
    kind: ClassVar[str] = "skip"

    def evaluate(self, state: State) -> State:
        return state

    def to_dict(self) -> NodeDict:
        return {"kind": self.kind}


__all__ = [
    "State",
    "NodeDict",
    "Expression",
    "ArithmeticExpression",
    "Numeral",
    "Variable",
    "BinaryArithmetic",
    "Add",
    "Minus",
    "Product",
    "Uminus",
    "BooleanExpression",
    "BooleanLiteral",
    "Connective",
    "And",
    "Or",
    "Comparison",
    "Equal",
    "Less",
    "LessEqual",
    "Great",
    "GreatEqual",
    "Statement",
    "Skip",
]
