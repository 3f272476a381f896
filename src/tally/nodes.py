"""AST node classes consumed by the evaluator.

The parser that builds these lives outside this package; `lower.py` converts
a lark parse tree into them. Nodes are plain dataclasses, so hosts can also
construct trees directly.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Union
from typing_extensions import TypeAlias

from .types import I128_MAX, I128_MIN, TallySyntaxError, fits_i128
from .utils import permissive_operators_enabled


@dataclass(frozen=True)
class SourceMeta:
    line: Optional[int] = None
    column: Optional[int] = None


class Operator(Enum):
    """Binary operator symbols understood by the evaluator."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    POW = "^"

    @classmethod
    def from_symbol(cls, symbol: str, meta: Optional[SourceMeta] = None) -> "Operator":
        try:
            return cls(symbol)
        except ValueError:
            raise TallySyntaxError(f"Unknown operator '{symbol}'", meta) from None

    def __str__(self) -> str:
        return self.value


def _meta_field() -> Any:
    return field(default=None, compare=False, repr=False)


@dataclass
class Scope:
    body: List["Node"] = field(default_factory=list)
    meta: Optional[SourceMeta] = _meta_field()


@dataclass
class IntegerLiteral:
    value: int
    meta: Optional[SourceMeta] = _meta_field()

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TallySyntaxError(
                f"Integer literal must hold an int, got {type(self.value).__name__}",
                self.meta,
            )
        if not fits_i128(self.value):
            raise TallySyntaxError(
                f"Integer literal {self.value} outside [{I128_MIN}, {I128_MAX}]",
                self.meta,
            )


@dataclass
class StringLiteral:
    value: str
    meta: Optional[SourceMeta] = _meta_field()


@dataclass
class FloatLiteral:
    value: float
    meta: Optional[SourceMeta] = _meta_field()


@dataclass
class Identifier:
    name: str
    meta: Optional[SourceMeta] = _meta_field()


@dataclass
class BinaryExpression:
    left: "Node"
    operator: Union[Operator, str]
    right: "Node"
    meta: Optional[SourceMeta] = _meta_field()

    def __post_init__(self) -> None:
        if isinstance(self.operator, Operator):
            return

        # Unknown symbols survive only in permissive mode; they evaluate to null.
        if permissive_operators_enabled():
            try:
                self.operator = Operator(self.operator)
            except ValueError:
                pass
            return

        self.operator = Operator.from_symbol(self.operator, self.meta)


@dataclass
class AssignmentExpression:
    name: "Node"
    value: "Node"
    meta: Optional[SourceMeta] = _meta_field()


@dataclass
class VariableDeclaration:
    name: "Node"
    value: "Node"
    meta: Optional[SourceMeta] = _meta_field()


Node: TypeAlias = (
    Scope
    | IntegerLiteral
    | StringLiteral
    | FloatLiteral
    | Identifier
    | BinaryExpression
    | AssignmentExpression
    | VariableDeclaration
)

NODE_TYPES = (
    Scope,
    IntegerLiteral,
    StringLiteral,
    FloatLiteral,
    Identifier,
    BinaryExpression,
    AssignmentExpression,
    VariableDeclaration,
)


def is_node(value: object) -> bool:
    return isinstance(value, NODE_TYPES)
