"""Tally: a tree-walking evaluator for a minimal expression language."""

from .evaluator import eval_expr, eval_node
from .lower import lower
from .nodes import (
    AssignmentExpression,
    BinaryExpression,
    FloatLiteral,
    Identifier,
    IntegerLiteral,
    Operator,
    Scope,
    SourceMeta,
    StringLiteral,
    VariableDeclaration,
)
from .runner import format_error, run, run_statements
from .runtime import Environment
from .types import (
    TallyArithmeticError,
    TallyDuplicateDeclaration,
    TallyIncompatibleTypes,
    TallyMalformedDeclaration,
    TallyNumericError,
    TallyRuntimeError,
    TallySyntaxError,
    TallyTypeError,
    TallyUnknownVariable,
    TlyArray,
    TlyBool,
    TlyFloat,
    TlyFn,
    TlyInt,
    TlyIterable,
    TlyNativeFn,
    TlyNull,
    TlyString,
    TlyValue,
)

__all__ = [
    "AssignmentExpression",
    "BinaryExpression",
    "Environment",
    "FloatLiteral",
    "Identifier",
    "IntegerLiteral",
    "Operator",
    "Scope",
    "SourceMeta",
    "StringLiteral",
    "TallyArithmeticError",
    "TallyDuplicateDeclaration",
    "TallyIncompatibleTypes",
    "TallyMalformedDeclaration",
    "TallyNumericError",
    "TallyRuntimeError",
    "TallySyntaxError",
    "TallyTypeError",
    "TallyUnknownVariable",
    "TlyArray",
    "TlyBool",
    "TlyFloat",
    "TlyFn",
    "TlyInt",
    "TlyIterable",
    "TlyNativeFn",
    "TlyNull",
    "TlyString",
    "TlyValue",
    "VariableDeclaration",
    "eval_expr",
    "eval_node",
    "format_error",
    "lower",
    "run",
    "run_statements",
]
