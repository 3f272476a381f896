from __future__ import annotations

from ..nodes import FloatLiteral, Identifier, IntegerLiteral, StringLiteral
from ..runtime import Environment, TallyUnknownVariable, TlyFloat, TlyInt, TlyString, TlyValue

def eval_integer(node: IntegerLiteral, _env: Environment) -> TlyInt:
    return TlyInt(node.value)

def eval_float(node: FloatLiteral, _env: Environment) -> TlyFloat:
    return TlyFloat(float(node.value))

def eval_string(node: StringLiteral, _env: Environment) -> TlyString:
    return TlyString(node.value)

def eval_identifier(node: Identifier, env: Environment) -> TlyValue:
    val = env.lookup(node.name)
    if val is None:
        raise TallyUnknownVariable(node.name)

    return val
