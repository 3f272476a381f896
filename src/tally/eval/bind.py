from __future__ import annotations

from ..nodes import AssignmentExpression, VariableDeclaration
from ..runtime import Environment, TlyValue
from .common import EvalFunc, expect_ident_node

def eval_var_decl(node: VariableDeclaration, env: Environment, eval_func: EvalFunc) -> TlyValue:
    name = expect_ident_node(node.name, "declaration")
    # The value is computed even when the declaration itself is rejected.
    value = eval_func(node.value, env)
    env.declare(name, value)
    return value

def eval_assign(node: AssignmentExpression, env: Environment, eval_func: EvalFunc) -> TlyValue:
    name = expect_ident_node(node.name, "assignment")
    value = eval_func(node.value, env)
    env.assign(name, value)
    return value
