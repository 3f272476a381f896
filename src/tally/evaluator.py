from __future__ import annotations

import logging
from typing import Dict, Optional

from .nodes import (
    AssignmentExpression,
    BinaryExpression,
    FloatLiteral,
    Identifier,
    IntegerLiteral,
    Node,
    Scope,
    StringLiteral,
    VariableDeclaration,
)
from .runtime import Environment, TallyRuntimeError, TlyValue

from .eval.bind import eval_assign, eval_var_decl
from .eval.blocks import eval_scope
from .eval.common import EvalFunc
from .eval.expr import eval_binary
from .eval.literals import eval_float, eval_identifier, eval_integer, eval_string

logger = logging.getLogger(__name__)


def _maybe_attach_location(exc: TallyRuntimeError, node: Node) -> None:
    # Innermost node with a position wins; outer frames leave it alone.
    if exc.tly_meta is not None:
        return

    meta = getattr(node, "meta", None)
    if meta is None or getattr(meta, "line", None) is None:
        return

    exc.tly_meta = meta

# ---------------- Public API ----------------

def eval_expr(ast: Node, env: Optional[Environment]=None) -> TlyValue:
    """Evaluate *ast* in one pass against *env* (a fresh one when omitted)."""
    if env is None:
        env = Environment()

    with env.exclusive():
        logger.debug("evaluation pass started: %s", type(ast).__name__)
        try:
            result = eval_node(ast, env)
        except TallyRuntimeError as e:
            logger.debug("evaluation pass failed: %s", e)
            raise

        logger.debug("evaluation pass finished: %r", result)
        return result

# ---------------- Core evaluator ----------------

def eval_node(n: Node, env: Environment) -> TlyValue:
    try:
        return _eval_node_inner(n, env)
    except TallyRuntimeError as e:
        _maybe_attach_location(e, n)
        raise


def _eval_node_inner(n: Node, env: Environment) -> TlyValue:
    handler = _NODE_DISPATCH.get(type(n))
    if handler is None:
        raise TallyRuntimeError(f"Unsupported node {type(n).__name__}")

    return handler(n, env)


def _eval_scope(n: Scope, env: Environment) -> TlyValue:
    return eval_scope(n.body, env, eval_node)


def _eval_var_decl(n: VariableDeclaration, env: Environment) -> TlyValue:
    return eval_var_decl(n, env, eval_node)


def _eval_assign(n: AssignmentExpression, env: Environment) -> TlyValue:
    return eval_assign(n, env, eval_node)


def _eval_binary(n: BinaryExpression, env: Environment) -> TlyValue:
    return eval_binary(n, env, eval_node)


_NODE_DISPATCH: Dict[type, EvalFunc] = {
    Scope: _eval_scope,
    IntegerLiteral: eval_integer,
    StringLiteral: eval_string,
    FloatLiteral: eval_float,
    Identifier: eval_identifier,
    VariableDeclaration: _eval_var_decl,
    AssignmentExpression: _eval_assign,
    BinaryExpression: _eval_binary,
}
