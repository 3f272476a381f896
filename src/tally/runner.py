from __future__ import annotations

import traceback
from typing import Iterable, List, Optional, Union

from lark import Token, Tree

from .evaluator import eval_expr
from .lower import lower
from .nodes import Node, is_node
from .runtime import Environment, TallyRuntimeError, TlyValue
from .types import TallySyntaxError
from .utils import debug_py_trace_enabled

Program = Union[Node, Tree, Token]


def to_node(program: Program) -> Node:
    if is_node(program):
        return program

    return lower(program)


def run(program: Program, env: Optional[Environment]=None) -> TlyValue:
    """Lower *program* if needed and evaluate it in a single pass."""
    return eval_expr(to_node(program), env)


def run_statements(statements: Iterable[Program], env: Optional[Environment]=None) -> List[TlyValue]:
    """Evaluate top-level statements one pass each, sharing *env*.

    Stops at the first error; bindings made by earlier statements stay in
    *env* so a host can report and continue with the same environment.
    """
    if env is None:
        env = Environment()

    results: List[TlyValue] = []

    for stmt in statements:
        results.append(eval_expr(to_node(stmt), env))

    return results


def format_error(exc: Union[TallyRuntimeError, TallySyntaxError]) -> str:
    text = f"{type(exc).__name__}: {exc}"

    if debug_py_trace_enabled() and exc.__traceback__ is not None:
        tb = "".join(traceback.format_tb(exc.__traceback__))
        text = f"{text}\n\nPython traceback:\n{tb}"

    return text
