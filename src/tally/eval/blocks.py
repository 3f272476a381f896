from __future__ import annotations

from typing import Iterable

from ..nodes import Node
from ..runtime import Environment, TlyNull, TlyValue
from .common import EvalFunc

def eval_scope(body: Iterable[Node], env: Environment, eval_func: EvalFunc) -> TlyValue:
    """Run a statement list against one environment, returning the last value."""
    result: TlyValue = TlyNull()

    for stmt in body:
        result = eval_func(stmt, env)

    return result
