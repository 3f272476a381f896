from __future__ import annotations

import os as _os

from .types import TlyArray, TlyFn, TlyIterable, TlyNativeFn, TlyValue

_TRUTHY_FLAGS = {"1", "true", "yes", "on"}


def _env_flag(name: str) -> bool:
    raw = _os.environ.get(name)
    if raw is None:
        return False
    return raw.strip().lower() in _TRUTHY_FLAGS


def debug_py_trace_enabled() -> bool:
    """Append Python tracebacks when the runner formats an error."""
    return _env_flag("TALLY_DEBUG_PY_TRACE")


def permissive_operators_enabled() -> bool:
    """Keep unknown operator symbols instead of rejecting them; they evaluate to null."""
    return _env_flag("TALLY_PERMISSIVE_OPS")


def clone_value(value: TlyValue) -> TlyValue:
    """Copy a value so the caller cannot mutate a binding through it.

    Scalars are frozen and returned as-is. Node payloads of the reserved
    variants are shared; they are never mutated by the evaluator.
    """
    match value:
        case TlyArray(items=items):
            return TlyArray([clone_value(item) for item in items])
        case TlyIterable(nodes=nodes):
            return TlyIterable(list(nodes))
        case TlyFn(args=args, body=body):
            return TlyFn([clone_value(arg) for arg in args], list(body))
        case TlyNativeFn(args=args):
            return TlyNativeFn([clone_value(arg) for arg in args])
        case _:
            return value
