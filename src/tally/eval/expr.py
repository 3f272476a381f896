from __future__ import annotations

import logging
import math
import operator as _op
from typing import Callable, Tuple, Union

from ..nodes import BinaryExpression, Operator
from ..runtime import (
    Environment,
    TallyArithmeticError,
    TallyIncompatibleTypes,
    TallyNumericError,
    TlyFloat,
    TlyInt,
    TlyNull,
    TlyValue,
)
from ..types import I128_MAX, I128_MIN, fits_i128, wrap_i128
from .common import EvalFunc

logger = logging.getLogger(__name__)

U32_MAX = (1 << 32) - 1

IntOp = Callable[[int, int], int]
FloatOp = Callable[[float, float], float]

def eval_binary(node: BinaryExpression, env: Environment, eval_func: EvalFunc) -> TlyValue:
    # Both sides are always evaluated, left first.
    lhs = eval_func(node.left, env)
    rhs = eval_func(node.right, env)
    return apply_binary_operator(node.operator, lhs, rhs)

def apply_binary_operator(op: Union[Operator, str], lhs: TlyValue, rhs: TlyValue) -> TlyValue:
    if not isinstance(op, Operator):
        logger.debug("operator %r is not known, result is null", op)
        return TlyNull()

    match op:
        case Operator.ADD:
            return _numeric(op, lhs, rhs, _op.add, _op.add)
        case Operator.SUB:
            return _numeric(op, lhs, rhs, _op.sub, _op.sub)
        case Operator.MUL:
            return _numeric(op, lhs, rhs, _op.mul, _op.mul)
        case Operator.DIV:
            a, b = _as_floats(op, lhs, rhs)
            return TlyFloat(float_div(a, b))
        case Operator.MOD:
            return _int_mod(op, lhs, rhs)
        case Operator.POW:
            return _numeric(op, lhs, rhs, int_pow, float_pow, wrap=False)

    raise TallyIncompatibleTypes(lhs, rhs, str(op))  # pragma: no cover - exhaustive

def _numeric(op: Operator, lhs: TlyValue, rhs: TlyValue, int_fn: IntOp, float_fn: FloatOp, wrap: bool=True) -> TlyValue:
    match (lhs, rhs):
        case (TlyInt(value=a), TlyInt(value=b)):
            result = int_fn(a, b)
            return TlyInt(wrap_i128(result) if wrap else result)
        case (TlyInt(value=a), TlyFloat(value=b)):
            return TlyFloat(float_fn(float(a), b))
        case (TlyFloat(value=a), TlyInt(value=b)):
            return TlyFloat(float_fn(a, float(b)))
        case (TlyFloat(value=a), TlyFloat(value=b)):
            return TlyFloat(float_fn(a, b))

    raise TallyIncompatibleTypes(lhs, rhs, str(op))

def _as_floats(op: Operator, lhs: TlyValue, rhs: TlyValue) -> Tuple[float, float]:
    if isinstance(lhs, (TlyInt, TlyFloat)) and isinstance(rhs, (TlyInt, TlyFloat)):
        return float(lhs.value), float(rhs.value)

    raise TallyIncompatibleTypes(lhs, rhs, str(op))

def _int_mod(op: Operator, lhs: TlyValue, rhs: TlyValue) -> TlyInt:
    if not (isinstance(lhs, TlyInt) and isinstance(rhs, TlyInt)):
        raise TallyIncompatibleTypes(lhs, rhs, str(op))

    if rhs.value == 0:
        raise TallyArithmeticError(f"Modulo by zero: {lhs.value} % 0")

    return TlyInt(wrap_i128(trunc_rem(lhs.value, rhs.value)))

def trunc_rem(a: int, b: int) -> int:
    """Remainder of truncating division; the sign follows the dividend."""
    r = abs(a) % abs(b)
    return -r if a < 0 else r

def int_pow(base: int, exp: int) -> int:
    if exp < 0:
        raise TallyNumericError(f"Integer power needs a non-negative exponent, got {exp}")

    if exp > U32_MAX:
        raise TallyNumericError(f"Exponent {exp} does not fit in an unsigned 32-bit integer")

    # |base| >= 2 with exp >= 128 always leaves the 128-bit range.
    if abs(base) > 1 and exp >= 128:
        raise TallyNumericError(f"Integer overflow in {base} ^ {exp}")

    result = base ** exp
    if not fits_i128(result):
        raise TallyNumericError(f"Integer overflow in {base} ^ {exp}: result outside [{I128_MIN}, {I128_MAX}]")

    return result

def float_div(a: float, b: float) -> float:
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)

    return a / b

def float_pow(a: float, b: float) -> float:
    try:
        return math.pow(a, b)
    except OverflowError:
        return _signed_inf(a, b)
    except ValueError:
        if a == 0.0 and b < 0:
            return _signed_inf(a, b)
        # negative base, fractional exponent
        return math.nan

def _is_odd_integer(x: float) -> bool:
    return x.is_integer() and math.fmod(x, 2.0) != 0.0

def _signed_inf(base: float, exp: float) -> float:
    if math.copysign(1.0, base) < 0 and _is_odd_integer(exp):
        return -math.inf
    return math.inf
