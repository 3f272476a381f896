from __future__ import annotations

import math

import pytest

from tests.support.harness import (
    TallyArithmeticError,
    TallyIncompatibleTypes,
    TallyNumericError,
    TallySyntaxError,
    run_runtime_case,
)

SCENARIOS = [
    pytest.param("1 + 2", ("int", 3), None, id="add-int-int"),
    pytest.param("1 + 2.5", ("float", 3.5), None, id="add-int-float"),
    pytest.param("2.5 + 1", ("float", 3.5), None, id="add-float-int"),
    pytest.param("0.5 + 0.25", ("float", 0.75), None, id="add-float-float"),
    pytest.param("10 - 4", ("int", 6), None, id="sub-int-int"),
    pytest.param("3 - 5", ("int", -2), None, id="sub-int-negative"),
    pytest.param("7.5 - 2", ("float", 5.5), None, id="sub-float-int"),
    pytest.param("2 - 7.5", ("float", -5.5), None, id="sub-int-float"),
    pytest.param("6 * 7", ("int", 42), None, id="mul-int-int"),
    pytest.param("3 * 0.5", ("float", 1.5), None, id="mul-int-float"),
    pytest.param("7 / 2", ("float", 3.5), None, id="div-int-int-is-float"),
    pytest.param("8 / 2", ("float", 4.0), None, id="div-exact-still-float"),
    pytest.param("1 / 4.0", ("float", 0.25), None, id="div-int-float"),
    pytest.param("9.0 / 3", ("float", 3.0), None, id="div-float-int"),
    pytest.param("1 / 0", ("float", math.inf), None, id="div-by-zero-inf"),
    pytest.param("0 - 1 / 0", ("float", -math.inf), None, id="div-by-zero-neg-inf"),
    pytest.param("0 / 0", ("float", math.nan), None, id="div-zero-by-zero-nan"),
    pytest.param("0.0 / 0.0", ("float", math.nan), None, id="div-float-zero-nan"),
    pytest.param("7 % 3", ("int", 1), None, id="mod-int-int"),
    pytest.param("(0 - 7) % 3", ("int", -1), None, id="mod-sign-follows-dividend"),
    pytest.param("7 % (0 - 3)", ("int", 1), None, id="mod-negative-divisor"),
    pytest.param("5 % 0", None, TallyArithmeticError, id="mod-by-zero"),
    pytest.param("5.0 % 2", None, TallyIncompatibleTypes, id="mod-float-lhs"),
    pytest.param("5 % 2.0", None, TallyIncompatibleTypes, id="mod-float-rhs"),
    pytest.param("5.0 % 0", None, TallyIncompatibleTypes, id="mod-float-by-zero-is-type-error"),
    pytest.param("2 ^ 10", ("int", 1024), None, id="pow-int-int"),
    pytest.param("2 ^ 0", ("int", 1), None, id="pow-zero-exponent"),
    pytest.param("2 ^ 3 ^ 2", ("int", 512), None, id="pow-right-assoc"),
    pytest.param("2.0 ^ 0.5", ("float", 1.4142135623730951), None, id="pow-float-float"),
    pytest.param("4 ^ 0.5", ("float", 2.0), None, id="pow-int-float"),
    pytest.param("2.0 ^ 3", ("float", 8.0), None, id="pow-float-int"),
    pytest.param("2 ^ (0 - 1)", None, TallyNumericError, id="pow-negative-exponent"),
    pytest.param("2 ^ (0 - 1.0)", ("float", 0.5), None, id="pow-negative-float-exponent"),
    pytest.param("1 + 2 * 3", ("int", 7), None, id="precedence-mul-over-add"),
    pytest.param("(1 + 2) * 3", ("int", 9), None, id="grouping"),
    pytest.param("10 - 3 - 2", ("int", 5), None, id="sub-left-assoc"),
    pytest.param('"a" + 1', None, TallyIncompatibleTypes, id="string-plus-int"),
    pytest.param('1 + "a"', None, TallyIncompatibleTypes, id="int-plus-string"),
    pytest.param('"a" + "b"', None, TallyIncompatibleTypes, id="string-plus-string"),
    pytest.param('"a" * 2', None, TallyIncompatibleTypes, id="string-times-int"),
    pytest.param('2.0 / "x"', None, TallyIncompatibleTypes, id="float-div-string"),
    pytest.param('"x" ^ 2', None, TallyIncompatibleTypes, id="string-pow"),
    pytest.param("1 @ 2", None, TallySyntaxError, id="unknown-operator-rejected"),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_operators(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_incompatible_types_carries_operands() -> None:
    with pytest.raises(TallyIncompatibleTypes) as excinfo:
        run_runtime_case('"a" - 1', None, None)

    err = excinfo.value
    assert err.operator == "-"
    assert repr(err.left) == '"a"'
    assert repr(err.right) == "1"
    assert "Incompatible types" in str(err)
