from __future__ import annotations

from textwrap import dedent

import pytest

from tally.evaluator import eval_expr
from tally.nodes import AssignmentExpression, SourceMeta, VariableDeclaration
from tally.runner import format_error, run
from tally.runtime import Environment
from tally.types import (
    TlyArray,
    TlyBool,
    TlyFn,
    TlyInt,
    TlyIterable,
    TlyNativeFn,
    TlyNull,
    TlyString,
)
from tests.support.harness import (
    TallyArithmeticError,
    TallyDuplicateDeclaration,
    TallyIncompatibleTypes,
    TallyMalformedDeclaration,
    TallyRuntimeError,
    TallyTypeError,
    TallyUnknownVariable,
    binop,
    ident,
    let,
    num,
    parse_source,
    scope,
    text,
)


@pytest.mark.parametrize(
    "exc_type",
    [
        pytest.param(TallyDuplicateDeclaration, id="duplicate"),
        pytest.param(TallyUnknownVariable, id="unknown"),
        pytest.param(TallyIncompatibleTypes, id="incompatible"),
        pytest.param(TallyArithmeticError, id="arithmetic"),
        pytest.param(TallyMalformedDeclaration, id="malformed"),
    ],
)
def test_taxonomy_shares_runtime_base(exc_type: type) -> None:
    assert issubclass(exc_type, TallyRuntimeError)


def test_incompatible_types_is_a_type_error() -> None:
    assert issubclass(TallyIncompatibleTypes, TallyTypeError)


def test_malformed_declaration_target() -> None:
    node = VariableDeclaration(num(1), num(2))

    with pytest.raises(TallyMalformedDeclaration) as excinfo:
        eval_expr(node)

    assert isinstance(excinfo.value.node, type(num(1)))
    assert excinfo.value.context == "declaration"


def test_malformed_assignment_target() -> None:
    node = AssignmentExpression(binop(ident("a"), "+", num(1)), num(2))

    with pytest.raises(TallyMalformedDeclaration, match="assignment target"):
        eval_expr(node, Environment({"a": TlyInt(1)}))


def test_malformed_target_checked_before_value() -> None:
    # The value would fail with an unknown variable; the target error wins.
    node = VariableDeclaration(text("x"), ident("nope"))

    with pytest.raises(TallyMalformedDeclaration):
        eval_expr(node)


def test_declaration_value_evaluated_before_duplicate_check() -> None:
    env = Environment({"x": TlyInt(1)})

    with pytest.raises(TallyUnknownVariable):
        eval_expr(let("x", ident("missing")), env)


def test_left_operand_error_wins() -> None:
    node = binop(ident("left_missing"), "+", ident("right_missing"))

    with pytest.raises(TallyUnknownVariable) as excinfo:
        eval_expr(node)

    assert excinfo.value.name == "left_missing"


def test_modulo_by_zero_stops_the_pass() -> None:
    env = Environment()

    with pytest.raises(TallyArithmeticError, match="Modulo by zero"):
        run(scope(let("a", num(1)), binop(num(5), "%", num(0)), let("b", num(2))), env)

    assert "a" in env
    assert "b" not in env


@pytest.mark.parametrize(
    "value",
    [
        pytest.param(TlyNull(), id="null"),
        pytest.param(TlyBool(True), id="bool"),
        pytest.param(TlyString("s"), id="string"),
        pytest.param(TlyArray([TlyInt(1)]), id="array"),
        pytest.param(TlyIterable([]), id="iterable"),
        pytest.param(TlyFn([], []), id="function"),
        pytest.param(TlyNativeFn([]), id="native-function"),
    ],
)
@pytest.mark.parametrize(
    "op",
    [
        pytest.param("+", id="add"),
        pytest.param("-", id="sub"),
        pytest.param("*", id="mul"),
        pytest.param("/", id="div"),
        pytest.param("%", id="mod"),
        pytest.param("^", id="pow"),
    ],
)
def test_non_numeric_operands_rejected_both_sides(value, op: str) -> None:
    env = Environment({"v": value})

    with pytest.raises(TallyIncompatibleTypes):
        eval_expr(binop(ident("v"), op, num(1)), env)

    with pytest.raises(TallyIncompatibleTypes):
        eval_expr(binop(num(1), op, ident("v")), env)


def test_unsupported_node_rejected() -> None:
    with pytest.raises(TallyRuntimeError, match="Unsupported node"):
        eval_expr("1 + 1")  # type: ignore[arg-type]


def test_error_reports_source_location() -> None:
    tree = parse_source(
        dedent(
            """\
            let x = 1;
            let x = 2
        """
        )
    )

    with pytest.raises(TallyDuplicateDeclaration) as excinfo:
        run(tree)

    assert excinfo.value.tly_meta is not None
    assert excinfo.value.tly_meta.line == 2
    assert "(line 2" in str(excinfo.value)


def test_innermost_location_wins() -> None:
    inner = binop(num(1), "%", num(0))
    inner.meta = SourceMeta(line=3, column=7)
    outer = scope(inner)
    outer.meta = SourceMeta(line=1, column=1)

    with pytest.raises(TallyArithmeticError) as excinfo:
        eval_expr(outer)

    assert str(excinfo.value).endswith("(line 3, col 7)")


def test_format_error_plain() -> None:
    with pytest.raises(TallyUnknownVariable) as excinfo:
        eval_expr(ident("ghost"))

    assert format_error(excinfo.value) == "TallyUnknownVariable: Variable 'ghost' does not exist"


def test_format_error_with_python_trace(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TALLY_DEBUG_PY_TRACE", "1")

    with pytest.raises(TallyUnknownVariable) as excinfo:
        eval_expr(ident("ghost"))

    rendered = format_error(excinfo.value)
    assert rendered.startswith("TallyUnknownVariable: Variable 'ghost' does not exist")
    assert "Python traceback:" in rendered
