from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional, Tuple
from typing_extensions import TypeAlias, TypeGuard

if TYPE_CHECKING:
    from .nodes import Node, SourceMeta

I128_MIN = -(1 << 127)
I128_MAX = (1 << 127) - 1
_I128_SPAN = 1 << 128

def wrap_i128(n: int) -> int:
    """Reduce *n* into the signed 128-bit range with two's-complement wraparound."""
    n = (n - I128_MIN) % _I128_SPAN
    return n + I128_MIN

def fits_i128(n: int) -> bool:
    return I128_MIN <= n <= I128_MAX

# ---------- Value Model ----------

@dataclass(frozen=True)
class TlyNull:
    def __repr__(self) -> str:
        return "null"

@dataclass(frozen=True)
class TlyInt:
    value: int
    def __repr__(self) -> str:
        return str(self.value)

@dataclass(frozen=True)
class TlyFloat:
    value: float
    def __repr__(self) -> str:
        return repr(self.value)

@dataclass(frozen=True)
class TlyString:
    value: str
    def __repr__(self) -> str:
        return f'"{self.value}"'

@dataclass(frozen=True)
class TlyBool:
    value: bool
    def __repr__(self) -> str:
        return "true" if self.value else "false"

# Reserved variants: part of the value model, never produced by the evaluator.

@dataclass
class TlyArray:
    items: List['TlyValue'] = field(default_factory=list)
    def __repr__(self) -> str:
        return "[" + ", ".join(repr(x) for x in self.items) + "]"

@dataclass
class TlyIterable:
    nodes: List['Node'] = field(default_factory=list)
    def __repr__(self) -> str:
        return f"<iterable nodes={len(self.nodes)}>"

@dataclass
class TlyFn:
    args: List['TlyValue'] = field(default_factory=list)
    body: List['Node'] = field(default_factory=list)
    def __repr__(self) -> str:
        arg_desc = ", ".join(repr(a) for a in self.args) if self.args else "nullary"
        return f"<fn args={arg_desc} body={len(self.body)}>"

@dataclass
class TlyNativeFn:
    args: List['TlyValue'] = field(default_factory=list)
    def __repr__(self) -> str:
        arg_desc = ", ".join(repr(a) for a in self.args) if self.args else "nullary"
        return f"<native-fn args={arg_desc}>"

TlyValue: TypeAlias = (
    TlyNull
    | TlyInt
    | TlyFloat
    | TlyString
    | TlyBool
    | TlyArray
    | TlyIterable
    | TlyFn
    | TlyNativeFn
)

_TLY_VALUE_TYPES: Tuple[type, ...] = (
    TlyNull,
    TlyInt,
    TlyFloat,
    TlyString,
    TlyBool,
    TlyArray,
    TlyIterable,
    TlyFn,
    TlyNativeFn,
)

def is_tly_value(value: object) -> TypeGuard[TlyValue]:
    return isinstance(value, _TLY_VALUE_TYPES)

_TYPE_NAMES = {
    TlyNull: "Null",
    TlyInt: "Integer",
    TlyFloat: "Float",
    TlyString: "String",
    TlyBool: "Boolean",
    TlyArray: "Array",
    TlyIterable: "Iterable",
    TlyFn: "Function",
    TlyNativeFn: "NativeFunction",
}

def type_name(value: object) -> str:
    return _TYPE_NAMES.get(type(value), type(value).__name__)

# ---------- Exceptions ----------

def _render_location(msg: str, meta: Optional['SourceMeta']) -> str:
    if meta is None:
        return msg

    line = getattr(meta, "line", None)
    col = getattr(meta, "column", None)

    if line is None:
        return msg

    if col is None:
        return f"{msg} (line {line})"

    return f"{msg} (line {line}, col {col})"

class TallyRuntimeError(Exception):
    tly_meta: Optional['SourceMeta']

    def __init__(self, message: str):
        super().__init__(message)
        self.tly_meta = None

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return _render_location(super().__str__(), self.tly_meta)

class TallyDuplicateDeclaration(TallyRuntimeError):
    def __init__(self, name: str):
        super().__init__(f"Variable '{name}' already declared")
        self.name = name

class TallyUnknownVariable(TallyRuntimeError):
    def __init__(self, name: str):
        super().__init__(f"Variable '{name}' does not exist")
        self.name = name

class TallyMalformedDeclaration(TallyRuntimeError):
    """The name slot of a declaration or assignment is not a plain identifier."""
    def __init__(self, node: object, context: str = "declaration"):
        super().__init__(f"Expected an identifier as the {context} target, found {type(node).__name__}")
        self.node = node
        self.context = context

class TallyTypeError(TallyRuntimeError):
    pass

class TallyIncompatibleTypes(TallyTypeError):
    def __init__(self, left: TlyValue, right: TlyValue, operator: str):
        super().__init__(
            f"Incompatible types: {left!r} ({type_name(left)}) and "
            f"{right!r} ({type_name(right)}) for operator '{operator}'"
        )
        self.left = left
        self.right = right
        self.operator = operator

class TallyNumericError(TallyRuntimeError):
    """Exponent conversion failure or integer overflow in power."""

class TallyArithmeticError(TallyRuntimeError):
    """Fatal integer arithmetic condition (modulo by zero)."""

class TallySyntaxError(Exception):
    """Raised while building or lowering a tree, before evaluation starts."""
    def __init__(self, message: str, meta: Optional['SourceMeta'] = None):
        super().__init__(message)
        self.tly_meta = meta

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return _render_location(super().__str__(), self.tly_meta)
