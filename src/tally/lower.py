"""Lowering pass: lark parse tree -> evaluator AST nodes.

The grammar belongs to the host. This pass only relies on a small rule/token
vocabulary (see `_SCOPE_LABELS` and friends) that most expression grammars
written with lark's `common` terminals already produce.
"""
from __future__ import annotations

import string
from typing import Callable, Dict, List, Optional, Union

from lark import Token, Tree

from .nodes import (
    AssignmentExpression,
    BinaryExpression,
    FloatLiteral,
    Identifier,
    IntegerLiteral,
    Node,
    Scope,
    SourceMeta,
    StringLiteral,
    VariableDeclaration,
)
from .types import TallySyntaxError

ParseNode = Union[Tree, Token]

_SCOPE_LABELS = {"start", "scope", "block", "stmtlist", "program"}
_DECL_LABELS = {"let", "var_decl", "declaration"}
_ASSIGN_LABELS = {"assign", "assignment"}
_LEFT_ASSOC_LABELS = {"binary", "add", "sum", "mul", "product", "arith"}
_RIGHT_ASSOC_LABELS = {"pow", "power"}
_WRAPPER_LABELS = {"expr", "stmt", "atom", "group", "paren", "primary"}
_OPERATOR_LABELS = {"addop", "mulop", "powop", "op"}

# Punctuation a grammar may keep (keep_all_tokens or named terminals).
_SKIP_TOKENS = {"LET", "EQUAL", "SEMICOLON", "SEMI", "NEWLINE", "_NL", "LPAR", "RPAR", "WS"}

_INT_TOKENS = {"INT", "SIGNED_INT", "DEC_NUMBER"}
_FLOAT_TOKENS = {"FLOAT", "SIGNED_FLOAT", "DECIMAL"}
_NUMBER_TOKENS = {"NUMBER", "SIGNED_NUMBER"}
_STRING_TOKENS = {"STRING", "ESCAPED_STRING"}
_NAME_TOKENS = {"NAME", "CNAME", "IDENT"}

_HEX_DIGITS = frozenset(string.hexdigits)


def lower(tree: ParseNode) -> Node:
    """Convert a lark tree (or a lone token) into an evaluator node."""
    if isinstance(tree, Token):
        return _lower_token(tree)

    if not isinstance(tree, Tree):
        raise TallySyntaxError(f"Cannot lower {type(tree).__name__}; expected a lark Tree or Token")

    label = str(tree.data)
    children = _significant(tree.children)
    meta = tree_meta(tree)

    if label in _SCOPE_LABELS:
        return Scope([lower(ch) for ch in children], meta=meta)

    if label in _DECL_LABELS:
        name, value = _expect_pair(label, children, meta)
        return VariableDeclaration(lower(name), lower(value), meta=meta)

    if label in _ASSIGN_LABELS:
        name, value = _expect_pair(label, children, meta)
        return AssignmentExpression(lower(name), lower(value), meta=meta)

    if label in _LEFT_ASSOC_LABELS:
        return _lower_chain(label, children, meta, right_assoc=False)

    if label in _RIGHT_ASSOC_LABELS:
        return _lower_chain(label, children, meta, right_assoc=True)

    if label in _WRAPPER_LABELS:
        if len(children) == 1:
            return lower(children[0])
        raise TallySyntaxError(f"Unsupported wrapper shape {label} with {len(children)} children", meta)

    raise TallySyntaxError(f"Unknown parse tree rule '{label}'", meta)


def _significant(children: List[ParseNode]) -> List[ParseNode]:
    return [ch for ch in children if not (isinstance(ch, Token) and ch.type in _SKIP_TOKENS)]


def _expect_pair(label: str, children: List[ParseNode], meta: Optional[SourceMeta]) -> tuple[ParseNode, ParseNode]:
    if len(children) != 2:
        raise TallySyntaxError(f"Malformed {label}: expected a target and a value, got {len(children)} children", meta)

    return children[0], children[1]


def _lower_chain(label: str, children: List[ParseNode], meta: Optional[SourceMeta], right_assoc: bool) -> Node:
    if len(children) < 3 or len(children) % 2 == 0:
        raise TallySyntaxError(f"Malformed {label} chain with {len(children)} children", meta)

    operands = [lower(children[i]) for i in range(0, len(children), 2)]
    ops = [children[i] for i in range(1, len(children), 2)]

    if right_assoc:
        acc = operands[-1]

        for i in range(len(ops) - 1, -1, -1):
            op_node = ops[i]
            acc = BinaryExpression(operands[i], as_op(op_node), acc, meta=_op_meta(op_node, meta))
        return acc

    acc = operands[0]

    for op_node, rhs in zip(ops, operands[1:]):
        acc = BinaryExpression(acc, as_op(op_node), rhs, meta=_op_meta(op_node, meta))
    return acc


def as_op(x: ParseNode) -> str:
    if isinstance(x, Token):
        return str(x.value)

    if isinstance(x, Tree) and str(x.data) in _OPERATOR_LABELS and len(x.children) == 1 and isinstance(x.children[0], Token):
        return str(x.children[0].value)

    raise TallySyntaxError(f"Expected operator token, got {x!r}", tree_meta(x))


def _op_meta(op_node: ParseNode, fallback: Optional[SourceMeta]) -> Optional[SourceMeta]:
    return tree_meta(op_node) or fallback


def _lower_token(tok: Token) -> Node:
    kind = tok.type
    text = str(tok.value)
    meta = token_meta(tok)

    handler = _TOKEN_DISPATCH.get(kind)
    if handler is None:
        raise TallySyntaxError(f"Unexpected token {kind} {text!r}", meta)

    return handler(text, meta)


def _int_literal(text: str, meta: Optional[SourceMeta]) -> Node:
    try:
        return IntegerLiteral(int(text), meta=meta)
    except ValueError:
        raise TallySyntaxError(f"Invalid integer literal {text!r}", meta) from None


def _float_literal(text: str, meta: Optional[SourceMeta]) -> Node:
    try:
        return FloatLiteral(float(text), meta=meta)
    except ValueError:
        raise TallySyntaxError(f"Invalid float literal {text!r}", meta) from None


def _number_literal(text: str, meta: Optional[SourceMeta]) -> Node:
    if any(ch in text for ch in ".eE"):
        return _float_literal(text, meta)
    return _int_literal(text, meta)


_ESCAPES = {
    '"': '"',
    "'": "'",
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}


def _string_literal(text: str, meta: Optional[SourceMeta]) -> Node:
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'":
        return StringLiteral(_unescape(text, meta), meta=meta)

    return StringLiteral(text, meta=meta)


def _unescape(text: str, meta: Optional[SourceMeta]) -> str:
    """Decode the JSON escape set inside a quoted token; anything else is an error."""
    quote = text[0]
    body = text[1:-1]
    out: List[str] = []
    i = 0

    while i < len(body):
        ch = body[i]
        if ch == quote:
            raise TallySyntaxError(f"Invalid string literal {text}: unescaped {quote}", meta)

        if ch != "\\":
            out.append(ch)
            i += 1
            continue

        if i + 1 >= len(body):
            raise TallySyntaxError(f"Invalid string literal {text}: dangling backslash", meta)

        esc = body[i + 1]
        if esc == "u":
            digits = body[i + 2 : i + 6]
            if len(digits) != 4 or any(d not in _HEX_DIGITS for d in digits):
                raise TallySyntaxError(f"Invalid \\u escape in string literal {text}", meta)
            out.append(chr(int(digits, 16)))
            i += 6
            continue

        decoded = _ESCAPES.get(esc)
        if decoded is None:
            raise TallySyntaxError(f"Invalid escape '\\{esc}' in string literal {text}", meta)

        out.append(decoded)
        i += 2

    return "".join(out)


def _identifier(text: str, meta: Optional[SourceMeta]) -> Node:
    return Identifier(text, meta=meta)


_TOKEN_DISPATCH: Dict[str, Callable[[str, Optional[SourceMeta]], Node]] = {
    **{kind: _int_literal for kind in _INT_TOKENS},
    **{kind: _float_literal for kind in _FLOAT_TOKENS},
    **{kind: _number_literal for kind in _NUMBER_TOKENS},
    **{kind: _string_literal for kind in _STRING_TOKENS},
    **{kind: _identifier for kind in _NAME_TOKENS},
}


def token_meta(tok: Token) -> Optional[SourceMeta]:
    line = getattr(tok, "line", None)
    if line is None:
        return None

    return SourceMeta(line=line, column=getattr(tok, "column", None))


def tree_meta(node: ParseNode) -> Optional[SourceMeta]:
    """Position of *node*: tree meta when lark propagated it, else its first token."""
    if isinstance(node, Token):
        return token_meta(node)

    if not isinstance(node, Tree):
        return None

    meta = node.meta
    line = getattr(meta, "line", None)
    if line is not None:
        return SourceMeta(line=line, column=getattr(meta, "column", None))

    for child in node.children:
        found = tree_meta(child)
        if found is not None:
            return found

    return None
