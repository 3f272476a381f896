from __future__ import annotations

from typing import Callable

from ..nodes import Identifier, Node
from ..runtime import Environment, TallyMalformedDeclaration, TlyValue

EvalFunc = Callable[[Node, Environment], TlyValue]

def expect_ident_node(node: Node, context: str) -> str:
    if isinstance(node, Identifier):
        return node.name

    raise TallyMalformedDeclaration(node, context)
