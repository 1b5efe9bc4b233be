from __future__ import annotations

from typing import TYPE_CHECKING

from ..ast_nodes import FunctionLiteral, LetStatement
from ..runtime import MkFn, Outcome, is_signal

if TYPE_CHECKING:
    from ..evaluator import Evaluator

def eval_let_stmt(node: LetStatement, ev: 'Evaluator') -> Outcome:
    """Bind in the current scope only, so an inner `let` shadows."""
    val = ev.eval_node(node.value)

    if val is None:
        return None

    if is_signal(val):
        return val

    # `let f = fn(...) {...}`: the body calls f by this name
    if isinstance(node.value, FunctionLiteral) and isinstance(val, MkFn):
        val.name = node.name

    ev.env.define(node.name, val)

    return None
