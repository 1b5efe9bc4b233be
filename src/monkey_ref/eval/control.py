from __future__ import annotations

from typing import TYPE_CHECKING

from ..ast_nodes import IfExpression, ReturnStatement
from ..runtime import Outcome, ReturnSignal, is_signal
from .blocks import eval_block
from .helpers import is_truthy

if TYPE_CHECKING:
    from ..evaluator import Evaluator

def eval_return_stmt(node: ReturnStatement, ev: 'Evaluator') -> Outcome:
    val = ev.eval_node(node.value)

    if val is None:
        return None

    # an inner return or error already carries its own payload
    if is_signal(val):
        return val

    return ReturnSignal(val)

def eval_if_expr(node: IfExpression, ev: 'Evaluator') -> Outcome:
    cond = ev.eval_node(node.condition)

    if cond is None:
        return None

    if is_signal(cond):
        return cond

    if is_truthy(cond):
        return eval_block(node.consequence, ev)

    if node.alternative is not None:
        return eval_block(node.alternative, ev)

    return None
