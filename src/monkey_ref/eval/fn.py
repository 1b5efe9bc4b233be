from __future__ import annotations

from typing import TYPE_CHECKING, List

from ..ast_nodes import CallExpression, FunctionLiteral
from ..runtime import (
    Environment,
    ErrorSignal,
    MkFn,
    MkNull,
    MkValue,
    Outcome,
    ReturnSignal,
    call_function,
    is_signal,
)

if TYPE_CHECKING:
    from ..evaluator import Evaluator

def eval_function_literal(node: FunctionLiteral, ev: 'Evaluator') -> MkFn:
    # the scope is shared, not copied; the stamp pins which bindings it sees
    return MkFn(
        params=list(node.params),
        body=node.body,
        env=ev.env,
        stamp=Environment.now(),
    )

def eval_args(node: CallExpression, ev: 'Evaluator') -> List[MkValue] | ReturnSignal:
    """Evaluate arguments left to right; a failed argument becomes null."""
    args: List[MkValue] = []

    for arg_node in node.arguments:
        val = ev.eval_node(arg_node)

        if isinstance(val, ReturnSignal):
            return val

        if val is None or isinstance(val, ErrorSignal):
            args.append(MkNull())
            continue

        args.append(val)

    return args

def eval_call(node: CallExpression, ev: 'Evaluator') -> Outcome:
    args = eval_args(node, ev)

    if isinstance(args, ReturnSignal):
        return args

    callee = ev.eval_node(node.function)

    if callee is None:
        return MkNull()

    if is_signal(callee):
        return callee

    if not isinstance(callee, MkFn):
        return ErrorSignal(f"function not found: {callee!r}")

    return call_function(callee, args, ev)
