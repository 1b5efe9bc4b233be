from __future__ import annotations

from typing import TYPE_CHECKING, List

from .types import (
    MkNull, MkBool, MkInt, MkString, MkFn,
    MkValue, Outcome, Signal, ReturnSignal, ErrorSignal,
    Environment, MonkeyRuntimeError,
    INT_MIN, INT_MAX,
    is_mk_value, is_signal, is_error, fits_int,
)

if TYPE_CHECKING:
    from .evaluator import Evaluator

__all__ = [
    "MkNull", "MkBool", "MkInt", "MkString", "MkFn",
    "MkValue", "Outcome", "Signal", "ReturnSignal", "ErrorSignal",
    "Environment", "MonkeyRuntimeError",
    "INT_MIN", "INT_MAX",
    "is_mk_value", "is_signal", "is_error", "fits_int",
    "call_function",
]

def call_function(fn: MkFn, args: List[MkValue], ev: 'Evaluator') -> MkValue | ErrorSignal:
    """
    Call semantics:
    - arity must match len(fn.params) exactly
    - the callee scope encloses the closure scope, never the caller's
    - a function bound by `let` sees itself under that name; parameters win
    - the caller's scope is restored however the body finishes
    - a return is unwrapped here; an error keeps propagating
    """
    if len(args) != len(fn.params):
        return ErrorSignal(f"wrong number of arguments: expected {len(fn.params)}, got {len(args)}")

    callee_env = Environment.enclosed(fn.env, cutoff=fn.stamp)

    if fn.name is not None:
        callee_env.define(fn.name, fn)

    for name, val in zip(fn.params, args):
        callee_env.define(name, val)

    from .eval.blocks import eval_block  # local import to avoid cycle

    with ev.scoped(callee_env):
        outcome = eval_block(fn.body, ev)

    match outcome:
        case ReturnSignal(value=value):
            return value
        case ErrorSignal():
            return outcome
        case None:
            return MkNull()
        case _:
            return outcome
