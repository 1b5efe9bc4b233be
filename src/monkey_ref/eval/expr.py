from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Dict

from ..ast_nodes import InfixExpression, PrefixExpression
from ..runtime import ErrorSignal, MkBool, MkInt, MkNull, MkValue, Outcome, fits_int, is_signal
from .helpers import native_bool

if TYPE_CHECKING:
    from ..evaluator import Evaluator

IntResult = MkValue | ErrorSignal

def eval_prefix(node: PrefixExpression, ev: 'Evaluator') -> Outcome:
    rhs = ev.eval_node(node.right)

    if rhs is None:
        return None

    if is_signal(rhs):
        return rhs

    return apply_prefix_operator(node.op, rhs)

def apply_prefix_operator(op: str, rhs: MkValue) -> IntResult:
    match op:
        case '!':
            return _eval_not(rhs)
        case '-':
            if not isinstance(rhs, MkInt):
                return ErrorSignal(f"unknown operator: -{rhs!r}")
            if not fits_int(-rhs.value):
                return ErrorSignal(f"integer overflow: -({rhs!r})")
            return MkInt(-rhs.value)
        case '+':
            if not isinstance(rhs, MkInt):
                return ErrorSignal(f"unknown operator: {rhs!r}")
            return MkInt(rhs.value)
        case _:
            return ErrorSignal(f"unknown operator: {op}{rhs!r}")

def _eval_not(rhs: MkValue) -> MkValue:
    match rhs:
        case MkNull():
            return native_bool(True)
        case MkBool(value=b):
            return native_bool(not b)
        case _:
            return native_bool(False)

def eval_infix(node: InfixExpression, ev: 'Evaluator') -> Outcome:
    # both sides run before either is inspected
    lhs = ev.eval_node(node.left)
    rhs = ev.eval_node(node.right)

    if lhs is None:
        return None

    if is_signal(lhs):
        return lhs

    if rhs is None:
        return None

    if is_signal(rhs):
        return rhs

    return apply_binary_operator(node.op, lhs, rhs)

def apply_binary_operator(op: str, lhs: MkValue, rhs: MkValue) -> IntResult:
    if isinstance(lhs, MkInt) and isinstance(rhs, MkInt):
        handler = _INT_OPS.get(op)

        if handler is None:
            return ErrorSignal(f"unknown operator: {lhs!r} {op} {rhs!r}")

        return handler(lhs.value, rhs.value)

    if type(lhs) is not type(rhs):
        return ErrorSignal(f"type mismatch: {lhs!r} {op} {rhs!r}")

    return ErrorSignal(f"unknown operator: {lhs!r} {op} {rhs!r}")

def _checked(op: str, a: int, b: int, result: int) -> IntResult:
    if not fits_int(result):
        return ErrorSignal(f"integer overflow: {a} {op} {b}")

    return MkInt(result)

def _int_div(a: int, b: int) -> IntResult:
    if b == 0:
        return ErrorSignal(f"division by zero: {a} / {b}")

    # truncate toward zero, not toward negative infinity
    q = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        q = -q

    return _checked('/', a, b, q)

_INT_OPS: Dict[str, Callable[[int, int], IntResult]] = {
    '+': lambda a, b: _checked('+', a, b, a + b),
    '-': lambda a, b: _checked('-', a, b, a - b),
    '*': lambda a, b: _checked('*', a, b, a * b),
    '/': _int_div,
    '<': lambda a, b: native_bool(a < b),
    '<=': lambda a, b: native_bool(a <= b),
    '>': lambda a, b: native_bool(a > b),
    '>=': lambda a, b: native_bool(a >= b),
    '==': lambda a, b: native_bool(a == b),
    '!=': lambda a, b: native_bool(a != b),
}
