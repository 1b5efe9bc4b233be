from __future__ import annotations

from typing import TYPE_CHECKING

from ..ast_nodes import BooleanLiteral, Identifier, IntegerLiteral, StringLiteral
from ..runtime import ErrorSignal, MkBool, MkInt, MkString, MkValue, fits_int

if TYPE_CHECKING:
    from ..evaluator import Evaluator

def eval_identifier(node: Identifier, ev: 'Evaluator') -> MkValue | ErrorSignal:
    val = ev.env.lookup(node.name)

    if val is None:
        return ErrorSignal(f"identifier not found: {node.name}")

    return val

def eval_integer_literal(node: IntegerLiteral, _: 'Evaluator') -> MkInt | ErrorSignal:
    if not fits_int(node.value):
        return ErrorSignal(f"integer literal out of range: {node.value}")

    return MkInt(node.value)

def eval_string_literal(node: StringLiteral, _: 'Evaluator') -> MkString:
    return MkString(node.value)

def eval_boolean_literal(node: BooleanLiteral, _: 'Evaluator') -> MkBool:
    return MkBool(node.value)
