from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from ..ast_nodes import Block, LetStatement, Statement
from ..runtime import ErrorSignal, Outcome, ReturnSignal

if TYPE_CHECKING:
    from ..evaluator import Evaluator

def _run_statements(statements: Iterable[Statement], ev: 'Evaluator') -> Outcome:
    """Evaluate in order, stopping at the first signal; returns the running result."""
    result: Outcome = None

    for stmt in statements:
        outcome = ev.eval_node(stmt)

        if isinstance(outcome, (ReturnSignal, ErrorSignal)):
            return outcome

        # a let leaves the running result alone
        if isinstance(stmt, LetStatement):
            continue

        result = outcome

    return result

def eval_program(statements: Iterable[Statement], ev: 'Evaluator') -> Outcome:
    """Top level: a return ends the program with its unwrapped value."""
    outcome = _run_statements(statements, ev)

    if isinstance(outcome, ReturnSignal):
        return outcome.value

    return outcome

def eval_block(block: Block, ev: 'Evaluator') -> Outcome:
    """Branch and function bodies: a return stays wrapped for the enclosing call."""
    return _run_statements(block.statements, ev)
