from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Optional

from .ast_nodes import (
    BooleanLiteral,
    CallExpression,
    ExpressionStatement,
    FunctionLiteral,
    Identifier,
    IfExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    Node,
    PrefixExpression,
    Program,
    ReturnStatement,
    StringLiteral,
)
from .runtime import Environment, MonkeyRuntimeError, Outcome

from .eval.blocks import eval_program as _eval_statements
from .eval.control import eval_if_expr, eval_return_stmt
from .eval.expr import eval_infix, eval_prefix
from .eval.fn import eval_call, eval_function_literal
from .eval.let import eval_let_stmt
from .eval.literals import (
    eval_boolean_literal,
    eval_identifier,
    eval_integer_literal,
    eval_string_literal,
)

# ---------------- Public API ----------------

def eval_program(program: Program, env: Optional[Environment]=None) -> Outcome:
    """Evaluate a whole program against `env` (a fresh global scope by default)."""
    return Evaluator(env).eval(program)

# ---------------- Core evaluator ----------------

class Evaluator:
    """Walks the AST. The only mutable state is the current scope."""

    def __init__(self, env: Optional[Environment]=None):
        self.env = env if env is not None else Environment()

    def eval(self, program: Program) -> Outcome:
        if not isinstance(program, Program):
            raise MonkeyRuntimeError(f"Expected a Program, got {type(program).__name__}", program)

        return _eval_statements(program.statements, self)

    def eval_node(self, n: Node) -> Outcome:
        handler = _NODE_DISPATCH.get(type(n))

        if handler is None:
            raise MonkeyRuntimeError(f"Unknown node: {type(n).__name__}", n)

        return handler(n, self)

    @contextmanager
    def scoped(self, env: Environment) -> Iterator[Environment]:
        """Install `env` as the current scope; the previous one comes back on exit."""
        saved = self.env
        self.env = env

        try:
            yield env
        finally:
            self.env = saved

# ---------------- Dispatch ----------------

def _eval_expression_stmt(n: ExpressionStatement, ev: Evaluator) -> Outcome:
    return ev.eval_node(n.expression)

_NODE_DISPATCH: Dict[type, Callable[[Any, Evaluator], Outcome]] = {
    ExpressionStatement: _eval_expression_stmt,
    ReturnStatement: eval_return_stmt,
    LetStatement: eval_let_stmt,
    Identifier: eval_identifier,
    IntegerLiteral: eval_integer_literal,
    StringLiteral: eval_string_literal,
    BooleanLiteral: eval_boolean_literal,
    PrefixExpression: eval_prefix,
    InfixExpression: eval_infix,
    IfExpression: eval_if_expr,
    FunctionLiteral: eval_function_literal,
    CallExpression: eval_call,
}
