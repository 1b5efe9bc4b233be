"""Grammar-driven front end: lark LALR over grammar.lark, transformed into the
same AST dataclasses the recursive descent parser produces."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from lark import Lark, Token, Transformer, UnexpectedInput
from lark.exceptions import VisitError
from lark.visitors import v_args

from .ast_nodes import (
    Block,
    BooleanLiteral,
    CallExpression,
    ExpressionStatement,
    FunctionLiteral,
    Identifier,
    IfExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    PrefixExpression,
    Program,
    ReturnStatement,
    StringLiteral,
)
from .lexer_rd import string_value
from .parser_rd import ParseError
from .types import fits_int

GRAMMAR_PATH = Path(__file__).resolve().parent / "grammar.lark"

def _read_grammar(grammar_path: Optional[str]) -> str:
    if grammar_path:
        p = Path(grammar_path)
        if p.exists():
            return p.read_text(encoding="utf-8")

    if GRAMMAR_PATH.exists():
        return GRAMMAR_PATH.read_text(encoding="utf-8")

    raise FileNotFoundError("grammar.lark not found. pass an explicit path")

@lru_cache(maxsize=None)
def make_parser(grammar_path: Optional[str]=None) -> Lark:
    return Lark(
        _read_grammar(grammar_path),
        parser="lalr",
        start="program",
        maybe_placeholders=True,
    )

class AstBuilder(Transformer):
    """Turn the lark parse tree into ast_nodes dataclasses."""

    def program(self, items):
        return Program(list(items))

    def block(self, items):
        return Block(list(items))

    @v_args(inline=True)
    def let_stmt(self, name: Token, value):
        return LetStatement(str(name), value)

    @v_args(inline=True)
    def return_stmt(self, value):
        return ReturnStatement(value)

    @v_args(inline=True)
    def expr_stmt(self, expr):
        return ExpressionStatement(expr)

    @v_args(inline=True)
    def infix(self, left, op: Token, right):
        return InfixExpression(str(op), left, right)

    @v_args(inline=True)
    def prefix(self, op: Token, right):
        return PrefixExpression(str(op), right)

    @v_args(inline=True)
    def call(self, function, args):
        return CallExpression(function, args or [])

    def args(self, items):
        return list(items)

    def params(self, items) -> List[str]:
        return [str(tok) for tok in items]

    @v_args(inline=True)
    def if_expr(self, condition, consequence, alternative):
        return IfExpression(condition, consequence, alternative)

    @v_args(inline=True)
    def fn_lit(self, params, body):
        return FunctionLiteral(params or [], body)

    @v_args(inline=True)
    def int_lit(self, tok: Token):
        value = int(tok)
        if not fits_int(value):
            raise ParseError(f"Integer literal out of range: {tok}", line=tok.line, column=tok.column)
        return IntegerLiteral(value)

    @v_args(inline=True)
    def string_lit(self, tok: Token):
        return StringLiteral(string_value(str(tok)))

    def true_lit(self, _):
        return BooleanLiteral(True)

    def false_lit(self, _):
        return BooleanLiteral(False)

    @v_args(inline=True)
    def ident(self, tok: Token):
        return Identifier(str(tok))

def parse_source_lark(source: str, grammar_path: Optional[str]=None) -> Program:
    parser = make_parser(grammar_path)

    try:
        tree = parser.parse(source)
    except UnexpectedInput as exc:
        line = getattr(exc, "line", None)
        column = getattr(exc, "column", None)
        if line is not None and line < 1:
            line = column = None
        message = str(exc).strip().splitlines()[0]
        raise ParseError(message, line=line, column=column) from exc

    try:
        return AstBuilder().transform(tree)
    except VisitError as exc:
        if isinstance(exc.orig_exc, ParseError):
            raise exc.orig_exc from None
        raise
