"""AST node classes produced by the parsers and consumed by the evaluator.

Nodes are plain dataclasses so that the two front ends (the recursive descent
parser and the lark grammar) can be compared structurally, and so that a host
program can build a `Program` by hand without going through source text.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union
from typing_extensions import TypeAlias


# ---------- Expressions ----------

@dataclass
class Identifier:
    name: str

@dataclass
class IntegerLiteral:
    value: int

@dataclass
class StringLiteral:
    value: str

@dataclass
class BooleanLiteral:
    value: bool

@dataclass
class PrefixExpression:
    op: str
    right: 'Expression'

@dataclass
class InfixExpression:
    op: str
    left: 'Expression'
    right: 'Expression'

@dataclass
class IfExpression:
    condition: 'Expression'
    consequence: 'Block'
    alternative: Optional['Block'] = None

@dataclass
class FunctionLiteral:
    params: List[str]
    body: 'Block'

@dataclass
class CallExpression:
    function: 'Expression'
    arguments: List['Expression'] = field(default_factory=list)


Expression: TypeAlias = Union[
    Identifier,
    IntegerLiteral,
    StringLiteral,
    BooleanLiteral,
    PrefixExpression,
    InfixExpression,
    IfExpression,
    FunctionLiteral,
    CallExpression,
]

# ---------- Statements ----------

@dataclass
class ExpressionStatement:
    expression: Expression

@dataclass
class ReturnStatement:
    value: Expression

@dataclass
class LetStatement:
    name: str
    value: Expression


Statement: TypeAlias = Union[ExpressionStatement, ReturnStatement, LetStatement]

@dataclass
class Block:
    statements: List[Statement] = field(default_factory=list)

@dataclass
class Program:
    statements: List[Statement] = field(default_factory=list)


Node: TypeAlias = Union[Program, Block, Statement, Expression]

PREFIX_OPS = frozenset({'!', '-', '+'})
INFIX_OPS = frozenset({'+', '-', '*', '/', '<', '<=', '>', '>=', '==', '!='})

# ---------- Rendering ----------

def quote_string(text: str) -> str:
    escaped = (
        text.replace('\\', '\\\\')
        .replace('"', '\\"')
        .replace('\n', '\\n')
        .replace('\t', '\\t')
        .replace('\r', '\\r')
    )
    return f'"{escaped}"'

def render(node: Node) -> str:
    """Render a node back to canonical source, parenthesising every operator."""
    match node:
        case Program(statements=stmts):
            return "; ".join(render(s) for s in stmts)
        case Block(statements=stmts):
            if not stmts:
                return "{ }"
            return "{ " + "; ".join(render(s) for s in stmts) + " }"
        case LetStatement(name=name, value=value):
            return f"let {name} = {render(value)}"
        case ReturnStatement(value=value):
            return f"return {render(value)}"
        case ExpressionStatement(expression=expr):
            return render(expr)
        case Identifier(name=name):
            return name
        case IntegerLiteral(value=value):
            return str(value)
        case StringLiteral(value=value):
            return quote_string(value)
        case BooleanLiteral(value=value):
            return "true" if value else "false"
        case PrefixExpression(op=op, right=right):
            return f"({op}{render(right)})"
        case InfixExpression(op=op, left=left, right=right):
            return f"({render(left)} {op} {render(right)})"
        case IfExpression(condition=cond, consequence=cons, alternative=alt):
            out = f"if {render(cond)} {render(cons)}"
            if alt is not None:
                out += f" else {render(alt)}"
            return out
        case FunctionLiteral(params=params, body=body):
            return f"fn({', '.join(params)}) {render(body)}"
        case CallExpression(function=fn, arguments=args):
            return f"{render(fn)}({', '.join(render(a) for a in args)})"
        case _:
            raise TypeError(f"Cannot render {type(node).__name__}")
