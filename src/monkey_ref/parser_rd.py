"""
Recursive Descent Parser for Monkey

This serves as:
1. The default front end used by the runner and the REPL
2. A faster alternative to the lark LALR grammar in grammar.lark
3. Documentation of parsing strategy and precedence

Structure:
- Lexer: Token stream from source (lexer_rd)
- Parser: Recursive descent for statements, Pratt parsing for expressions
- AST: the dataclasses of ast_nodes, identical to what parse_lark builds
"""

from enum import IntEnum
from typing import Callable, Dict, List, Optional

from .ast_nodes import (
    Block,
    BooleanLiteral,
    CallExpression,
    Expression,
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
    Statement,
    StringLiteral,
)
from .lexer_rd import string_value, tokenize
from .token_types import TT, Tok
from .types import fits_int

# ============================================================================
# Parser
# ============================================================================

class ParseError(Exception):
    """Parse error with position info"""
    def __init__(self, message: str, token: Optional[Tok] = None,
                 line: Optional[int] = None, column: Optional[int] = None):
        self.message = message
        self.token = token
        self.line = token.line if token is not None else line
        self.column = token.column if token is not None else column
        super().__init__(
            f"{message} at line {self.line}, col {self.column}" if self.line is not None else message
        )

class Prec(IntEnum):
    LOWEST = 1
    EQUALS = 2       # == !=
    LESSGREATER = 3  # < <= > >=
    SUM = 4          # + -
    PRODUCT = 5      # * /
    PREFIX = 6       # !x -x +x
    CALL = 7         # f(x)

INFIX_PRECEDENCE: Dict[TT, Prec] = {
    TT.EQ: Prec.EQUALS,
    TT.NEQ: Prec.EQUALS,
    TT.LT: Prec.LESSGREATER,
    TT.LTE: Prec.LESSGREATER,
    TT.GT: Prec.LESSGREATER,
    TT.GTE: Prec.LESSGREATER,
    TT.PLUS: Prec.SUM,
    TT.MINUS: Prec.SUM,
    TT.STAR: Prec.PRODUCT,
    TT.SLASH: Prec.PRODUCT,
    TT.LPAR: Prec.CALL,
}

class Parser:
    """
    Recursive descent parser for Monkey.

    Expression precedence (lowest to highest):
    1. equality (==, !=)
    2. ordering (<, <=, >, >=)
    3. add (+, -)
    4. mul (*, /)
    5. prefix (!, -, +)
    6. call (f(...))
    7. primary (literals, identifiers, parens, if, fn)

    All binary operators are left associative.
    """

    def __init__(self, tokens: List[Tok]):
        self.tokens = tokens
        self.pos = 0
        self.current = tokens[0] if tokens else Tok(TT.EOF, None, 0, 0)

        self.prefix_parsers: Dict[TT, Callable[[], Expression]] = {
            TT.IDENT: self.parse_identifier,
            TT.INT: self.parse_integer,
            TT.STRING: self.parse_string,
            TT.TRUE: self.parse_boolean,
            TT.FALSE: self.parse_boolean,
            TT.NEG: self.parse_prefix,
            TT.MINUS: self.parse_prefix,
            TT.PLUS: self.parse_prefix,
            TT.LPAR: self.parse_group,
            TT.IF: self.parse_if,
            TT.FN: self.parse_fn,
        }

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def peek(self, offset: int = 0) -> Tok:
        """Look ahead at token"""
        idx = self.pos + offset
        if idx < len(self.tokens):
            return self.tokens[idx]
        return Tok(TT.EOF, None, 0, 0)

    def advance(self) -> Tok:
        """Consume current token and move to next"""
        prev = self.current
        self.pos += 1
        if self.pos < len(self.tokens):
            self.current = self.tokens[self.pos]
        else:
            self.current = Tok(TT.EOF, None, prev.line, prev.column)
        return prev

    def check(self, *types: TT) -> bool:
        """Check if current token matches any of the given types"""
        return self.current.type in types

    def match(self, *types: TT) -> bool:
        """Check and consume if current token matches"""
        if self.check(*types):
            self.advance()
            return True
        return False

    def expect(self, token_type: TT, message: Optional[str] = None) -> Tok:
        """Consume token of expected type or raise error"""
        if not self.check(token_type):
            msg = message or f"Expected {token_type.name}, got {self.current.type.name}"
            raise ParseError(msg, self.current)
        return self.advance()

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> Program:
        """Parse entire program"""
        stmts: List[Statement] = []

        while not self.check(TT.EOF):
            # stray separators are allowed between statements
            if self.match(TT.SEMI):
                continue
            stmts.append(self.parse_statement())

        return Program(stmts)

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Statement:
        """
        Parse a single statement:
        - let IDENT = expr ;?
        - return expr ;?
        - expr ;?
        """
        if self.check(TT.LET):
            return self.parse_let_stmt()
        if self.check(TT.RETURN):
            return self.parse_return_stmt()

        expr = self.parse_expression()
        self.match(TT.SEMI)
        return ExpressionStatement(expr)

    def parse_let_stmt(self) -> LetStatement:
        self.expect(TT.LET)
        name = self.expect(TT.IDENT, "let requires an identifier").value
        self.expect(TT.ASSIGN, "Expected '=' after let binding name")
        value = self.parse_expression()
        self.match(TT.SEMI)
        return LetStatement(name, value)

    def parse_return_stmt(self) -> ReturnStatement:
        self.expect(TT.RETURN)
        value = self.parse_expression()
        self.match(TT.SEMI)
        return ReturnStatement(value)

    def parse_block(self) -> Block:
        """Parse { stmt* }"""
        self.expect(TT.LBRACE, "Expected '{' to open block")
        stmts: List[Statement] = []

        while not self.check(TT.RBRACE):
            if self.check(TT.EOF):
                raise ParseError("Unterminated block", self.current)
            if self.match(TT.SEMI):
                continue
            stmts.append(self.parse_statement())

        self.expect(TT.RBRACE)
        return Block(stmts)

    # ========================================================================
    # Expressions (Pratt)
    # ========================================================================

    def parse_expression(self, precedence: Prec = Prec.LOWEST) -> Expression:
        prefix = self.prefix_parsers.get(self.current.type)
        if prefix is None:
            raise ParseError(f"Unexpected {self.current.type.name} in expression", self.current)

        left = prefix()

        while precedence < INFIX_PRECEDENCE.get(self.current.type, Prec.LOWEST):
            if self.check(TT.LPAR):
                left = self.parse_call(left)
            else:
                left = self.parse_infix(left)

        return left

    def parse_infix(self, left: Expression) -> InfixExpression:
        op_tok = self.advance()
        right = self.parse_expression(INFIX_PRECEDENCE[op_tok.type])
        return InfixExpression(op_tok.value, left, right)

    def parse_prefix(self) -> PrefixExpression:
        op_tok = self.advance()
        right = self.parse_expression(Prec.PREFIX)
        return PrefixExpression(op_tok.value, right)

    def parse_call(self, function: Expression) -> CallExpression:
        self.expect(TT.LPAR)
        args: List[Expression] = []

        if not self.check(TT.RPAR):
            args.append(self.parse_expression())
            while self.match(TT.COMMA):
                args.append(self.parse_expression())

        self.expect(TT.RPAR, "Expected ')' to close argument list")
        return CallExpression(function, args)

    # ========================================================================
    # Primary
    # ========================================================================

    def parse_identifier(self) -> Identifier:
        return Identifier(self.advance().value)

    def parse_integer(self) -> IntegerLiteral:
        tok = self.advance()
        value = int(tok.value)
        if not fits_int(value):
            raise ParseError(f"Integer literal out of range: {tok.value}", tok)
        return IntegerLiteral(value)

    def parse_string(self) -> StringLiteral:
        return StringLiteral(string_value(self.advance().value))

    def parse_boolean(self) -> BooleanLiteral:
        return BooleanLiteral(self.advance().type == TT.TRUE)

    def parse_group(self) -> Expression:
        self.expect(TT.LPAR)
        expr = self.parse_expression()
        self.expect(TT.RPAR, "Expected ')' to close group")
        return expr

    def parse_if(self) -> IfExpression:
        self.expect(TT.IF)
        condition = self.parse_expression()
        consequence = self.parse_block()
        alternative = None

        if self.match(TT.ELSE):
            alternative = self.parse_block()

        return IfExpression(condition, consequence, alternative)

    def parse_fn(self) -> FunctionLiteral:
        self.expect(TT.FN)
        self.expect(TT.LPAR, "Expected '(' after fn")
        params: List[str] = []

        if not self.check(TT.RPAR):
            params.append(self.expect(TT.IDENT, "Parameter must be an identifier").value)
            while self.match(TT.COMMA):
                params.append(self.expect(TT.IDENT, "Parameter must be an identifier").value)

        self.expect(TT.RPAR, "Expected ')' to close parameter list")
        body = self.parse_block()
        return FunctionLiteral(params, body)

# ============================================================================
# Entry points
# ============================================================================

def parse_source(source: str) -> Program:
    """Tokenize and parse source text into a Program"""
    return Parser(tokenize(source)).parse()

def parse_expression_source(source: str) -> Expression:
    """Parse a lone expression; trailing input is an error"""
    parser = Parser(tokenize(source))
    expr = parser.parse_expression()
    if not parser.check(TT.EOF):
        raise ParseError(f"Unexpected {parser.current.type.name} after expression", parser.current)
    return expr
