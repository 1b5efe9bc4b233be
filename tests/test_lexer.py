from __future__ import annotations

from dataclasses import dataclass
from textwrap import dedent
from typing import List, Optional, Tuple

import pytest

from monkey_ref.lexer_rd import LexError, Lexer, string_value, tokenize
from monkey_ref.token_types import TT


@dataclass(frozen=True)
class Case:
    """Unified lexer case payload."""

    name: str
    source: str
    expected: Optional[Tuple[Tuple[TT, object], ...]] = None
    expected_types: Optional[Tuple[TT, ...]] = None
    exc: Optional[type[Exception]] = None
    msg: Optional[str] = None
    err_line: Optional[int] = None
    err_col: Optional[int] = None


BASIC_TOKEN_CASES: List[Case] = [
    Case("int", "123", expected=((TT.INT, "123"),)),
    Case("int-leading-zero", "007", expected=((TT.INT, "007"),)),
    Case("ident-single", "x", expected=((TT.IDENT, "x"),)),
    Case("ident-snake", "foo_bar", expected=((TT.IDENT, "foo_bar"),)),
    Case("ident-digits", "x1y2", expected=((TT.IDENT, "x1y2"),)),
    Case("ident-underscore-head", "_tmp", expected=((TT.IDENT, "_tmp"),)),
    Case("string", '"hello"', expected=((TT.STRING, '"hello"'),)),
    Case("string-empty", '""', expected=((TT.STRING, '""'),)),
    Case("string-escaped-quote", r'"a\"b"', expected=((TT.STRING, r'"a\"b"'),)),
    Case("bool-true", "true", expected=((TT.TRUE, "true"),)),
    Case("bool-false", "false", expected=((TT.FALSE, "false"),)),
    Case("keyword-prefix-ident", "letter", expected=((TT.IDENT, "letter"),)),
    Case("keyword-suffix-ident", "fns", expected=((TT.IDENT, "fns"),)),
]

KEYWORD_CASES: List[Case] = [
    Case(f"keyword-{word}", word, expected_types=(tt,))
    for word, tt in Lexer.KEYWORDS.items()
]

OPERATOR_CASES: List[Case] = [
    Case("assign", "=", expected_types=(TT.ASSIGN,)),
    Case("eq", "==", expected_types=(TT.EQ,)),
    Case("neq", "!=", expected_types=(TT.NEQ,)),
    Case("bang", "!", expected_types=(TT.NEG,)),
    Case("plus", "+", expected_types=(TT.PLUS,)),
    Case("minus", "-", expected_types=(TT.MINUS,)),
    Case("star", "*", expected_types=(TT.STAR,)),
    Case("slash", "/", expected_types=(TT.SLASH,)),
    Case("lt", "<", expected_types=(TT.LT,)),
    Case("lte", "<=", expected_types=(TT.LTE,)),
    Case("gt", ">", expected_types=(TT.GT,)),
    Case("gte", ">=", expected_types=(TT.GTE,)),
    Case("eq-eq-assign", "===", expected_types=(TT.EQ, TT.ASSIGN)),
    Case("bang-bang", "!!", expected_types=(TT.NEG, TT.NEG)),
    Case("punctuation", "(){},;", expected_types=(
        TT.LPAR, TT.RPAR, TT.LBRACE, TT.RBRACE, TT.COMMA, TT.SEMI,
    )),
    Case("comment-skipped", "1 # two\n3", expected_types=(TT.INT, TT.INT)),
    Case("comment-only", "# nothing", expected_types=()),
]

LEX_ERROR_CASES: List[Case] = [
    Case("unexpected-char", "let x = 5 @ 3;", exc=LexError, msg="Unexpected character '@'", err_line=1, err_col=11),
    Case("unexpected-char-line-two", "1;\n  $", exc=LexError, msg="Unexpected character '$'", err_line=2, err_col=3),
    Case("unterminated-string", 'let s = "abc', exc=LexError, msg="Unterminated string", err_line=1, err_col=9),
    Case("unterminated-after-escape", '"abc\\', exc=LexError, msg="Unterminated string", err_line=1, err_col=1),
    Case("superscript-digit", "2\u00b2", exc=LexError, msg="Unexpected character '\u00b2'", err_line=1, err_col=2),
    Case("non-ascii-letter", "let \u00e9 = 1;", exc=LexError, msg="Unexpected character '\u00e9'", err_line=1, err_col=5),
    Case("non-ascii-in-identifier", "ab\u00e9", exc=LexError, msg="Unexpected character '\u00e9'", err_line=1, err_col=3),
]


def _types(source: str) -> Tuple[TT, ...]:
    return tuple(tok.type for tok in tokenize(source) if tok.type != TT.EOF)


@pytest.mark.parametrize("case", BASIC_TOKEN_CASES, ids=lambda case: case.name)
def test_basic_tokens(case: Case) -> None:
    tokens = [tok for tok in tokenize(case.source) if tok.type != TT.EOF]
    assert tuple((tok.type, tok.value) for tok in tokens) == case.expected


@pytest.mark.parametrize("case", KEYWORD_CASES + OPERATOR_CASES, ids=lambda case: case.name)
def test_token_types(case: Case) -> None:
    assert _types(case.source) == case.expected_types


@pytest.mark.parametrize("case", LEX_ERROR_CASES, ids=lambda case: case.name)
def test_lex_errors(case: Case) -> None:
    assert case.exc is not None
    assert case.msg is not None
    with pytest.raises(case.exc) as exc_info:
        tokenize(case.source)

    err = exc_info.value
    assert case.msg in str(err)

    if case.err_line is not None:
        assert (
            err.line == case.err_line
        ), f"expected line {case.err_line}, got {err.line}"
    if case.err_col is not None:
        assert (
            err.column == case.err_col
        ), f"expected col {case.err_col}, got {err.column}"


def test_full_program_token_stream() -> None:
    source = dedent(
        """\
        let five = 55;
        let ten = 10;

        let add = fn(x, y) {
            x  + y;
        };

        !-/*5;
        5 < 10 > 5;

        if (5 < 10) {
            return true;
        } else {
            return false;
        }

        10 == 10;
        9 != 10;

        let result = add(five, ten);
        """
    )

    expected = [
        (TT.LET, "let"), (TT.IDENT, "five"), (TT.ASSIGN, "="), (TT.INT, "55"), (TT.SEMI, ";"),
        (TT.LET, "let"), (TT.IDENT, "ten"), (TT.ASSIGN, "="), (TT.INT, "10"), (TT.SEMI, ";"),
        (TT.LET, "let"), (TT.IDENT, "add"), (TT.ASSIGN, "="), (TT.FN, "fn"), (TT.LPAR, "("),
        (TT.IDENT, "x"), (TT.COMMA, ","), (TT.IDENT, "y"), (TT.RPAR, ")"), (TT.LBRACE, "{"),
        (TT.IDENT, "x"), (TT.PLUS, "+"), (TT.IDENT, "y"), (TT.SEMI, ";"),
        (TT.RBRACE, "}"), (TT.SEMI, ";"),
        (TT.NEG, "!"), (TT.MINUS, "-"), (TT.SLASH, "/"), (TT.STAR, "*"), (TT.INT, "5"), (TT.SEMI, ";"),
        (TT.INT, "5"), (TT.LT, "<"), (TT.INT, "10"), (TT.GT, ">"), (TT.INT, "5"), (TT.SEMI, ";"),
        (TT.IF, "if"), (TT.LPAR, "("), (TT.INT, "5"), (TT.LT, "<"), (TT.INT, "10"), (TT.RPAR, ")"),
        (TT.LBRACE, "{"), (TT.RETURN, "return"), (TT.TRUE, "true"), (TT.SEMI, ";"), (TT.RBRACE, "}"),
        (TT.ELSE, "else"), (TT.LBRACE, "{"), (TT.RETURN, "return"), (TT.FALSE, "false"), (TT.SEMI, ";"),
        (TT.RBRACE, "}"),
        (TT.INT, "10"), (TT.EQ, "=="), (TT.INT, "10"), (TT.SEMI, ";"),
        (TT.INT, "9"), (TT.NEQ, "!="), (TT.INT, "10"), (TT.SEMI, ";"),
        (TT.LET, "let"), (TT.IDENT, "result"), (TT.ASSIGN, "="), (TT.IDENT, "add"), (TT.LPAR, "("),
        (TT.IDENT, "five"), (TT.COMMA, ","), (TT.IDENT, "ten"), (TT.RPAR, ")"), (TT.SEMI, ";"),
        (TT.EOF, None),
    ]

    assert [(tok.type, tok.value) for tok in tokenize(source)] == expected


def test_token_positions() -> None:
    tokens = tokenize("let x = 1;\n  x + 22")
    actual = [(tok.value, tok.line, tok.column) for tok in tokens if tok.type != TT.EOF]

    assert actual == [
        ("let", 1, 1),
        ("x", 1, 5),
        ("=", 1, 7),
        ("1", 1, 9),
        (";", 1, 10),
        ("x", 2, 3),
        ("+", 2, 5),
        ("22", 2, 7),
    ]


def test_empty_source_is_just_eof() -> None:
    tokens = tokenize("")
    assert [tok.type for tok in tokens] == [TT.EOF]


@pytest.mark.parametrize(
    "raw, expected",
    [
        pytest.param('"plain"', "plain", id="plain"),
        pytest.param(r'"a\nb"', "a\nb", id="newline"),
        pytest.param(r'"tab\there"', "tab\there", id="tab"),
        pytest.param(r'"say \"hi\""', 'say "hi"', id="quote"),
        pytest.param(r'"back\\slash"', "back\\slash", id="backslash"),
        pytest.param(r'"keep\q"', "keep\\q", id="unknown-escape"),
    ],
)
def test_string_value_decoding(raw: str, expected: str) -> None:
    assert string_value(raw) == expected
