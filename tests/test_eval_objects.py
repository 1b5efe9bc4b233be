from __future__ import annotations

import pytest

from tests.support.harness import (
    Environment,
    ErrorSignal,
    MkBool,
    MkFn,
    MkInt,
    MkNull,
    MkString,
    MonkeyRuntimeError,
    ReturnSignal,
    run_program,
)
from monkey_ref.ast_nodes import (
    Block,
    CallExpression,
    ExpressionStatement,
    FunctionLiteral,
    Identifier,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    Program,
    ReturnStatement,
)
from monkey_ref.eval.helpers import is_truthy
from monkey_ref.evaluator import Evaluator, eval_program
from monkey_ref.runtime import call_function, is_error, is_mk_value, is_signal
from monkey_ref.utils import format_outcome


def _body(*statements) -> Block:
    return Block(list(statements))


def test_hand_built_program() -> None:
    program = Program(
        [
            LetStatement("x", IntegerLiteral(6)),
            ExpressionStatement(InfixExpression("*", Identifier("x"), IntegerLiteral(7))),
        ]
    )

    assert eval_program(program) == MkInt(42)


def test_out_of_range_literal_in_hand_built_ast() -> None:
    program = Program([ExpressionStatement(IntegerLiteral(2 ** 31))])
    result = eval_program(program)

    assert isinstance(result, ErrorSignal)
    assert result.message == "integer literal out of range: 2147483648"


def test_eval_rejects_non_program() -> None:
    with pytest.raises(MonkeyRuntimeError):
        Evaluator().eval(Block([]))  # type: ignore[arg-type]


def test_unknown_node_is_a_host_error() -> None:
    with pytest.raises(MonkeyRuntimeError) as exc_info:
        Evaluator().eval_node(object())  # type: ignore[arg-type]

    assert "Unknown node: object" in str(exc_info.value)


def test_environment_persists_between_runs() -> None:
    env = Environment()

    assert run_program("let x = 2;", env=env) is None
    assert run_program("x * 3", env=env) == MkInt(6)
    assert env.names() == ["x"]


def test_scope_restored_after_call() -> None:
    env = Environment()
    ev = Evaluator(env)
    program = Program(
        [
            LetStatement(
                "f",
                FunctionLiteral(["a"], _body(ExpressionStatement(Identifier("a")))),
            ),
            ExpressionStatement(CallExpression(Identifier("f"), [IntegerLiteral(1)])),
        ]
    )

    assert ev.eval(program) == MkInt(1)
    assert ev.env is env


def test_scope_restored_after_error_in_call() -> None:
    env = Environment()
    ev = Evaluator(env)
    program = Program(
        [
            LetStatement(
                "f",
                FunctionLiteral(
                    [],
                    _body(
                        ExpressionStatement(
                            InfixExpression("/", IntegerLiteral(1), IntegerLiteral(0))
                        )
                    ),
                ),
            ),
            ExpressionStatement(CallExpression(Identifier("f"), [])),
        ]
    )

    result = ev.eval(program)

    assert isinstance(result, ErrorSignal)
    assert ev.env is env


def test_scoped_restores_on_exception() -> None:
    env = Environment()
    ev = Evaluator(env)
    other = Environment.enclosed(env)

    with pytest.raises(RuntimeError):
        with ev.scoped(other) as active:
            assert active is other
            assert ev.env is other
            raise RuntimeError("boom")

    assert ev.env is env


def test_call_function_directly() -> None:
    fn = MkFn(["x"], _body(ExpressionStatement(Identifier("x"))), Environment())

    assert call_function(fn, [MkInt(3)], Evaluator()) == MkInt(3)


def test_call_function_unwraps_return() -> None:
    fn = MkFn([], _body(ReturnStatement(IntegerLiteral(9)), ExpressionStatement(IntegerLiteral(1))), Environment())

    assert call_function(fn, [], Evaluator()) == MkInt(9)


def test_call_function_arity_message() -> None:
    fn = MkFn(["a", "b"], _body(), Environment())
    result = call_function(fn, [MkInt(1)], Evaluator())

    assert result == ErrorSignal("wrong number of arguments: expected 2, got 1")


def test_call_function_empty_body_is_null() -> None:
    fn = MkFn([], _body(), Environment())

    assert call_function(fn, [], Evaluator()) == MkNull()


def test_call_scope_encloses_closure_not_caller() -> None:
    defining = Environment()
    defining.define("v", MkString("closure"))
    caller = Environment()
    caller.define("v", MkString("caller"))

    fn = MkFn([], _body(ExpressionStatement(Identifier("v"))), defining)

    assert call_function(fn, [], Evaluator(caller)) == MkString("closure")


def test_function_value_captures_current_scope() -> None:
    env = Environment()
    result = run_program("fn(a) { a }", env=env)

    assert isinstance(result, MkFn)
    assert result.env is env
    assert result.params == ["a"]


@pytest.mark.parametrize(
    "value, expected",
    [
        pytest.param(MkNull(), False, id="null"),
        pytest.param(MkBool(False), False, id="false"),
        pytest.param(MkBool(True), True, id="true"),
        pytest.param(MkInt(0), True, id="zero"),
        pytest.param(MkString(""), True, id="empty-string"),
        pytest.param(MkFn([], Block([]), Environment()), True, id="function"),
    ],
)
def test_truthiness(value, expected: bool) -> None:
    assert is_truthy(value) is expected


@pytest.mark.parametrize(
    "outcome, expected",
    [
        pytest.param(None, "", id="none"),
        pytest.param(MkNull(), "null", id="null"),
        pytest.param(MkBool(True), "true", id="true"),
        pytest.param(MkInt(-4), "-4", id="int"),
        pytest.param(MkString("hi"), '"hi"', id="string"),
        pytest.param(MkString('say "hi"\n'), '"say \\"hi\\"\\n"', id="string-escapes"),
        pytest.param(MkString("a\\b"), '"a\\\\b"', id="string-backslash"),
        pytest.param(ReturnSignal(MkInt(1)), "1", id="return"),
        pytest.param(ErrorSignal("bad"), "ERROR: bad", id="error"),
    ],
)
def test_format_outcome(outcome, expected: str) -> None:
    assert format_outcome(outcome) == expected


def test_outcome_guards() -> None:
    assert is_mk_value(MkInt(1))
    assert not is_mk_value(ErrorSignal("x"))
    assert is_signal(ReturnSignal(MkNull()))
    assert is_signal(ErrorSignal("x"))
    assert not is_signal(None)
    assert is_error(ErrorSignal("x"))
    assert not is_error(ReturnSignal(MkNull()))
