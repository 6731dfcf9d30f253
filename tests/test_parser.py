import pytest

from compiler import parse
from errors import ParseError
from lexer import TokenType
from umj_ast import *


def single_statement(body):
    program = parse(f"어떻게\n{body}\n이 사람이름이냐ㅋㅋ")
    assert len(program.lines) == 1
    return program.lines[0][1]


def test_lines_are_numbered_in_order():
    program = parse("어떻게\n\n엄...\n\n식어!\n이 사람이름이냐ㅋㅋ")
    assert program.line_numbers() == [1, 2]
    assign = program.lines[0][1]
    assert isinstance(assign, AssignStatement)
    assert assign.var == 1
    assert assign.expr.value == 3
    assert isinstance(program.lines[1][1], PrintStatement)


def test_one_line_form():
    program = parse("어떻게~엄.~식어!~이 사람이름이냐ㅋㅋ")
    assert program.line_numbers() == [1, 2]


def test_multiplication_binds_tighter_than_addition():
    stmt = single_statement("엄어.. ...")
    expr = stmt.expr
    assert isinstance(expr, BinaryOp) and expr.op == '+'
    assert isinstance(expr.left, Variable) and expr.left.index == 1
    assert expr.right.op == '*'
    assert (expr.right.left.value, expr.right.right.value) == (2, 3)


def test_negative_literal_after_term_is_subtraction():
    expr = single_statement("엄어,,").expr
    assert expr.op == '-'
    assert expr.left.index == 1
    assert expr.right.value == 2


def test_leading_negative_literal_stays_a_number():
    expr = single_statement("엄,,").expr
    assert isinstance(expr, Number)
    assert expr.value == -2


def test_addition_is_left_associative():
    expr = single_statement("엄..어..").expr
    assert expr.op == '+'
    assert expr.left.op == '+'
    assert expr.left.left.value == 2
    assert expr.left.right.index == 1
    assert expr.right.value == 2


def test_bare_assignment_resets_to_zero():
    stmt = single_statement("어엄")
    assert stmt.var == 2
    assert isinstance(stmt.expr, Number) and stmt.expr.value == 0


def test_input_takes_target_from_marker():
    stmt = single_statement("어엄식?")
    assert isinstance(stmt, InputStatement)
    assert stmt.var == 2


def test_print_forms():
    assert isinstance(single_statement("식어!"), PrintStatement)
    char = single_statement("식.........ㅋ")
    assert isinstance(char, PrintCharStatement)
    assert char.expr.value == 9
    newline = single_statement("식ㅋ")
    assert isinstance(newline, PrintCharStatement)
    assert newline.expr.value == 10


def test_conditional_guards_one_statement():
    stmt = single_statement("동탄어어?준.")
    assert isinstance(stmt, ConditionalStatement)
    assert stmt.guard == 2
    assert isinstance(stmt.body, GotoStatement)
    assert stmt.body.target == 1
    assert stmt.body.line == stmt.line


def test_goto_keeps_unchecked_target():
    stmt = single_statement("준.....")
    assert isinstance(stmt, GotoStatement)
    assert stmt.target == 5


def test_goto_target_is_folded_constant():
    stmt = single_statement("준.. ...")
    assert isinstance(stmt, GotoStatement)
    assert stmt.target == 6
    assert single_statement("준.. .. ..").target == 8


def test_goto_target_rejects_variables():
    with pytest.raises(ParseError) as info:
        single_statement("준어")
    assert info.value.found == TokenType.VAR
    assert info.value.line == 2


def test_deeply_nested_conditionals():
    stmt = single_statement("동탄어?" * 1200 + "식.!")
    depth = 0
    while isinstance(stmt, ConditionalStatement):
        assert stmt.guard == 1
        depth += 1
        stmt = stmt.body
    assert depth == 1200
    assert isinstance(stmt, PrintStatement)


def test_long_term_chain():
    stmt = single_statement("식" + ".어" * 600 + "!")
    nodes = list(walk_postorder(stmt.expr))
    assert len(nodes) == 2 * 1200 - 1
    assert isinstance(stmt.expr, BinaryOp) and stmt.expr.op == '+'


def test_return_forms():
    bare = single_statement("화이팅")
    assert isinstance(bare, ReturnStatement) and bare.value is None
    valued = single_statement("화이팅!..")
    assert valued.value.value == 2


def test_missing_end_keyword_is_unexpected_end_of_input():
    with pytest.raises(ParseError) as info:
        parse("어떻게\n엄...")
    assert info.value.found == TokenType.EOF
    assert TokenType.END in info.value.expected
    assert "fim inesperado" in str(info.value)


def test_missing_end_keyword_after_newline():
    with pytest.raises(ParseError) as info:
        parse("어떻게\n엄...\n")
    assert info.value.found == TokenType.EOF
    assert TokenType.END in info.value.expected
    assert TokenType.ASSIGN in info.value.expected


def test_missing_start_keyword():
    with pytest.raises(ParseError) as info:
        parse("엄.\n이 사람이름이냐")
    assert info.value.expected == {TokenType.START}
    assert info.value.position == 0


def test_statements_need_a_separator():
    with pytest.raises(ParseError) as info:
        parse("어떻게\n엄.식어!\n이 사람이름이냐")
    assert info.value.expected == {TokenType.NEWLINE, TokenType.END}
    assert info.value.found == TokenType.CONSOLE
    assert info.value.position == 6


def test_print_needs_suffix():
    with pytest.raises(ParseError) as info:
        parse("어떻게\n식어\n이 사람이름이냐")
    assert info.value.expected == {TokenType.BANG, TokenType.KEK}


def test_conditional_needs_variable_guard():
    with pytest.raises(ParseError) as info:
        parse("어떻게\n동탄..?식.!\n이 사람이름이냐")
    assert info.value.expected == {TokenType.VAR}


def test_nothing_after_end_keyword():
    with pytest.raises(ParseError) as info:
        parse("어떻게\n이 사람이름이냐\n엄.")
    assert info.value.expected == {TokenType.EOF}
