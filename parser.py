import logging

from lexer import TokenType
from umj_ast import *
from errors import ParseError

logger = logging.getLogger(__name__)

STATEMENT_START = frozenset({
    TokenType.ASSIGN, TokenType.CONSOLE, TokenType.CONDITIONAL,
    TokenType.GOTO, TokenType.RETURN,
})
ATOMS = frozenset({TokenType.NUMBER, TokenType.VAR})
STATEMENT_END = frozenset({TokenType.NEWLINE, TokenType.END, TokenType.EOF})

class Parser:
    def __init__(self, tokens):
        self.tokens = tokens
        self.pos = 0
        self.current_token = tokens[0]

    def advance(self):
        # o EOF final nunca é consumido
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        self.current_token = self.tokens[self.pos]

    def check(self, *token_types):
        return self.current_token.type in token_types

    def error(self, expected):
        token = self.current_token
        expected_names = ', '.join(sorted(t.name for t in expected))
        if token.type == TokenType.EOF:
            found = "fim inesperado da entrada"
        else:
            found = token.type.name
        raise ParseError(
            f"Linha {token.line}:{token.column} - "
            f"Esperado {expected_names}, encontrado {found}",
            token.offset, expected, token.type, token.line, token.column
        )

    def expect(self, token_type):
        if self.current_token.type != token_type:
            self.error({token_type})
        token = self.current_token
        self.advance()
        return token

    def skip_newlines(self):
        while self.check(TokenType.NEWLINE):
            self.advance()

    def parse_atom(self):
        token = self.current_token
        if token.type == TokenType.NUMBER:
            self.advance()
            return Number(token.value)
        if token.type == TokenType.VAR:
            self.advance()
            return Variable(token.value)
        self.error(ATOMS)

    def parse_term(self):
        """term := atom (MULTIPLY atom)*"""
        node = self.parse_atom()
        while self.check(TokenType.MULTIPLY):
            self.advance()
            node = BinaryOp(node, '*', self.parse_atom())
        return node

    def parse_expression(self):
        """
        expression := term term*

        Termos adjacentes são somados da esquerda para a direita. Um literal
        negativo à direita vira subtração: '어,,' é v1 - 2.
        """
        node = self.parse_term()
        while self.current_token.type in ATOMS:
            right = self.parse_term()
            if isinstance(right, Number) and right.value < 0:
                node = BinaryOp(node, '-', Number(-right.value))
            else:
                node = BinaryOp(node, '+', right)
        return node

    def fold_constant(self, expr, start):
        """
        Avalia uma expressão só com literais ('준..... ......' é a linha 30).
        Variáveis não são aceitas como destino de goto.
        """
        values = []
        for node in walk_postorder(expr):
            if isinstance(node, Number):
                values.append(node.value)
            elif isinstance(node, Variable):
                raise ParseError(
                    f"Linha {start.line}:{start.column} - "
                    f"Destino de goto deve ser constante, encontrado variável {node.index}",
                    start.offset, {TokenType.NUMBER}, TokenType.VAR, start.line, start.column
                )
            else:
                right = values.pop()
                left = values.pop()
                if node.op == '+': values.append(left + right)
                elif node.op == '-': values.append(left - right)
                else: values.append(left * right)
        return values[0]

    def parse_assign(self, line_number):
        var = self.expect(TokenType.ASSIGN).value

        if self.check(TokenType.CONSOLE):
            self.advance()
            self.expect(TokenType.QUESTION)
            return InputStatement(var, line_number)

        if self.current_token.type in STATEMENT_END:
            # '엄' sozinho zera a variável
            return AssignStatement(var, Number(0), line_number)

        return AssignStatement(var, self.parse_expression(), line_number)

    def parse_console(self, line_number):
        self.expect(TokenType.CONSOLE)

        if self.check(TokenType.KEK):
            self.advance()
            return PrintCharStatement(Number(10), line_number)

        expr = self.parse_expression()
        if self.check(TokenType.BANG):
            self.advance()
            return PrintStatement(expr, line_number)
        if self.check(TokenType.KEK):
            self.advance()
            return PrintCharStatement(expr, line_number)
        self.error({TokenType.BANG, TokenType.KEK})

    def parse_statement(self, line_number):
        token_type = self.current_token.type

        if token_type == TokenType.ASSIGN:
            return self.parse_assign(line_number)

        elif token_type == TokenType.CONSOLE:
            return self.parse_console(line_number)

        elif token_type == TokenType.CONDITIONAL:
            guards = []
            while self.check(TokenType.CONDITIONAL):
                self.advance()
                guards.append(self.expect(TokenType.VAR).value)
                self.expect(TokenType.QUESTION)
            # o condicional protege exatamente um comando, na mesma linha
            stmt = self.parse_statement(line_number)
            for guard in reversed(guards):
                stmt = ConditionalStatement(guard, stmt, line_number)
            return stmt

        elif token_type == TokenType.GOTO:
            self.advance()
            start = self.current_token
            target = self.fold_constant(self.parse_expression(), start)
            return GotoStatement(target, line_number)

        elif token_type == TokenType.RETURN:
            self.advance()
            if self.check(TokenType.BANG):
                self.advance()
                return ReturnStatement(line_number, self.parse_expression())
            return ReturnStatement(line_number)

        self.error(STATEMENT_START)

    def parse_program(self):
        self.skip_newlines()
        self.expect(TokenType.START)

        lines = []
        line_number = 0
        while True:
            if self.check(TokenType.NEWLINE):
                self.advance()
                continue
            if self.check(TokenType.END):
                self.advance()
                break
            if self.check(TokenType.EOF):
                self.error(STATEMENT_START | {TokenType.END})

            line_number += 1
            lines.append((line_number, self.parse_statement(line_number)))

            if self.check(TokenType.NEWLINE):
                self.advance()
            elif not self.check(TokenType.END):
                self.error({TokenType.NEWLINE, TokenType.END})

        self.skip_newlines()
        self.expect(TokenType.EOF)
        logger.debug("programa com %d linhas", len(lines))
        return Program(lines)
