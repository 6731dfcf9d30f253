import logging
from dataclasses import dataclass
from enum import Enum, auto

from errors import LexError

logger = logging.getLogger(__name__)

class TokenType(Enum):
    START = auto()
    END = auto()
    ASSIGN = auto()
    VAR = auto()
    NUMBER = auto()
    MULTIPLY = auto()
    GOTO = auto()
    CONSOLE = auto()
    CONDITIONAL = auto()
    RETURN = auto()
    QUESTION = auto()
    BANG = auto()
    KEK = auto()
    NEWLINE = auto()
    EOF = auto()

@dataclass
class Token:
    type: TokenType
    value: object
    line: int
    column: int
    offset: int

KEYWORDS = {
    '어떻게': TokenType.START,
    '이 사람이름이냐': TokenType.END,
    '준': TokenType.GOTO,
    '식': TokenType.CONSOLE,
    '동탄': TokenType.CONDITIONAL,
    '화이팅': TokenType.RETURN,
}
# maior primeiro: casamento pelo prefixo mais longo
KEYWORD_ORDER = sorted(KEYWORDS, key=len, reverse=True)

SYMBOLS = {
    '?': TokenType.QUESTION,
    '!': TokenType.BANG,
    'ㅋ': TokenType.KEK,
    '\n': TokenType.NEWLINE,
    '~': TokenType.NEWLINE,
}

EO = '어'
EOM = '엄'
INCREMENT = '.'
DECREMENT = ','
WHITESPACE = ' \t\r'
ATOM_TOKENS = (TokenType.NUMBER, TokenType.VAR)

class Lexer:
    def __init__(self, source):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
        self.current_char = self.source[0] if source else None
        self.tokens = []

    def advance(self):
        if self.current_char == '\n':
            self.line += 1
            self.column = 0
        self.pos += 1
        self.column += 1
        if self.pos < len(self.source):
            self.current_char = self.source[self.pos]
        else:
            self.current_char = None

    def advance_by(self, count):
        for _ in range(count):
            self.advance()

    def error(self, message):
        raise LexError(
            f"Linha {self.line}:{self.column} - {message}",
            self.pos, self.line, self.column
        )

    def add_token(self, token_type, value, line, column, offset):
        self.tokens.append(Token(token_type, value, line, column, offset))

    def match_keyword(self):
        for keyword in KEYWORD_ORDER:
            if self.source.startswith(keyword, self.pos):
                return keyword
        return None

    def eo_run_length(self, pos):
        end = pos
        while end < len(self.source) and self.source[end] == EO:
            end += 1
        return end - pos

    def starts_atom(self, pos):
        """Verifica se a posição inicia um literal ou uma referência a variável."""
        if pos >= len(self.source):
            return False
        char = self.source[pos]
        if char in (INCREMENT, DECREMENT):
            return True
        if char != EO or self.source.startswith('어떻게', pos):
            return False
        end = pos + self.eo_run_length(pos)
        return not (end < len(self.source) and self.source[end] == EOM)

    def whitespace(self):
        start_line, start_column, start_pos = self.line, self.column, self.pos
        while self.current_char and self.current_char in WHITESPACE:
            self.advance()
        # espaço entre dois átomos é o operador de multiplicação
        if (self.tokens and self.tokens[-1].type in ATOM_TOKENS
                and self.starts_atom(self.pos)):
            self.add_token(TokenType.MULTIPLY, None, start_line, start_column, start_pos)

    def literal(self):
        """Soma uma sequência de '.' (+1) e ',' (-1)."""
        value = 0
        while self.current_char in (INCREMENT, DECREMENT):
            value += 1 if self.current_char == INCREMENT else -1
            self.advance()
        return value

    def markers(self):
        """
        Conta uma sequência de '어'. Se terminar em '엄' é uma atribuição
        (엄 = variável 1, 어엄 = variável 2, ...); caso contrário é uma
        referência (어 = variável 1, 어어 = variável 2, ...).
        """
        count = self.eo_run_length(self.pos)
        self.advance_by(count)
        if self.current_char == EOM:
            self.advance()
            return TokenType.ASSIGN, count + 1
        return TokenType.VAR, count

    def tokenize(self):
        while self.current_char:
            start_line = self.line
            start_column = self.column
            start_pos = self.pos

            if self.current_char in WHITESPACE:
                self.whitespace()
                continue

            keyword = self.match_keyword()
            if keyword:
                self.advance_by(len(keyword))
                token_type = KEYWORDS[keyword]
                if token_type == TokenType.END:
                    # "이 사람이름이냐ㅋㅋ": os ㅋ finais fazem parte do marcador
                    while self.current_char == 'ㅋ':
                        self.advance()
                self.add_token(token_type, keyword, start_line, start_column, start_pos)
                continue

            if self.current_char in SYMBOLS:
                token_type = SYMBOLS[self.current_char]
                self.advance()
                self.add_token(token_type, None, start_line, start_column, start_pos)
                continue

            if self.current_char in (INCREMENT, DECREMENT):
                value = self.literal()
                self.add_token(TokenType.NUMBER, value, start_line, start_column, start_pos)
                continue

            if self.current_char in (EO, EOM):
                token_type, count = self.markers()
                self.add_token(token_type, count, start_line, start_column, start_pos)
                continue

            self.error(f"Caractere inválido: '{self.current_char}'")

        self.add_token(TokenType.EOF, None, self.line, self.column, self.pos)
        logger.debug("%d tokens gerados", len(self.tokens))
        return self.tokens
