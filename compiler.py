import logging

from lexer import Lexer
from parser import Parser
from lamina_codegen import LaminaCodeGenerator

logger = logging.getLogger(__name__)

class CompilationResult:
    def __init__(self, ir, slots, warnings):
        self.ir = ir
        # índice da variável -> id do slot, na ordem de alocação
        self.slots = slots
        self.warnings = warnings

def tokenize(source):
    return Lexer(source).tokenize()

def parse_tokens(tokens):
    return Parser(tokens).parse_program()

def parse(source):
    return parse_tokens(tokenize(source))

def generate(program):
    """Gera o IR de um programa já analisado."""
    generator = LaminaCodeGenerator(program)
    ir = generator.generate()
    logger.debug("IR gerado: %d linhas, %d avisos", ir.count("\n"), len(generator.warnings))
    return CompilationResult(ir, generator.slots, generator.warnings)

def compile_umjunsik(source):
    """
    Compila código Umjunsik para Lamina IR.

    Levanta LexError, ParseError ou CodeGenError; avisos não fatais (como a
    entrada do console não suportada) voltam em CompilationResult.warnings.
    """
    return generate(parse(source))
