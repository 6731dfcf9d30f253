import logging
from io import StringIO

from errors import ExecutionError

logger = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 100000
ENTRY_LABEL = 'entry'

def wrap_i64(value):
    """Reduz um inteiro Python para o intervalo de um i64 com sinal."""
    value &= (1 << 64) - 1
    if value >= 1 << 63:
        value -= 1 << 64
    return value

class LaminaSimulator:
    """
    Executa o subconjunto de Lamina IR emitido pelo gerador de código.

    Cada bloco rotulado é uma lista de instruções; a execução começa em
    'entry' e termina no primeiro 'ret'. Slots de pilha são posições de uma
    memória linear e temporários ficam num dicionário próprio.
    """
    def __init__(self, ir_text, max_steps=DEFAULT_MAX_STEPS):
        self.blocks = {}
        self._load_blocks(ir_text)

        self.memory = []
        self.pointers = {}
        self.temps = {}
        self.current_block = ENTRY_LABEL
        self.instruction_counter = 0
        self.steps = 0
        self.max_steps = max_steps
        self.exit_code = None
        self.output_buffer = StringIO()

    def _load_blocks(self, ir_text):
        label = None
        for raw_line in ir_text.splitlines():
            line = raw_line.strip()
            if not line or line.startswith(';') or line.startswith('fn ') or line == '}':
                continue
            if line.endswith(':'):
                label = line[:-1]
                self.blocks[label] = []
                continue
            if label is None:
                raise ExecutionError(f"Instrução fora de um bloco: '{line}'")
            self.blocks[label].append(line)

        if ENTRY_LABEL not in self.blocks:
            raise ExecutionError("Bloco 'entry' não encontrado")

    def run(self):
        """
        Executa o programa até encontrar 'ret' e devolve a saída produzida.
        """
        while self.exit_code is None:
            if self.steps >= self.max_steps:
                raise ExecutionError(f"Limite de {self.max_steps} passos excedido")
            block = self.blocks[self.current_block]
            if self.instruction_counter >= len(block):
                raise ExecutionError(f"Bloco '{self.current_block}' termina sem salto ou retorno")
            self._execute_instruction(block[self.instruction_counter])
            self.steps += 1

        logger.debug("execução terminou em %d passos com código %d", self.steps, self.exit_code)
        return self.output_buffer.getvalue()

    def _execute_instruction(self, instruction):
        dest = None
        if ' = ' in instruction:
            dest, instruction = instruction.split(' = ', 1)
        opcode, _, rest = instruction.partition(' ')
        operands = [operand.strip() for operand in rest.split(',')] if rest else []

        op_map = {
            'alloc.ptr.stack': self._alloc,
            'load.i64': self._load,
            'store.i64': self._store,
            'add.i64': self._add,
            'sub.i64': self._subtract,
            'mul.i64': self._multiply,
            'ne.i64': self._not_equal,
            'print': self._print,
            'printchar': self._printchar,
            'jmp': self._jump,
            'br': self._branch,
            'ret.i64': self._return,
        }

        if opcode not in op_map:
            raise ExecutionError(f"Instrução desconhecida '{opcode}' no bloco '{self.current_block}'")
        op_map[opcode](dest, operands)

    def _value(self, operand):
        if operand.startswith('%'):
            if operand not in self.temps:
                raise ExecutionError(f"Temporário indefinido: {operand}")
            return self.temps[operand]
        try:
            return int(operand)
        except ValueError:
            raise ExecutionError(f"Operando inválido: '{operand}'")

    def _address(self, operand):
        if operand not in self.pointers:
            raise ExecutionError(f"Ponteiro indefinido: {operand}")
        return self.pointers[operand]

    def _define(self, dest, value):
        self.temps[dest] = value
        self.instruction_counter += 1

    def _alloc(self, dest, operands):
        self.pointers[dest] = len(self.memory)
        self.memory.append(0)
        self.instruction_counter += 1

    def _load(self, dest, operands):
        self._define(dest, self.memory[self._address(operands[0])])

    def _store(self, dest, operands):
        self.memory[self._address(operands[0])] = self._value(operands[1])
        self.instruction_counter += 1

    def _add(self, dest, operands):
        self._define(dest, wrap_i64(self._value(operands[0]) + self._value(operands[1])))

    def _subtract(self, dest, operands):
        self._define(dest, wrap_i64(self._value(operands[0]) - self._value(operands[1])))

    def _multiply(self, dest, operands):
        self._define(dest, wrap_i64(self._value(operands[0]) * self._value(operands[1])))

    def _not_equal(self, dest, operands):
        self._define(dest, int(self._value(operands[0]) != self._value(operands[1])))

    def _print(self, dest, operands):
        self.output_buffer.write(f"{self._value(operands[0])}\n")
        self.instruction_counter += 1

    def _printchar(self, dest, operands):
        value = self._value(operands[0])
        try:
            self.output_buffer.write(chr(value))
        except (ValueError, OverflowError):
            raise ExecutionError(f"Código de caractere inválido: {value}")
        self.instruction_counter += 1

    def _jump(self, dest, operands):
        self._enter(operands[0])

    def _branch(self, dest, operands):
        condition, if_true, if_false = operands
        self._enter(if_true if self._value(condition) != 0 else if_false)

    def _return(self, dest, operands):
        self.exit_code = self._value(operands[0])

    def _enter(self, label):
        if label not in self.blocks:
            raise ExecutionError(f"Bloco inexistente: '{label}'")
        self.current_block = label
        self.instruction_counter = 0
