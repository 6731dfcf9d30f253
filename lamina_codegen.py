import logging

from umj_ast import *
from errors import CodeGenError, CompileWarning

logger = logging.getLogger(__name__)

INT_TYPE = 'i64'
ENTRY_LABEL = 'entry'
EXIT_LABEL = 'exit'
LINE_LABEL = 'line_{}'
BODY_LABEL = 'cond_{}'

ARITH_OPS = {
    '+': 'add',
    '-': 'sub',
    '*': 'mul',
}

class LaminaCodeGenerator:
    """
    Gera Lamina IR para um programa Umjunsik (representado por uma AST).

    Duas passadas: a primeira descobre quais variáveis são usadas e atribui
    um slot de pilha a cada uma, na ordem da primeira ocorrência; a segunda
    emite uma função @main com um bloco por linha. Variáveis nunca citadas
    não recebem slot.
    """
    def __init__(self, program):
        self.program = program
        self.output = []
        self.slot_table = {}
        self.line_labels = {}
        self.warnings = []
        self.temp_counter = 0
        self.body_counter = 0
        self.block_terminated = True
        self.exit_referenced = False

    def generate(self):
        self._discover_symbols(self.program)
        self._resolve_labels()
        logger.debug("%d slots para %d linhas", len(self.slot_table), len(self.program.lines))

        self.output.append(f"fn @main() -> {INT_TYPE} {{")
        self._open_block(ENTRY_LABEL)
        for slot in sorted(self.slot_table.values()):
            pointer = self._slot_name(slot)
            self._emit(f"{pointer} = alloc.ptr.stack {INT_TYPE}")
            self._emit(f"store.{INT_TYPE} {pointer}, 0")
        self._fall_through(self._successor(0))

        for position, (line_number, stmt) in enumerate(self.program.lines):
            successor = self._successor(position + 1)
            self._open_block(self.line_labels[line_number])
            self._generate_code_for_statement(stmt, successor)
            if not self.block_terminated:
                self._fall_through(successor)

        if self.exit_referenced:
            self._open_block(EXIT_LABEL)
            self._terminate(f"ret.{INT_TYPE} 0")

        self.output.append("}")
        return "\n".join(self.output) + "\n"

    @property
    def slots(self):
        return dict(self.slot_table)

    def _discover_symbols(self, node):
        """
        Percorre a AST e registra cada índice de variável na ordem em que
        aparece pela primeira vez.
        """
        if isinstance(node, Program):
            for _, stmt in node.lines:
                self._discover_symbols(stmt)

        elif isinstance(node, AssignStatement):
            self._register_slot(node.var)
            self._discover_symbols(node.expr)

        elif isinstance(node, InputStatement):
            self._register_slot(node.var)

        elif isinstance(node, (PrintStatement, PrintCharStatement)):
            self._discover_symbols(node.expr)

        elif isinstance(node, ConditionalStatement):
            while isinstance(node, ConditionalStatement):
                self._register_slot(node.guard)
                node = node.body
            self._discover_symbols(node)

        elif isinstance(node, ReturnStatement):
            if node.value is not None:
                self._discover_symbols(node.value)

        elif isinstance(node, (BinaryOp, Variable, Number)):
            for leaf in walk_postorder(node):
                if isinstance(leaf, Variable):
                    self._register_slot(leaf.index)

    def _register_slot(self, index):
        if index not in self.slot_table:
            self.slot_table[index] = len(self.slot_table)

    def _resolve_labels(self):
        for line_number, _ in self.program.lines:
            self.line_labels[line_number] = LINE_LABEL.format(line_number)

    def _successor(self, position):
        if position < len(self.program.lines):
            line_number, _ = self.program.lines[position]
            return self.line_labels[line_number]
        return EXIT_LABEL

    def _slot_name(self, slot):
        return f"%slot_{slot}"

    def _slot_for(self, index):
        if index not in self.slot_table:
            raise CodeGenError(
                f"Variável {index} sem slot alocado",
                CodeGenError.INTERNAL_SLOT_INVARIANT
            )
        return self._slot_name(self.slot_table[index])

    def _new_temp(self):
        temp = f"%t{self.temp_counter}"
        self.temp_counter += 1
        return temp

    def _open_block(self, label):
        if not self.block_terminated:
            raise CodeGenError(
                f"Bloco anterior a '{label}' não foi terminado",
                CodeGenError.INTERNAL_BLOCK_ORDER, label
            )
        if label != ENTRY_LABEL:
            self.output.append("")
        self.output.append(f"  {label}:")
        self.block_terminated = False

    def _emit(self, instruction):
        if self.block_terminated:
            raise CodeGenError(
                f"Instrução após o fim do bloco: {instruction}",
                CodeGenError.INTERNAL_BLOCK_ORDER
            )
        self.output.append(f"    {instruction}")

    def _terminate(self, instruction):
        self._emit(instruction)
        self.block_terminated = True

    def _fall_through(self, successor):
        # sair da última linha é um retorno implícito
        if successor == EXIT_LABEL:
            self._terminate(f"ret.{INT_TYPE} 0")
        else:
            self._terminate(f"jmp {successor}")

    def _generate_expr(self, expr):
        """Baixa a expressão em pós-ordem; cada nó produz um temporário novo."""
        temps = []
        for node in walk_postorder(expr):
            temp = self._new_temp()
            if isinstance(node, Number):
                self._emit(f"{temp} = add.{INT_TYPE} {node.value}, 0")
            elif isinstance(node, Variable):
                self._emit(f"{temp} = load.{INT_TYPE} {self._slot_for(node.index)}")
            elif isinstance(node, BinaryOp):
                if node.op not in ARITH_OPS:
                    raise ValueError(f"Operador não suportado: {node.op}")
                right = temps.pop()
                left = temps.pop()
                self._emit(f"{temp} = {ARITH_OPS[node.op]}.{INT_TYPE} {left}, {right}")
            else:
                raise TypeError(f"Tipo de expressão desconhecido: {type(node).__name__}")
            temps.append(temp)
        return temps[0]

    def _generate_code_for_statement(self, stmt, successor):
        if isinstance(stmt, AssignStatement):
            value = self._generate_expr(stmt.expr)
            self._emit(f"store.{INT_TYPE} {self._slot_for(stmt.var)}, {value}")

        elif isinstance(stmt, PrintStatement):
            value = self._generate_expr(stmt.expr)
            self._emit(f"print {value}")

        elif isinstance(stmt, PrintCharStatement):
            value = self._generate_expr(stmt.expr)
            self._emit(f"printchar {value}")

        elif isinstance(stmt, InputStatement):
            pointer = self._slot_for(stmt.var)
            message = f"Linha {stmt.line}: entrada do console não é suportada; variável {stmt.var} não será lida"
            self.warnings.append(CompileWarning(message, stmt.line))
            logger.warning(message)
            self._emit(f"; input placeholder: {pointer} mantém o valor atual")

        elif isinstance(stmt, ConditionalStatement):
            # condicionais aninhados viram uma sequência de blocos
            while isinstance(stmt, ConditionalStatement):
                guard = self._generate_expr(Variable(stmt.guard))
                condition = self._new_temp()
                self._emit(f"{condition} = ne.{INT_TYPE} {guard}, 0")

                body_label = BODY_LABEL.format(self.body_counter)
                self.body_counter += 1
                if successor == EXIT_LABEL:
                    self.exit_referenced = True
                self._terminate(f"br {condition}, {body_label}, {successor}")

                self._open_block(body_label)
                stmt = stmt.body

            self._generate_code_for_statement(stmt, successor)
            if not self.block_terminated:
                self._fall_through(successor)

        elif isinstance(stmt, GotoStatement):
            label = self.line_labels.get(stmt.target)
            if label is None:
                raise CodeGenError(
                    f"Linha {stmt.line}: destino de goto {stmt.target} não existe",
                    CodeGenError.UNRESOLVED_LABEL, stmt.target
                )
            self._terminate(f"jmp {label}")

        elif isinstance(stmt, ReturnStatement):
            if stmt.value is None:
                self._terminate(f"ret.{INT_TYPE} 0")
            else:
                value = self._generate_expr(stmt.value)
                self._terminate(f"ret.{INT_TYPE} {value}")

        else:
            raise TypeError(f"Tipo de statement desconhecido: {type(stmt).__name__}")
