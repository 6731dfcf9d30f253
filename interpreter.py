from io import StringIO

from umj_ast import *
from errors import ExecutionError
from lamina_simulator import DEFAULT_MAX_STEPS, wrap_i64

class Interpreter:
    """Executa a AST diretamente, com a mesma semântica do IR gerado."""
    def __init__(self, program, max_steps=DEFAULT_MAX_STEPS):
        self.program = program
        self.variables = {}
        self.pc = 0
        self.line_numbers = program.line_numbers()
        self.line_to_index = {line: idx for idx, line in enumerate(self.line_numbers)}
        self.statements = [stmt for _, stmt in program.lines]
        self.max_steps = max_steps
        self.steps = 0
        self.exit_code = None
        self.output_buffer = StringIO()

    def _get_variable(self, index):
        return self.variables.get(index, 0)

    def _set_variable(self, index, value):
        self.variables[index] = value

    def _evaluate_expr(self, expr):
        values = []
        for node in walk_postorder(expr):
            if isinstance(node, Number):
                values.append(node.value)
            elif isinstance(node, Variable):
                values.append(self._get_variable(node.index))
            elif isinstance(node, BinaryOp):
                right_val = values.pop()
                left_val = values.pop()

                if node.op == '+': values.append(wrap_i64(left_val + right_val))
                elif node.op == '-': values.append(wrap_i64(left_val - right_val))
                elif node.op == '*': values.append(wrap_i64(left_val * right_val))
                else: raise ExecutionError(f"Operador desconhecido: {node.op}")
            else:
                raise ExecutionError(f"Tipo de expressão inválido: {type(node)}")
        return values[0]

    def _execute(self, stmt):
        """Executa um comando e devolve o próximo pc, ou None ao retornar."""
        if isinstance(stmt, AssignStatement):
            self._set_variable(stmt.var, self._evaluate_expr(stmt.expr))

        elif isinstance(stmt, PrintStatement):
            self.output_buffer.write(f"{self._evaluate_expr(stmt.expr)}\n")

        elif isinstance(stmt, PrintCharStatement):
            value = self._evaluate_expr(stmt.expr)
            try:
                self.output_buffer.write(chr(value))
            except (ValueError, OverflowError):
                raise ExecutionError(f"Código de caractere inválido: {value} (linha {stmt.line})")

        elif isinstance(stmt, InputStatement):
            # entrada do console não é suportada: a variável mantém o valor
            pass

        elif isinstance(stmt, ConditionalStatement):
            while isinstance(stmt, ConditionalStatement):
                if self._get_variable(stmt.guard) == 0:
                    return self.pc + 1
                stmt = stmt.body
            return self._execute(stmt)

        elif isinstance(stmt, GotoStatement):
            if stmt.target not in self.line_to_index:
                raise ExecutionError(f"Linha {stmt.target} não existe (goto na linha {stmt.line})")
            return self.line_to_index[stmt.target]

        elif isinstance(stmt, ReturnStatement):
            self.exit_code = 0 if stmt.value is None else self._evaluate_expr(stmt.value)
            return None

        else:
            raise ExecutionError(f"Comando desconhecido na linha {stmt.line}")

        return self.pc + 1

    def run(self):
        while self.pc is not None and self.pc < len(self.statements):
            if self.steps >= self.max_steps:
                raise ExecutionError(f"Limite de {self.max_steps} passos excedido")
            self.steps += 1
            self.pc = self._execute(self.statements[self.pc])

        if self.exit_code is None:
            self.exit_code = 0
        return self.output_buffer.getvalue()
