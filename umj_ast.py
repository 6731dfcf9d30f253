class Program:
    def __init__(self, lines):
        # lista ordenada de (numero_da_linha, statement)
        self.lines = lines

    def line_numbers(self):
        return [line for line, _ in self.lines]

class AssignStatement:
    def __init__(self, var, expr, line):
        self.var = var
        self.expr = expr
        self.line = line

class PrintStatement:
    def __init__(self, expr, line):
        self.expr = expr
        self.line = line

class PrintCharStatement:
    def __init__(self, expr, line):
        self.expr = expr
        self.line = line

class InputStatement:
    def __init__(self, var, line):
        self.var = var
        self.line = line

class ConditionalStatement:
    def __init__(self, guard, body, line):
        self.guard = guard
        self.body = body
        self.line = line

class GotoStatement:
    def __init__(self, target, line):
        self.target = target
        self.line = line

class ReturnStatement:
    def __init__(self, line, value=None):
        self.line = line
        self.value = value

class BinaryOp:
    def __init__(self, left, op, right):
        self.left = left
        self.op = op
        self.right = right

class Number:
    def __init__(self, value):
        self.value = value

class Variable:
    def __init__(self, index):
        self.index = index

def walk_postorder(expr):
    """
    Percorre uma expressão em pós-ordem (esquerda, direita, nó) com uma
    pilha explícita; cadeias longas de termos não estouram a recursão.
    """
    stack = [(expr, False)]
    while stack:
        node, expanded = stack.pop()
        if isinstance(node, BinaryOp) and not expanded:
            stack.append((node, True))
            stack.append((node.right, False))
            stack.append((node.left, False))
        else:
            yield node
