class UmjunsikSyntaxError(SyntaxError):
    def __init__(self, message, line=None, column=None):
        super().__init__(message)
        self.line = line
        self.column = column


class LexError(UmjunsikSyntaxError):
    """Caractere ou sequência que não pertence à linguagem."""
    def __init__(self, message, offset, line=None, column=None):
        super().__init__(message, line, column)
        self.offset = offset


class ParseError(UmjunsikSyntaxError):
    """Formato inválido de comando/expressão ou fim de programa ausente."""
    def __init__(self, message, position, expected, found=None, line=None, column=None):
        super().__init__(message, line, column)
        self.position = position
        self.expected = frozenset(expected)
        self.found = found


class CodeGenError(Exception):
    UNRESOLVED_LABEL = "unresolved_label"
    INTERNAL_SLOT_INVARIANT = "internal_slot_invariant"
    INTERNAL_BLOCK_ORDER = "internal_block_order"

    def __init__(self, message, kind, label=None):
        super().__init__(message)
        self.kind = kind
        self.label = label

    @property
    def is_internal(self):
        return self.kind != self.UNRESOLVED_LABEL


class ExecutionError(Exception):
    pass


class CompileWarning:
    """Condição não fatal: o programa compila mas pode se comportar mal."""
    def __init__(self, message, line):
        self.message = message
        self.line = line

    def __repr__(self):
        return f"CompileWarning(line={self.line}, message={self.message!r})"
