from fastapi import FastAPI
from pydantic import BaseModel, Field
import logging

from compiler import compile_umjunsik, tokenize, parse_tokens, generate
from lamina_simulator import LaminaSimulator, DEFAULT_MAX_STEPS
from errors import UmjunsikSyntaxError, LexError, ParseError, CodeGenError, ExecutionError
from umj_ast import (
    AssignStatement, PrintStatement, PrintCharStatement, InputStatement,
    ConditionalStatement, GotoStatement, ReturnStatement, BinaryOp, Number, Variable,
    walk_postorder,
)

logger = logging.getLogger(__name__)

app = FastAPI(title="Umjunsik IDE", version="1.0.0")

# --- Modelos de Dados ---
class CodeRequest(BaseModel):
    code: str

class RunRequest(BaseModel):
    code: str
    max_steps: int = Field(DEFAULT_MAX_STEPS, gt=0, le=DEFAULT_MAX_STEPS)

# --- Lógica Auxiliar ---

EXPRESSIONS = (BinaryOp, Number, Variable)
STATEMENTS = (
    AssignStatement, PrintStatement, PrintCharStatement, InputStatement,
    GotoStatement, ReturnStatement,
)

def expr_to_list(expr):
    """Expressão em notação pós-fixa: a lista não cresce em profundidade."""
    result = []
    for node in walk_postorder(expr):
        if isinstance(node, Number): result.append({"type": "Number", "value": node.value})
        elif isinstance(node, Variable): result.append({"type": "Variable", "index": node.index})
        else: result.append({"type": "BinaryOp", "op": node.op})
    return result

def ast_to_dict(node):
    if isinstance(node, ConditionalStatement):
        # guardas aninhadas ficam numa lista, com o comando protegido no fim
        guards = []
        line = node.line
        while isinstance(node, ConditionalStatement):
            guards.append(node.guard)
            node = node.body
        return {"type": "ConditionalStatement", "guards": guards, "body": ast_to_dict(node), "line": line}
    if not isinstance(node, STATEMENTS): return {"type": "Unknown", "value": str(node)}
    result = {"type": type(node).__name__}
    for key, value in node.__dict__.items():
        if value is None: continue
        if isinstance(value, (int, str, float, bool)): result[key] = value
        elif isinstance(value, EXPRESSIONS): result[key] = expr_to_list(value)
        else: result[key] = ast_to_dict(value)
    return result

def error_to_dict(error):
    """Converte os erros do compilador em dados estruturados para o cliente."""
    result = {"type": type(error).__name__, "message": str(error)}
    if isinstance(error, UmjunsikSyntaxError):
        result.update(line=error.line, column=error.column)
    if isinstance(error, LexError):
        result["offset"] = error.offset
    elif isinstance(error, ParseError):
        result.update(
            position=error.position,
            expected=sorted(t.name for t in error.expected),
            found=error.found.name if error.found else None,
        )
    elif isinstance(error, CodeGenError):
        result.update(kind=error.kind, label=error.label)
    return result

def warnings_to_list(warnings):
    return [{"line": w.line, "message": w.message} for w in warnings]

COMPILER_ERRORS = (UmjunsikSyntaxError, CodeGenError)

# --- Endpoints da API ---
@app.post("/api/compile")
async def compile_code(request: CodeRequest):
    try:
        tokens = tokenize(request.code)
        program = parse_tokens(tokens)
        result = generate(program)
    except COMPILER_ERRORS as e:
        logger.info("compilação falhou: %s", e)
        return {"success": False, "errors": [error_to_dict(e)]}

    token_list = [{"type": t.type.name, "value": t.value, "line": t.line, "column": t.column} for t in tokens]
    program_dict = {"type": "Program", "lines": [{"line": n, "statement": ast_to_dict(s)} for n, s in program.lines]}
    return {
        "success": True,
        "tokens": token_list,
        "ast": program_dict,
        "ir": result.ir,
        "slots": {str(k): v for k, v in result.slots.items()},
        "warnings": warnings_to_list(result.warnings),
    }

@app.post("/api/run")
async def run_code(request: RunRequest):
    try:
        result = compile_umjunsik(request.code)
    except COMPILER_ERRORS as e:
        return {"success": False, "errors": [error_to_dict(e)]}

    simulator = LaminaSimulator(result.ir, max_steps=request.max_steps)
    try:
        output = simulator.run()
    except ExecutionError as e:
        return {
            "success": False,
            "ir": result.ir,
            "output": simulator.output_buffer.getvalue(),
            "errors": [error_to_dict(e)],
        }
    return {
        "success": True,
        "ir": result.ir,
        "output": output,
        "exit_code": simulator.exit_code,
        "warnings": warnings_to_list(result.warnings),
    }

@app.get("/api/examples")
async def get_examples():
    return {
        "sum": {"name": "Atribui e imprime", "code": "어떻게\n엄...\n어엄....\n식어어!\n이 사람이름이냐ㅋㅋ"},
        "countdown": {"name": "Contagem regressiva", "code": "어떻게\n엄.....\n식어!\n엄어,\n동탄어?준..\n이 사람이름이냐ㅋㅋ"},
        "char": {"name": "Caractere (uma linha)", "code": "어떻게~식........ .........ㅋ~식ㅋ~이 사람이름이냐ㅋㅋ"},
    }
