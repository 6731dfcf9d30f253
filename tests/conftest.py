import pytest

from programs import COUNTDOWN, SCENARIO_A


def split_blocks(ir):
    """Agrupa as instruções do IR por rótulo de bloco."""
    blocks = {}
    label = None
    for raw in ir.splitlines():
        line = raw.strip()
        if not line or line.startswith("fn ") or line == "}":
            continue
        if line.endswith(":"):
            label = line[:-1]
            blocks[label] = []
        else:
            blocks[label].append(line)
    return blocks


@pytest.fixture
def scenario_a():
    return SCENARIO_A


@pytest.fixture
def countdown():
    return COUNTDOWN


@pytest.fixture
def blocks():
    return split_blocks
