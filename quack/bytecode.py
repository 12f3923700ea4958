from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


@dataclass(frozen=True)
class SourceLocation:
    file: str
    line: int
    column: int
    token_index: int


@dataclass(frozen=True)
class InstructionDebug:
    """Metadata describing the source token an instruction was lowered from."""

    location: SourceLocation
    token: str


class Opcode(Enum):
    PLUS = auto()            # PLUS
    MINUS = auto()           # MINUS
    MULT = auto()            # MULT
    DIV = auto()             # DIV
    MOD = auto()             # MOD

    REG_PUT = auto()         # REG_PUT reg
    REG_GET = auto()         # REG_GET reg

    PRINT = auto()           # PRINT
    PRINT_REG = auto()       # PRINT_REG reg
    PRINT_CHAR = auto()      # PRINT_CHAR
    PRINT_REG_CHAR = auto()  # PRINT_REG_CHAR reg

    MARK = auto()            # MARK index, label
    JUMP = auto()            # JUMP label
    JUMP_IF_0 = auto()       # JUMP_IF_0 reg, label
    JUMP_IF_EQUAL = auto()   # JUMP_IF_EQUAL reg, reg, label
    JUMP_IF_MORE = auto()    # JUMP_IF_MORE reg, reg, label

    QUIT = auto()            # QUIT
    INPUT = auto()           # INPUT literal


# Operand count per opcode; used when loading listings back from disk.
ARITY = {
    Opcode.PLUS: 0,
    Opcode.MINUS: 0,
    Opcode.MULT: 0,
    Opcode.DIV: 0,
    Opcode.MOD: 0,
    Opcode.REG_PUT: 1,
    Opcode.REG_GET: 1,
    Opcode.PRINT: 0,
    Opcode.PRINT_REG: 1,
    Opcode.PRINT_CHAR: 0,
    Opcode.PRINT_REG_CHAR: 1,
    Opcode.MARK: 2,
    Opcode.JUMP: 1,
    Opcode.JUMP_IF_0: 2,
    Opcode.JUMP_IF_EQUAL: 3,
    Opcode.JUMP_IF_MORE: 3,
    Opcode.QUIT: 0,
    Opcode.INPUT: 1,
}


@dataclass
class Instruction:
    opcode: Opcode
    args: list  # e.g. ['a'], ['3', 'loop'] or ['-42']
    debug: InstructionDebug | None = field(default=None, compare=False)

    def __str__(self):
        if not self.args:
            return self.opcode.name
        return f"{self.opcode.name} {' '.join(map(str, self.args))}"


__all__ = ["ARITY", "Instruction", "InstructionDebug", "Opcode", "SourceLocation"]
