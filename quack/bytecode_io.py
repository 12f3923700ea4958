from typing import Iterable, List

from .arith import is_int_literal
from .bytecode import ARITY, Instruction, Opcode
from .errors import BytecodeFormatError
from .registers import is_register_name

# Tokens never contain whitespace, so a tab can separate operands and an
# empty label name still round-trips.
SEPARATOR = "\t"


_REGISTER_OPERANDS = {
    Opcode.REG_PUT: 1,
    Opcode.REG_GET: 1,
    Opcode.PRINT_REG: 1,
    Opcode.PRINT_REG_CHAR: 1,
    Opcode.JUMP_IF_0: 1,
    Opcode.JUMP_IF_EQUAL: 2,
    Opcode.JUMP_IF_MORE: 2,
}


def _check_operands(opcode: Opcode, args: List[str], lineno: int) -> None:
    for reg in args[: _REGISTER_OPERANDS.get(opcode, 0)]:
        if not is_register_name(reg):
            raise BytecodeFormatError(f"{opcode.name}: bad register {reg!r}", lineno)
    if opcode == Opcode.INPUT and not is_int_literal(args[0]):
        raise BytecodeFormatError(f"INPUT: bad literal {args[0]!r}", lineno)
    if opcode == Opcode.MARK and not (args[0].isascii() and args[0].isdigit()):
        raise BytecodeFormatError(f"MARK: bad index {args[0]!r}", lineno)


class BytecodeWriter:
    @staticmethod
    def dumps(instructions: Iterable[Instruction]) -> str:
        lines = []
        for instr in instructions:
            lines.append(SEPARATOR.join([instr.opcode.name, *map(str, instr.args)]) + "\n")
        return "".join(lines)

    @staticmethod
    def write_to_file(instructions, path):
        with open(path, "w", encoding="utf-8") as f:
            f.write(BytecodeWriter.dumps(instructions))


class BytecodeReader:
    @staticmethod
    def loads(text: str) -> List[Instruction]:
        instructions = []
        for lineno, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue
            opcode_str, *args = line.split(SEPARATOR)
            try:
                opcode = Opcode[opcode_str.strip()]
            except KeyError:
                raise BytecodeFormatError(f"unknown opcode {opcode_str!r}", lineno) from None
            if len(args) != ARITY[opcode]:
                raise BytecodeFormatError(
                    f"{opcode.name} expects {ARITY[opcode]} operand(s), got {len(args)}",
                    lineno,
                )
            _check_operands(opcode, args, lineno)
            instructions.append(Instruction(opcode, args))
        return instructions

    @staticmethod
    def load_from_file(path):
        with open(path, "r", encoding="utf-8") as f:
            return BytecodeReader.loads(f.read())


__all__ = ["BytecodeReader", "BytecodeWriter", "SEPARATOR"]
