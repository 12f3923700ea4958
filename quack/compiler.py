from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Union

from .arith import is_int_literal
from .bytecode import Instruction, InstructionDebug, Opcode, SourceLocation
from .labels import LabelTable
from .registers import is_register_name

_TOKEN_RE = re.compile(r"\S+")

_ARITHMETIC = {
    "+": Opcode.PLUS,
    "-": Opcode.MINUS,
    "*": Opcode.MULT,
    "/": Opcode.DIV,
    "%": Opcode.MOD,
}


@dataclass(frozen=True)
class Token:
    text: str
    line: int
    column: int


def tokenize(source: str) -> Iterator[Token]:
    """Split program text on any run of whitespace, tracking 1-based positions."""
    line = 1
    line_start = 0
    scanned = 0
    for match in _TOKEN_RE.finditer(source):
        start = match.start()
        newlines = source.count("\n", scanned, start)
        if newlines:
            line += newlines
            line_start = source.rfind("\n", scanned, start) + 1
        scanned = start
        yield Token(match.group(), line, start - line_start + 1)


@dataclass
class CompiledProgram:
    instructions: List[Instruction]
    labels: LabelTable = field(default_factory=LabelTable)
    source_name: str = field(default="<stdin>", compare=False)

    def __len__(self) -> int:
        return len(self.instructions)


class QuackCompiler:
    """Single left-to-right pass lowering each token into at most one instruction.

    Tokens that match no command are consumed without emitting anything, so
    the token cursor and the instruction index drift apart. Labels always
    record the instruction index, i.e. the position of their MARK.
    """

    def __init__(self, source_name: str = "<stdin>"):
        self.source_name = source_name
        self.instructions: List[Instruction] = []
        self.labels = LabelTable()
        self.cursor = 0
        self._current: Optional[Token] = None

    def emit(self, opcode: Opcode, *args: str) -> None:
        debug = None
        if self._current is not None:
            location = SourceLocation(
                file=self.source_name,
                line=self._current.line,
                column=self._current.column,
                token_index=self.cursor,
            )
            debug = InstructionDebug(location=location, token=self._current.text)
        self.instructions.append(Instruction(opcode, list(args), debug))

    def compile(self, tokens: Iterable[Union[Token, str]]) -> CompiledProgram:
        for token in tokens:
            if isinstance(token, str):
                token = Token(token, 0, 0)
            self._current = token
            self.lower(token.text)
            self.cursor += 1
        self._current = None
        self.cursor = 0
        return CompiledProgram(self.instructions, self.labels, self.source_name)

    def lower(self, text: str) -> None:
        if not text:
            return
        if is_int_literal(text):
            self.emit(Opcode.INPUT, text)
            return

        head = text[0]
        if head in _ARITHMETIC:
            self.emit(_ARITHMETIC[head])
        elif head == ">":
            self._emit_register_op(Opcode.REG_PUT, text)
        elif head == "<":
            self._emit_register_op(Opcode.REG_GET, text)
        elif head == "P":
            if len(text) == 1:
                self.emit(Opcode.PRINT)
            else:
                self._emit_register_op(Opcode.PRINT_REG, text)
        elif head == "C":
            if len(text) == 1:
                self.emit(Opcode.PRINT_CHAR)
            else:
                self._emit_register_op(Opcode.PRINT_REG_CHAR, text)
        elif head == ":":
            name = text[1:]
            index = len(self.instructions)
            self.labels.bind(name, index)
            self.emit(Opcode.MARK, str(index), name)
        elif head == "J":
            self.emit(Opcode.JUMP, text[1:])
        elif head == "Z":
            reg = text[1:2]
            if is_register_name(reg):
                self.emit(Opcode.JUMP_IF_0, reg, text[2:])
        elif head == "E":
            self._emit_compare_jump(Opcode.JUMP_IF_EQUAL, text)
        elif head == "G":
            self._emit_compare_jump(Opcode.JUMP_IF_MORE, text)
        elif head == "Q":
            self.emit(Opcode.QUIT)
        # anything else is dropped

    def _emit_register_op(self, opcode: Opcode, text: str) -> None:
        reg = text[1:2]
        if is_register_name(reg):
            self.emit(opcode, reg)

    def _emit_compare_jump(self, opcode: Opcode, text: str) -> None:
        left, right = text[1:2], text[2:3]
        if is_register_name(left) and is_register_name(right):
            self.emit(opcode, left, right, text[3:])


def compile_source(source: str, *, source_name: str = "<stdin>") -> CompiledProgram:
    return QuackCompiler(source_name=source_name).compile(tokenize(source))


def index_labels(instructions: Iterable[Instruction]) -> LabelTable:
    """Rebuild the compile-time label table from MARK instructions."""
    labels = LabelTable()
    for inst in instructions:
        if inst.opcode == Opcode.MARK:
            labels.bind(inst.args[1], int(inst.args[0]))
    return labels


__all__ = [
    "CompiledProgram",
    "QuackCompiler",
    "Token",
    "compile_source",
    "index_labels",
    "tokenize",
]
