"""quack package exposes the Quack compiler, VM and runtime helpers."""
from .bytecode import Instruction, Opcode
from .compiler import CompiledProgram, QuackCompiler, compile_source, tokenize
from .errors import BytecodeFormatError
from .labels import LabelTable
from .registers import RegisterBank
from .runtime import run_file, run_program, run_source
from .sinks import BufferSink, StreamSink
from .value_queue import ValueQueue
from .vm import QuackVM

__all__ = [
    "BufferSink",
    "BytecodeFormatError",
    "CompiledProgram",
    "Instruction",
    "LabelTable",
    "Opcode",
    "QuackCompiler",
    "QuackVM",
    "RegisterBank",
    "StreamSink",
    "ValueQueue",
    "compile_source",
    "run_file",
    "run_program",
    "run_source",
    "tokenize",
]
