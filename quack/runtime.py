from __future__ import annotations

import pathlib
from typing import Optional

from .compiler import CompiledProgram, compile_source
from .sinks import BufferSink, StreamSink
from .vm import QuackVM


def run_program(
    program: CompiledProgram,
    sink=None,
    *,
    max_steps: Optional[int] = None,
    debug: bool = False,
) -> QuackVM:
    vm = QuackVM(program, sink=sink)
    vm.run(debug=debug, max_steps=max_steps)
    return vm


def run_source(
    source: str,
    *,
    source_name: str = "<stdin>",
    max_steps: Optional[int] = None,
    debug: bool = False,
) -> str:
    """Compile and run `source`, returning everything the program printed."""
    sink = BufferSink()
    run_program(
        compile_source(source, source_name=source_name),
        sink,
        max_steps=max_steps,
        debug=debug,
    )
    return sink.getvalue()


def run_file(
    input_path,
    output_path,
    *,
    max_steps: Optional[int] = None,
    debug: bool = False,
) -> QuackVM:
    """Run the program in `input_path`, writing its output to `output_path`."""
    path = pathlib.Path(input_path)
    program = compile_source(path.read_text(encoding="utf-8"), source_name=str(path))
    return run_program(
        program,
        StreamSink.open(str(output_path)),
        max_steps=max_steps,
        debug=debug,
    )


__all__ = ["run_file", "run_program", "run_source"]
