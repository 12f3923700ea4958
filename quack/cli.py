from __future__ import annotations

import argparse
import pathlib
import sys
from typing import List, Optional

from .bytecode_io import BytecodeReader, BytecodeWriter
from .compiler import CompiledProgram, compile_source, index_labels
from .errors import BytecodeFormatError
from .sinks import StreamSink
from .vm import QuackVM


def _load_program(args: argparse.Namespace) -> CompiledProgram:
    if args.bytecode_path:
        instructions = BytecodeReader.load_from_file(args.bytecode_path)
        return CompiledProgram(instructions, index_labels(instructions), args.bytecode_path)
    if args.inline is not None:
        return compile_source(args.inline, source_name="<inline>")
    if args.script:
        source = pathlib.Path(args.script).read_text(encoding="utf-8")
        return compile_source(source, source_name=args.script)
    return compile_source(sys.stdin.read())


def _visualize(vm: QuackVM, mode: str, max_steps: Optional[int]) -> int:
    vm_class = None
    gui_exc: Exception | None = None
    if mode == "gui":
        try:
            from .vm_visualizer import VMVisualizer as vm_class
        except ImportError as exc:  # pygame missing
            gui_exc = exc
            mode = "curses"

    if mode == "curses":
        try:
            from .vm_visualizer_headless import VMVisualizer as vm_class
        except ImportError as headless_exc:
            if gui_exc is not None:
                print(
                    f"Visualizer unavailable. GUI error: {gui_exc}; Headless error: {headless_exc}",
                    file=sys.stderr,
                )
            else:
                print(f"Visualizer unavailable: {headless_exc}", file=sys.stderr)
            return 1

    visualizer = vm_class(vm, max_steps=max_steps)
    visualizer.run()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="quack", description="Run Quack programs on the queue VM")
    parser.add_argument("script", nargs="?", help="Path to Quack program (reads stdin when omitted)")
    parser.add_argument("-e", "--execute", dest="inline", help="Execute Quack code string")
    parser.add_argument("-o", "--output", dest="output_path", help="Write program output to this file")
    parser.add_argument("--load-bytecode", dest="bytecode_path", help="Run a bytecode listing instead of source")
    parser.add_argument("--dump-bytecode", dest="dump_path", help="Write the compiled bytecode listing to this file")
    parser.add_argument("--trace", action="store_true", help="Print an execution trace to stderr")
    parser.add_argument("--max-steps", type=int, default=None, help="Stop after this many instructions")
    parser.add_argument(
        "--visualize",
        nargs="?",
        const="gui",
        choices=["gui", "curses"],
        help="Visualize VM execution (optional mode: gui or curses)",
    )
    args = parser.parse_args(argv)

    if args.inline is not None and args.script:
        parser.error("cannot use script path and --execute together")
        return 1
    if args.bytecode_path and (args.inline is not None or args.script):
        parser.error("--load-bytecode cannot be combined with a script or --execute")
        return 1
    if args.visualize and (args.output_path or args.trace):
        parser.error("--visualize cannot be combined with --output or --trace")
        return 1
    if args.max_steps is not None and args.max_steps < 0:
        parser.error("--max-steps must not be negative")
        return 1

    try:
        program = _load_program(args)

        if args.dump_path:
            BytecodeWriter.write_to_file(program.instructions, args.dump_path)

        if args.visualize:
            return _visualize(QuackVM(program), args.visualize, args.max_steps)

        if args.output_path:
            sink = StreamSink.open(args.output_path)
        else:
            sink = StreamSink(sys.stdout)
        vm = QuackVM(program, sink=sink)
        vm.run(debug=args.trace, max_steps=args.max_steps)
        return 0
    except BytecodeFormatError as exc:
        print(f"Invalid bytecode listing: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except Exception as exc:  # pragma: no cover
        if args.trace:
            import traceback

            traceback.print_exc()
        else:
            print(f"quack execution failed: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
