from __future__ import annotations

import curses
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .arith import format_int
from .bytecode import Instruction
from .vm import QuackVM


@dataclass
class _VMState:
    vm: QuackVM
    step: int = 0
    halted: bool = False


class VMVisualizer:
    """Curses-based headless visualizer for QuackVM.

    Controls:
      - SPACE / p : toggle auto-run
      - n / →     : single-step
      - r         : reset VM state
      - q         : quit

    Designed for environments without pygame but with a terminal.
    """

    def __init__(self, vm: QuackVM, max_steps: Optional[int] = None):
        self._program: List[Instruction] = list(vm.instructions)
        self.state = _VMState(vm=vm, halted=vm.finished)
        self.max_steps = max_steps
        self.auto_run = False
        self.message = "Press SPACE to run/pause, n to step, q to quit."

    # ---------------------------- public API ----------------------------- #
    def run(self) -> None:  # pragma: no cover - interactive utility
        try:
            curses.wrapper(self._main)
        finally:
            self.state.vm.close_sink()

    def advance(self, auto: bool = False) -> None:
        if self.state.halted:
            self.auto_run = False
            return
        if self.max_steps is not None and self.state.step >= self.max_steps:
            self.auto_run = False
            self.message = "Reached max steps; press r to reset or q to quit."
            return

        control = self.state.vm.step()
        self.state.step += 1

        if control == "halt" or self.state.vm.finished:
            self.state.halted = True
            self.auto_run = False
            self.message = "Halted. Press r to reset or q to quit."
        elif auto:
            self.message = "Running..."

    def reset(self) -> None:
        self.state.vm.reset()
        self.state = _VMState(vm=self.state.vm, halted=self.state.vm.finished)
        self.auto_run = False
        self.message = "Reset. Press SPACE to run or n to step."

    def build_lines(self, window: int = 10) -> List[Tuple[str, bool]]:
        """Screen content as ``(text, highlighted)`` rows, top to bottom."""
        vm = self.state.vm
        rows: List[Tuple[str, bool]] = [
            ("Quack Instructions (SPACE: run/pause, n: step, r: reset, q: quit)", False),
            ("", False),
        ]
        if self._program:
            pc_index = min(vm.pc, len(self._program) - 1)
            start = max(0, pc_index - window // 2)
            end = min(len(self._program), start + window)
            for idx in range(start, end):
                is_cursor = idx == vm.pc
                prefix = "→" if is_cursor else " "
                rows.append((f"{prefix}{idx:03d} {self._program[idx]}", is_cursor))
        else:
            rows.append(("<no instructions>", False))

        snapshot = vm.snapshot_state()
        rows.append(("", False))
        rows.append(
            (
                f"Step: {self.state.step} | PC: {snapshot.pc} | Auto: {self.auto_run} | Halted: {self.state.halted}",
                False,
            )
        )
        rows.append(("", False))
        rows.append(("Queue (head first):", False))
        rows.append(("  " + (" ".join(map(format_int, snapshot.queue)) or "<empty>"), False))
        rows.append(("Registers:", False))
        if snapshot.registers:
            for name, value in sorted(snapshot.registers.items()):
                rows.append((f"  {name} = {format_int(value)}", False))
        else:
            rows.append(("  <all unset>", False))
        rows.append(("Labels:", False))
        labels = ", ".join(f"{name or '<empty>'}@{index}" for name, index in sorted(snapshot.labels.items()))
        rows.append(("  " + (labels or "<none>"), False))
        rows.append(("Output:", False))
        if snapshot.output is None:
            rows.append(("  <written to external sink>", False))
        else:
            for line in (snapshot.output or "<empty>").splitlines()[-5:]:
                rows.append(("  " + line, False))
        return rows

    # --------------------------- internal helpers ------------------------ #
    def _main(self, stdscr: "curses._CursesWindow") -> None:  # pragma: no cover - interactive utility
        curses.curs_set(0)
        stdscr.nodelay(False)
        while True:
            self._draw(stdscr)
            stdscr.timeout(120 if (self.auto_run and not self.state.halted) else -1)
            key = stdscr.getch()
            if key == -1:
                if self.auto_run and not self.state.halted:
                    self.advance(auto=True)
                continue

            if key in (ord("q"), ord("Q")):
                break
            if key in (ord(" "), ord("p"), ord("P")):
                if self.state.halted:
                    self.message = "Program halted. Press r to reset or q to quit."
                else:
                    self.auto_run = not self.auto_run
                    self.message = "Running..." if self.auto_run else "Paused."
                continue
            if key in (ord("n"), curses.KEY_RIGHT):
                self.advance(auto=False)
                continue
            if key in (ord("r"), ord("R")):
                self.reset()
                continue
            self.message = f"Unhandled key: {key}."

    def _draw(self, stdscr: "curses._CursesWindow") -> None:  # pragma: no cover - interactive utility
        stdscr.erase()
        height, width = stdscr.getmaxyx()
        window = min(10, max(1, height - 16))
        for row, (text, highlighted) in enumerate(self.build_lines(window)):
            if row >= height - 2:
                break
            attr = curses.A_REVERSE if highlighted else curses.A_NORMAL
            self._write(stdscr, row, 0, text, attr)
        self._write(stdscr, height - 2, 0, self.message[: width - 1])
        stdscr.refresh()

    def _write(self, stdscr: "curses._CursesWindow", y: int, x: int, text: str, attr: int = curses.A_NORMAL) -> None:  # pragma: no cover
        height, width = stdscr.getmaxyx()
        if 0 <= y < height:
            try:
                stdscr.addnstr(y, x, text, max(0, width - x - 1), attr)
            except curses.error:
                pass


__all__ = ["VMVisualizer"]
