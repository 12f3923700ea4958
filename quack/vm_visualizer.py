from typing import Dict, List, Optional, Set, Tuple

import pygame

from .arith import format_int
from .vm import QuackVM
from .vm_events import VMStateSnapshot

# Constants
SCREEN_WIDTH = 1280
SCREEN_HEIGHT = 800
BACKGROUND_COLOR = (240, 240, 240)
FONT_COLOR = (10, 10, 10)
PC_COLOR = (200, 255, 200)
CHANGE_COLOR = (255, 220, 200)
FONT_SIZE = 18
LINE_HEIGHT = 22
MARGIN = 20


def instruction_rows(vm: QuackVM) -> Tuple[List[str], int]:
    """Numbered instruction listing plus the row index of the program counter."""
    rows = [f"{i:03d}: {inst}" for i, inst in enumerate(vm.instructions)]
    highlight = vm.pc if vm.pc < len(rows) else -1
    return rows, highlight


def register_rows(registers: Dict[str, int], previous: Dict[str, int]) -> Tuple[List[str], Set[int]]:
    """Set registers as ``name: value`` rows and the indices that changed."""
    rows: List[str] = []
    changed: Set[int] = set()
    for idx, (name, value) in enumerate(sorted(registers.items())):
        rows.append(f"{name}: {format_int(value)}")
        if previous.get(name) != value:
            changed.add(idx)
    return rows or ["<all unset>"], changed


def output_rows(output: Optional[str]) -> List[str]:
    if output is None:
        return ["<written to external sink>"]
    return output.splitlines() or ["<empty>"]


class VMVisualizer:
    def __init__(self, vm: QuackVM, max_steps: Optional[int] = None):
        self.vm = vm
        self.max_steps = max_steps
        pygame.init()
        self.screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
        pygame.display.set_caption("Quack VM Visualizer")
        self.font = pygame.font.SysFont("monospace", FONT_SIZE)
        self.clock = pygame.time.Clock()
        self.running = True
        self.paused = True
        self.prev_registers: Dict[str, int] = {}
        self.message = "Press P to run, SPACE to step, R to reset, Q to quit."
        self._latest_snapshot: Optional[VMStateSnapshot] = None

    def _draw_text(self, text: str, x: int, y: int, color=FONT_COLOR, background=None):
        surface = self.font.render(text, True, color, background)
        self.screen.blit(surface, (x, y))

    def _draw_section(
        self,
        title: str,
        data: List[str],
        x: int,
        y: int,
        width: int,
        height: int,
        highlight_index: int = -1,
        secondary_highlights: Set[int] | None = None,
    ) -> None:
        pygame.draw.rect(self.screen, (220, 220, 220), (x, y, width, height), border_radius=5)
        pygame.draw.rect(self.screen, (180, 180, 180), (x, y, width, 30), border_radius=5)
        self._draw_text(title, x + 10, y + 5, color=(50, 50, 50))

        visible = max(1, (height - 40) // LINE_HEIGHT)
        # keep the highlighted row on screen
        first = 0
        if highlight_index >= visible:
            first = highlight_index - visible // 2
        start_y = y + 40
        for row, i in enumerate(range(first, min(len(data), first + visible))):
            bg = None
            if i == highlight_index:
                bg = PC_COLOR
            elif secondary_highlights and i in secondary_highlights:
                bg = CHANGE_COLOR
            self._draw_text(data[i], x + 10, start_y + row * LINE_HEIGHT, background=bg)

    def _draw_ui(self) -> None:
        self.screen.fill(BACKGROUND_COLOR)
        snapshot = self.vm.snapshot_state()
        self._latest_snapshot = snapshot

        instructions, highlight = instruction_rows(self.vm)
        self._draw_section(
            "Instructions",
            instructions or ["<no instructions>"],
            MARGIN,
            MARGIN,
            520,
            SCREEN_HEIGHT - 2 * MARGIN - 60,
            highlight_index=highlight,
        )

        right_x = 560
        right_width = SCREEN_WIDTH - right_x - MARGIN
        queue_rows = [" ".join(map(format_int, snapshot.queue))] if snapshot.queue else ["<empty>"]
        self._draw_section("Queue (head first)", queue_rows, right_x, MARGIN, right_width, 80)

        registers, changed = register_rows(dict(snapshot.registers), self.prev_registers)
        y = MARGIN + 100
        self._draw_section(
            "Registers",
            registers,
            right_x,
            y,
            right_width // 2 - 10,
            260,
            secondary_highlights=changed,
        )
        label_rows = [f"{name or '<empty>'} -> {index}" for name, index in sorted(snapshot.labels.items())]
        self._draw_section(
            "Labels",
            label_rows or ["<none>"],
            right_x + right_width // 2 + 10,
            y,
            right_width // 2 - 10,
            260,
        )

        y += 280
        output_height = SCREEN_HEIGHT - y - MARGIN - 60
        self._draw_section("Output", output_rows(snapshot.output), right_x, y, right_width, output_height)

        status = "HALTED" if self.vm.finished else ("PAUSED" if self.paused else "RUNNING")
        msg_y = SCREEN_HEIGHT - MARGIN - 40
        self._draw_text(f"Msg: {self.message}", MARGIN, msg_y, color=(100, 100, 100))
        self._draw_text(
            f"Status: {status} | Steps: {snapshot.steps} | [SPACE] step [P] run/pause [R] reset [Q] quit",
            MARGIN,
            msg_y + LINE_HEIGHT,
            color=(100, 100, 100),
        )
        pygame.display.flip()
        # Update reference for diff detection after drawing
        self.prev_registers = dict(snapshot.registers)

    def _handle_events(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_q:
                    self.running = False
                elif event.key == pygame.K_SPACE:
                    self.paused = True
                    self._step_once()
                elif event.key == pygame.K_p:
                    self.paused = not self.paused
                    self.message = "Running..." if not self.paused else "Paused."
                elif event.key == pygame.K_r:
                    self._reset_vm()

    def run(self) -> None:
        try:
            while self.running:
                self._handle_events()
                if not self.paused and self._step_once():
                    self.paused = True
                self._draw_ui()
                self.clock.tick(10)  # Limit frame rate
        finally:
            self.vm.close_sink()
            pygame.quit()

    def _step_once(self) -> bool:
        if self.vm.finished:
            self.message = "Program already complete."
            return True
        if self.max_steps is not None and self.vm.steps >= self.max_steps:
            self.message = "Reached max steps; press R to reset."
            return True
        control = self.vm.step()
        if control == "halt" or self.vm.finished:
            self.message = "Execution halted."
            return True
        return False

    def _reset_vm(self) -> None:
        self.vm.reset()
        self.prev_registers = {}
        self.paused = True
        self.message = "Reset. Press P to run or SPACE to step."


__all__ = ["VMVisualizer", "instruction_rows", "output_rows", "register_rows"]
