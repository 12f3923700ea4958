import sys
from typing import Iterable, Optional, Union

from .arith import QUEUE_MODULO, char_code, format_int, parse_int, trunc_div, trunc_mod
from .bytecode import Instruction, Opcode
from .compiler import CompiledProgram, index_labels
from .registers import RegisterBank
from .sinks import BufferSink
from .value_queue import ValueQueue
from .vm_events import VMStateSnapshot


class QuackVM:
    """Fetch/execute loop over a compiled Quack program.

    Every precondition failure (empty queue, unset register, unknown label)
    leaves the machine untouched and execution continues with the next
    instruction. Division and modulo by zero produce 0.
    """

    def __init__(self, program: Union[CompiledProgram, Iterable[Instruction]], sink=None):
        if isinstance(program, CompiledProgram):
            self.instructions = list(program.instructions)
            self._compiled_labels = program.labels.copy()
        else:
            self.instructions = list(program)
            self._compiled_labels = index_labels(self.instructions)
        self._owns_sink = sink is None
        self.sink = BufferSink() if sink is None else sink
        self._init_state()
        # Opcode dispatch table; every Opcode member has exactly one handler
        self._handlers = {
            Opcode.PLUS: self._op_PLUS,
            Opcode.MINUS: self._op_MINUS,
            Opcode.MULT: self._op_MULT,
            Opcode.DIV: self._op_DIV,
            Opcode.MOD: self._op_MOD,
            Opcode.REG_PUT: self._op_REG_PUT,
            Opcode.REG_GET: self._op_REG_GET,
            Opcode.PRINT: self._op_PRINT,
            Opcode.PRINT_REG: self._op_PRINT_REG,
            Opcode.PRINT_CHAR: self._op_PRINT_CHAR,
            Opcode.PRINT_REG_CHAR: self._op_PRINT_REG_CHAR,
            Opcode.MARK: self._op_MARK,
            Opcode.JUMP: self._op_JUMP,
            Opcode.JUMP_IF_0: self._op_JUMP_IF_0,
            Opcode.JUMP_IF_EQUAL: self._op_JUMP_IF_EQUAL,
            Opcode.JUMP_IF_MORE: self._op_JUMP_IF_MORE,
            Opcode.QUIT: self._op_QUIT,
            Opcode.INPUT: self._op_INPUT,
        }

    def _init_state(self) -> None:
        self.queue = ValueQueue()
        self.registers = RegisterBank()
        self.labels = self._compiled_labels.copy()
        self.pc = 0
        self.steps = 0
        self.halted = False
        self._sink_closed = False

    def reset(self) -> None:
        if self._owns_sink:
            self.sink = BufferSink()
        self._init_state()

    @property
    def finished(self) -> bool:
        return self.halted or self.pc >= len(self.instructions)

    @property
    def output(self) -> Optional[str]:
        getvalue = getattr(self.sink, "getvalue", None)
        return getvalue() if getvalue is not None else None

    def snapshot_state(self) -> VMStateSnapshot:
        return VMStateSnapshot(
            pc=self.pc,
            halted=self.halted,
            steps=self.steps,
            queue=self.queue.snapshot(),
            registers=self.registers.snapshot(),
            labels=self.labels.as_dict(),
            output=self.output,
        )

    def step(self):
        """Executes a single instruction."""
        if self.finished:
            return "halt"

        inst = self.instructions[self.pc]
        control = self._handlers[inst.opcode](inst.args)
        # Jumps leave pc on the label's MARK; the increment moves past it.
        self.pc += 1
        self.steps += 1
        if control == "halt":
            self.halted = True
            return "halt"
        return None

    def run(self, debug=False, max_steps=None):
        executed = 0
        try:
            while not self.finished:
                if max_steps is not None and executed >= max_steps:
                    break
                if debug:
                    self._trace()
                self.step()
                executed += 1
        finally:
            self.close_sink()
        return self.output

    def _trace(self) -> None:
        inst = self.instructions[self.pc]
        queue = ", ".join(map(format_int, self.queue.snapshot()))
        registers = ", ".join(f"{name}={format_int(value)}" for name, value in self.registers.snapshot().items())
        print(f"[PC={self.pc}] EXEC: {inst}", file=sys.stderr)
        print(f"  QUEUE: [{queue}]", file=sys.stderr)
        print(f"  REGISTERS: {{{registers}}}\n", file=sys.stderr)

    def close_sink(self) -> None:
        if self._sink_closed:
            return
        self._sink_closed = True
        self.sink.close()

    # -------------------- Helpers --------------------
    def _pop_operands(self):
        # A lone first operand is consumed even though the op is skipped.
        a = self.queue.dequeue()
        if a is None:
            return None
        b = self.queue.dequeue()
        if b is None:
            return None
        return a, b

    def _jump(self, label: str) -> None:
        target = self.labels.resolve(label)
        if target is not None:
            self.pc = target

    # -------------------- Opcode handlers --------------------
    # Arithmetic
    def _op_PLUS(self, args):
        operands = self._pop_operands()
        if operands is None:
            return
        a, b = operands
        self.queue.enqueue(a + trunc_mod(b, QUEUE_MODULO))

    def _op_MINUS(self, args):
        operands = self._pop_operands()
        if operands is None:
            return
        a, b = operands
        self.queue.enqueue(a - trunc_mod(b, QUEUE_MODULO))

    def _op_MULT(self, args):
        operands = self._pop_operands()
        if operands is None:
            return
        a, b = operands
        self.queue.enqueue(a * trunc_mod(b, QUEUE_MODULO))

    def _op_DIV(self, args):
        operands = self._pop_operands()
        if operands is None:
            return
        a, b = operands
        self.queue.enqueue(trunc_div(a, b))

    def _op_MOD(self, args):
        operands = self._pop_operands()
        if operands is None:
            return
        a, b = operands
        self.queue.enqueue(trunc_mod(a, b))

    # Queue / register transfer
    def _op_REG_PUT(self, args):
        value = self.queue.dequeue()
        if value is None:
            return
        self.registers.store(args[0], value)

    def _op_REG_GET(self, args):
        value = self.registers.load(args[0])
        if value is None:
            return
        self.queue.enqueue(value)

    def _op_INPUT(self, args):
        self.queue.enqueue(parse_int(args[0]))

    # Output
    def _op_PRINT(self, args):
        value = self.queue.dequeue()
        if value is None:
            return
        self.sink.write(format_int(value) + "\n")

    def _op_PRINT_REG(self, args):
        value = self.registers.load(args[0])
        if value is None:
            return
        self.sink.write(format_int(value) + "\n")

    def _op_PRINT_CHAR(self, args):
        value = self.queue.dequeue()
        if value is None:
            return
        self.sink.write(chr(char_code(value)))

    def _op_PRINT_REG_CHAR(self, args):
        value = self.registers.load(args[0])
        if value is None:
            return
        self.sink.write(chr(char_code(value)))

    # Control flow
    def _op_MARK(self, args):
        self.labels.bind(args[1], int(args[0]))

    def _op_JUMP(self, args):
        self._jump(args[0])

    def _op_JUMP_IF_0(self, args):
        reg, label = args
        if self.registers.load(reg) == 0:
            self._jump(label)

    def _op_JUMP_IF_EQUAL(self, args):
        left, right, label = args
        # Compares slot states, so two unset registers are equal.
        if self.registers.load(left) == self.registers.load(right):
            self._jump(label)

    def _op_JUMP_IF_MORE(self, args):
        left, right, label = args
        a = self.registers.load(left)
        b = self.registers.load(right)
        if a is None or b is None:
            return
        if a > b:
            self._jump(label)

    def _op_QUIT(self, args):
        return "halt"


__all__ = ["QuackVM"]
