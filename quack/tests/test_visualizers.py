import pytest

from quack.compiler import compile_source
from quack.vm import QuackVM
from quack.vm_visualizer_headless import VMVisualizer as HeadlessVisualizer


def make_headless(source, **kwargs):
    return HeadlessVisualizer(QuackVM(compile_source(source)), **kwargs)


def test_headless_steps_until_halt():
    viz = make_headless("1 P Q 2 P")
    for _ in range(5):
        viz.advance()
    assert viz.state.halted
    assert viz.state.step == 3
    assert viz.state.vm.output == "1\n"
    assert viz.message.startswith("Halted")


def test_headless_respects_max_steps():
    viz = make_headless(":l Jl", max_steps=2)
    viz.auto_run = True
    for _ in range(4):
        viz.advance(auto=True)
    assert viz.state.step == 2
    assert not viz.state.halted
    assert not viz.auto_run
    assert "max steps" in viz.message


def test_headless_reset():
    viz = make_headless("7 >a Pa")
    viz.advance()
    viz.advance()
    viz.reset()
    assert viz.state.step == 0
    assert viz.state.vm.pc == 0
    assert viz.state.vm.registers.snapshot() == {}
    assert viz.state.vm.output == ""


def test_headless_lines_show_machine_state():
    viz = make_headless("7 >a 8 :end Pa")
    viz.advance()
    viz.advance()
    viz.advance()
    lines = viz.build_lines()
    texts = [text for text, _ in lines]
    highlighted = [text for text, flag in lines if flag]
    assert highlighted == ["→003 MARK 3 end"]
    assert "  8" in texts
    assert "  a = 7" in texts
    assert "  end@3" in texts
    assert "  <empty>" in texts


def test_headless_empty_program():
    viz = make_headless("")
    assert viz.state.halted
    assert ("<no instructions>", False) in viz.build_lines()


def test_gui_row_helpers():
    pytest.importorskip("pygame")
    from quack.vm_visualizer import instruction_rows, output_rows, register_rows

    vm = QuackVM(compile_source("1 >b P"))
    vm.step()
    rows, highlight = instruction_rows(vm)
    assert rows == ["000: INPUT 1", "001: REG_PUT b", "002: PRINT"]
    assert highlight == 1

    rows, changed = register_rows({"b": 1, "c": 2}, {"c": 2})
    assert rows == ["b: 1", "c: 2"]
    assert changed == {0}
    assert register_rows({}, {}) == (["<all unset>"], set())

    assert output_rows("1\n2\n") == ["1", "2"]
    assert output_rows("") == ["<empty>"]
    assert output_rows(None) == ["<written to external sink>"]


def test_headless_renders_huge_values():
    viz = make_headless("1" + "0" * 5000 + " >a")
    viz.advance()
    texts = [text for text, _ in viz.build_lines()]
    assert "  1" + "0" * 5000 in texts
    viz.advance()
    texts = [text for text, _ in viz.build_lines()]
    assert "  a = 1" + "0" * 5000 in texts


def test_gui_step_bound_uses_vm_step_count():
    pytest.importorskip("pygame")
    from quack.vm_visualizer import VMVisualizer as GuiVisualizer

    # skip __init__ so no display is opened
    viz = GuiVisualizer.__new__(GuiVisualizer)
    viz.vm = QuackVM(compile_source(":l Jl"))
    viz.max_steps = 3
    viz.message = ""
    assert [viz._step_once() for _ in range(5)] == [False, False, False, True, True]
    assert viz.vm.steps == 3
    assert "max steps" in viz.message
    assert not hasattr(viz, "trace_log")

    viz.prev_registers = {}
    viz._reset_vm()
    assert viz.vm.steps == 0
    assert viz._step_once() is False
