import pytest

from quack.bytecode import Instruction, Opcode
from quack.compiler import QuackCompiler, compile_source, index_labels, tokenize


def ops(source):
    return [(inst.opcode, inst.args) for inst in compile_source(source).instructions]


def test_tokenize_tracks_lines_and_columns():
    tokens = list(tokenize("1  2\n  P\n\n:end"))
    assert [(t.text, t.line, t.column) for t in tokens] == [
        ("1", 1, 1),
        ("2", 1, 4),
        ("P", 2, 3),
        (":end", 4, 1),
    ]


def test_tokenize_accepts_tabs_and_carriage_returns():
    assert [t.text for t in tokenize("1\t2\r\n+\r\nP")] == ["1", "2", "+", "P"]


@pytest.mark.parametrize(
    "token, expected",
    [
        ("5", (Opcode.INPUT, ["5"])),
        ("-12", (Opcode.INPUT, ["-12"])),
        ("+7", (Opcode.INPUT, ["+7"])),
        ("99999999999999999999", (Opcode.INPUT, ["99999999999999999999"])),
        ("+", (Opcode.PLUS, [])),
        ("-", (Opcode.MINUS, [])),
        ("*", (Opcode.MULT, [])),
        ("/", (Opcode.DIV, [])),
        ("%", (Opcode.MOD, [])),
        (">a", (Opcode.REG_PUT, ["a"])),
        ("<z", (Opcode.REG_GET, ["z"])),
        ("P", (Opcode.PRINT, [])),
        ("Pq", (Opcode.PRINT_REG, ["q"])),
        ("C", (Opcode.PRINT_CHAR, [])),
        ("Cb", (Opcode.PRINT_REG_CHAR, ["b"])),
        ("Jloop", (Opcode.JUMP, ["loop"])),
        ("Zaend", (Opcode.JUMP_IF_0, ["a", "end"])),
        ("Eabsame", (Opcode.JUMP_IF_EQUAL, ["a", "b", "same"])),
        ("Gxybig", (Opcode.JUMP_IF_MORE, ["x", "y", "big"])),
        ("Q", (Opcode.QUIT, [])),
    ],
)
def test_each_command_lowers_to_one_instruction(token, expected):
    assert ops(token) == [expected]


def test_operator_prefix_wins_over_trailing_text():
    # only the first character selects the command
    assert ops("-x +1a Qfoo >abc") == [
        (Opcode.MINUS, []),
        (Opcode.PLUS, []),
        (Opcode.QUIT, []),
        (Opcode.REG_PUT, ["a"]),
    ]


def test_empty_label_names_are_allowed():
    assert ops("J :") == [(Opcode.JUMP, [""]), (Opcode.MARK, ["1", ""])]


@pytest.mark.parametrize("token", ["x", "hello", "#", "p", "5x", "1.5", ">", "<", "PA", "C1", "Z", "ZA", "Ea", "EaB", "G"])
def test_unrecognized_tokens_emit_nothing(token):
    assert ops(token) == []


def test_label_define_binds_index_and_emits_mark():
    program = compile_source("1 :loop P Jloop")
    assert program.labels == {"loop": 1}
    assert program.instructions[1] == Instruction(Opcode.MARK, ["1", "loop"])


def test_last_label_definition_wins_at_compile_time():
    program = compile_source(":x 1 :x 2 :x")
    assert program.labels == {"x": 4}
    marks = [inst.args for inst in program.instructions if inst.opcode == Opcode.MARK]
    assert marks == [["0", "x"], ["2", "x"], ["4", "x"]]


def test_malformed_token_shifts_label_index():
    program = compile_source("bogus :lbl")
    # :lbl is the second token but the first instruction
    assert program.labels == {"lbl": 0}
    assert program.instructions == [Instruction(Opcode.MARK, ["0", "lbl"])]
    assert program.instructions[0].debug.location.token_index == 1


def test_instruction_provenance():
    program = compile_source("1\n  P", source_name="demo.qk")
    debug = program.instructions[1].debug
    assert debug.token == "P"
    assert debug.location.file == "demo.qk"
    assert (debug.location.line, debug.location.column, debug.location.token_index) == (2, 3, 1)


def test_compilation_is_deterministic():
    source = "3 >a :loop Pa <a 1 - >a Zaend junk Jloop :end Q"
    first = compile_source(source)
    second = compile_source(source)
    assert first == second
    assert first.labels == second.labels


def test_compiler_resets_cursor_and_accepts_plain_strings():
    compiler = QuackCompiler()
    program = compiler.compile(["1", "oops", ":a", "P"])
    assert compiler.cursor == 0
    assert program.labels == {"a": 1}
    assert len(program) == 3
    assert program.instructions[0].debug.location.token_index == 0


def test_empty_source_compiles_to_nothing():
    program = compile_source("  \n\t ")
    assert program.instructions == []
    assert len(program.labels) == 0


def test_index_labels_rebuilds_table_from_marks():
    program = compile_source("nope :a 1 :b :a")
    assert index_labels(program.instructions) == program.labels


def test_instruction_str():
    assert str(Instruction(Opcode.PRINT, [])) == "PRINT"
    assert str(Instruction(Opcode.JUMP_IF_EQUAL, ["a", "b", "end"])) == "JUMP_IF_EQUAL a b end"
