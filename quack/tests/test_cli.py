import io

import pytest

from quack import cli


def test_inline_program_prints_to_stdout(capsys):
    assert cli.main(["-e", "5 10 + P"]) == 0
    assert capsys.readouterr().out == "15\n"


def test_script_path(tmp_path, capsys):
    script = tmp_path / "count.qk"
    script.write_text("3 >a :loop Pa <a 1 - >a Zaend Jloop :end\n", encoding="utf-8")
    assert cli.main([str(script)]) == 0
    assert capsys.readouterr().out == "3\n2\n1\n"


def test_reads_stdin_when_no_source(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("72 C 105 C"))
    assert cli.main([]) == 0
    assert capsys.readouterr().out == "Hi"


def test_output_file(tmp_path, capsys):
    out = tmp_path / "output.txt"
    assert cli.main(["-e", "1 P 2 P", "-o", str(out)]) == 0
    assert out.read_text(encoding="utf-8") == "1\n2\n"
    assert capsys.readouterr().out == ""


def test_dump_and_load_bytecode(tmp_path, capsys):
    listing = tmp_path / "prog.qbc"
    assert cli.main(["-e", "Jskip 1 P :skip 2 P", "--dump-bytecode", str(listing)]) == 0
    assert capsys.readouterr().out == "2\n"
    assert listing.read_text(encoding="utf-8").startswith("JUMP\tskip\n")

    assert cli.main(["--load-bytecode", str(listing)]) == 0
    assert capsys.readouterr().out == "2\n"


def test_bad_bytecode_listing(tmp_path, capsys):
    listing = tmp_path / "bad.qbc"
    listing.write_text("FLY\taway\n", encoding="utf-8")
    assert cli.main(["--load-bytecode", str(listing)]) == 1
    assert "Invalid bytecode listing" in capsys.readouterr().err


def test_missing_script(tmp_path, capsys):
    assert cli.main([str(tmp_path / "missing.qk")]) == 1
    assert "missing.qk" in capsys.readouterr().err


def test_script_and_inline_conflict(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(tmp_path / "a.qk"), "-e", "1 P"])
    assert excinfo.value.code == 2


def test_max_steps_bounds_infinite_loop(capsys):
    assert cli.main(["-e", ":loop 1 P Jloop", "--max-steps", "7"]) == 0
    # MARK runs once, then each pass is INPUT, PRINT, JUMP
    assert capsys.readouterr().out == "1\n1\n"


def test_trace_goes_to_stderr(capsys):
    assert cli.main(["-e", "1 P", "--trace"]) == 0
    captured = capsys.readouterr()
    assert captured.out == "1\n"
    assert "[PC=0] EXEC: INPUT 1" in captured.err


@pytest.mark.parametrize("extra", [["-o", "out.txt"], ["--trace"]])
def test_visualize_rejects_output_and_trace(extra):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["-e", "1 P", "--visualize", "curses", *extra])
    assert excinfo.value.code == 2


def test_huge_literal_round_trips_through_cli(capsys):
    literal = "9" * 5000
    assert cli.main(["-e", literal + " P"]) == 0
    assert capsys.readouterr().out == literal + "\n"
