from script_blocks.version import __version__
from script_blocks.cli import meta, repl, run, split
from typing import *
import builtins
import pytest

@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path

def invoke(monkeypatch, main: Callable[[], None], *argv: str):
    monkeypatch.setattr("sys.argv", list(argv))
    main()

def feed_input(monkeypatch, lines: List[str]):
    pending = iter(lines)
    def fake_input(prompt: str = "") -> str:
        try:
            return next(pending)
        except StopIteration:
            raise EOFError from None
    monkeypatch.setattr(builtins, "input", fake_input)

def test_run_echoes_block_results(workdir, monkeypatch, capsys):
    (workdir / "main.py").write_text("1 + 1\n@\nx = 3\n@\nx * 2\n")
    invoke(monkeypatch, run.main, "sb-run", "-q", "-e", "--no-default-script-path", "main.py")

    captured = capsys.readouterr()
    assert captured.out == "2\n6\n"
    assert captured.err == ""

def test_run_reports_progress(workdir, monkeypatch, capsys):
    (workdir / "main.py").write_text("a = 1\n@\nb = a\n")
    invoke(monkeypatch, run.main, "sb-run", "--no-default-script-path", "main.py")

    assert capsys.readouterr().err.splitlines() == ["info: Compiling main.py", "info: Compiling main.py #2"]

def test_run_failure_exits_with_error(workdir, monkeypatch, capsys):
    (workdir / "main.py").write_text("a = 1\n@\nb = missing\n")
    with pytest.raises(SystemExit) as info:
        invoke(monkeypatch, run.main, "sb-run", "-q", "--no-default-script-path", "main.py")

    assert info.value.code == 1
    err = capsys.readouterr().err
    assert "error: compile error" in err
    assert "name 'missing' is not defined" in err
    assert "1 block(s) of main.py ran before the failure" in err

def test_run_passes_exit_codes_through(workdir, monkeypatch):
    (workdir / "main.py").write_text("raise SystemExit(4)\n")
    with pytest.raises(SystemExit) as info:
        invoke(monkeypatch, run.main, "sb-run", "-q", "--no-default-script-path", "main.py")
    assert info.value.code == 4

def test_run_missing_script(workdir, monkeypatch, capsys):
    with pytest.raises(SystemExit) as info:
        invoke(monkeypatch, run.main, "sb-run", "-q", "nowhere.py")
    assert info.value.code == 1
    assert "no such script 'nowhere.py'" in capsys.readouterr().err

def test_run_with_script_path_and_predef(workdir, monkeypatch, capsys):
    (workdir / "lib").mkdir()
    (workdir / "lib" / "consts.py").write_text("ANSWER = 42\n")
    (workdir / "predef.py").write_text("GREETING = 'hi'\n")
    (workdir / "main.py").write_text("%load consts\n(GREETING, ANSWER)\n")
    invoke(monkeypatch, run.main, "sb-run", "-q", "-e", "--no-default-script-path", "-P", str(workdir / "lib"), "--predef", "predef.py", "main.py")

    assert capsys.readouterr().out == "('hi', 42)\n"

def test_split_writes_blocks(workdir, monkeypatch):
    (workdir / "main.py").write_text("a = 1\n@\n%load lib.py\nb = 2\n")
    invoke(monkeypatch, split.main, "sb-split", "main.py", "-o", "blocks.txt")

    text = (workdir / "blocks.txt").read_text()
    assert "# block 1 (after line 0)" in text
    assert "# block 2 (after line 2)" in text
    assert "%load lib.py" in text
    assert "b = 2" in text

def test_split_error(workdir, monkeypatch, capsys):
    (workdir / "main.py").write_text("a = (\n")
    with pytest.raises(SystemExit) as info:
        invoke(monkeypatch, split.main, "sb-split", "main.py", "-o", "blocks.txt")
    assert info.value.code == 1
    assert "error: split error" in capsys.readouterr().err

def test_meta_writes_ids_and_exports(workdir, monkeypatch):
    (workdir / "main.py").write_text("a = 1\n@\nclass P:\n    pass\n")
    invoke(monkeypatch, meta.main, "sb-meta", "-q", "--no-default-script-path", "main.py", "-o", "meta.txt")

    lines = (workdir / "meta.txt").read_text().splitlines()
    assert lines[0].startswith("scripts.main code=")
    assert lines[1] == "  export a = scripts.main.a"
    assert lines[2].startswith("scripts.main2 code=")
    assert lines[3] == "  export type P = scripts.main2.P"

def test_meta_prints_partial_metadata_on_failure(workdir, monkeypatch, capsys):
    (workdir / "main.py").write_text("a = 1\n@\nraise RuntimeError('no')\n")
    with pytest.raises(SystemExit) as info:
        invoke(monkeypatch, meta.main, "sb-meta", "-q", "--no-default-script-path", "main.py", "-o", "meta.txt")

    assert info.value.code == 1
    err = capsys.readouterr().err
    assert "RuntimeError while evaluating scripts.main2: no" in err
    assert "  export a = scripts.main.a" in err

def test_repl_session(workdir, monkeypatch, capsys):
    feed_input(monkeypatch, ["def f():", "    a = 20", "    return a + 1", "", "f() * 2", "nope", "f() + 1;"])
    invoke(monkeypatch, repl.main, "sb-repl", "-q", "--no-default-script-path")

    captured = capsys.readouterr()
    assert captured.out == "res1: int = 42\n"
    assert "name 'nope' is not defined" in captured.err

def test_repl_exit(workdir, monkeypatch):
    feed_input(monkeypatch, ["raise SystemExit(7)", "1"])
    with pytest.raises(SystemExit) as info:
        invoke(monkeypatch, repl.main, "sb-repl", "-q", "--no-default-script-path")
    assert info.value.code == 7

@pytest.mark.parametrize("main, prog", [
    (run.main, "sb-run"),
    (split.main, "sb-split"),
    (meta.main, "sb-meta"),
    (repl.main, "sb-repl"),
])
def test_version(monkeypatch, capsys, main, prog):
    invoke(monkeypatch, main, prog, "--version")
    assert capsys.readouterr().out == f"{prog} {__version__}\n"

@pytest.mark.parametrize("code, complete", [
    ("x = 1", True),
    ("def f():", False),
    ("def f():\n    return 1", False),
    ("def f():\n    return 1\n", True),
    ("def f():\n    a = 1\n    return a", False),
    ("class A:\n    x = 1", False),
    ("if True:\n    pass\nelse:", False),
    ("(1,", False),
    ("%load lib.py", True),
    ("x = = 1", True),
])
def test_is_complete(code, complete):
    assert repl.is_complete(code) == complete

@pytest.mark.parametrize("main, prog", [
    (split.main, "sb-split"),
    (meta.main, "sb-meta"),
])
def test_missing_script(workdir, monkeypatch, capsys, main, prog):
    with pytest.raises(SystemExit) as info:
        invoke(monkeypatch, main, prog, "nowhere.py", "-o", "out.txt")
    assert info.value.code == 1
    assert "error: no such script 'nowhere.py'" in capsys.readouterr().err

@pytest.mark.parametrize("main, argv", [
    (run.main, ["sb-run", "-q", "main.py"]),
    (split.main, ["sb-split", "main.py", "-o", "out.txt"]),
    (meta.main, ["sb-meta", "-q", "main.py", "-o", "out.txt"]),
])
def test_undecodable_script(workdir, monkeypatch, capsys, main, argv: List[str]):
    (workdir / "main.py").write_bytes(b"x = '\xff'\n")
    with pytest.raises(SystemExit) as info:
        invoke(monkeypatch, main, *argv)
    assert info.value.code == 1
    assert "could not read script" in capsys.readouterr().err
