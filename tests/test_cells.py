from script_blocks.ast.imports import ImportSet
from script_blocks.ast.path import WrapperPath
from script_blocks.config import Config
from script_blocks.interpreter import CellError, Interpreter
from script_blocks.passes.compile import CompilationError
from script_blocks.passes.evaluate import EvaluationError, ExitRequest, Interrupted
from script_blocks.passes.preprocess import preprocess
from script_blocks.printer import Printer
from typing import *
import pytest

@pytest.fixture
def interp(tmp_path) -> Interpreter:
    return Interpreter(Config(wd = str(tmp_path), verbose = False))

def test_results_are_named_by_line(interp):
    assert interp.run_cell("x = 1").output == []
    assert interp.run_cell("x + 41").output == ["res1: int = 42"]
    assert interp.run_cell("res1 * 2").output == ["res2: int = 84"]

def test_cells_see_earlier_cells(interp):
    interp.run_cell("def double(n):\n    return n * 2")
    interp.run_cell("class Box:\n    pass")
    assert interp.run_cell("double(4)").output == ["res2: int = 8"]
    assert "Box" in interp.frame.imports

def test_silent_cells_still_bind_results(interp):
    assert interp.run_cell("6 * 7;").output == []
    assert interp.run_cell("res0").output == ["res1: int = 42"]

def test_none_is_not_echoed(interp):
    assert interp.run_cell("len('ab')").output == ["res0: int = 2"]
    assert interp.run_cell("None").output == []

def test_undefined_names_do_not_advance_the_line(interp):
    with pytest.raises(CompilationError, match="name 'nope' is not defined"):
        interp.run_cell("nope + 1")
    assert interp.frame.line == 0
    assert interp.run_cell("1").output == ["res0: int = 1"]

def test_runtime_errors(interp):
    with pytest.raises(EvaluationError, match="ZeroDivisionError"):
        interp.run_cell("1 / 0")

def test_keyboard_interrupt_becomes_interrupted(interp):
    with pytest.raises(Interrupted):
        interp.run_cell("raise KeyboardInterrupt")

def test_system_exit_becomes_exit_request(interp):
    with pytest.raises(ExitRequest) as info:
        interp.run_cell("raise SystemExit(2)")
    assert info.value.code == 2

def test_separators_are_rejected(interp):
    with pytest.raises(CellError):
        interp.run_cell("a = 1\n@\nb = 2")

def test_empty_cells_are_skipped(interp):
    assert interp.run_cell("") is None
    assert interp.run_cell("# just a comment") is None
    assert interp.frame.line == 0

def test_load_hook_in_cell(interp, tmp_path):
    (tmp_path / "lib.py").write_text("helper = 41\n")
    assert interp.run_cell("%load lib.py\nhelper + 1").output == ["res0: int = 42"]
    assert interp.run_cell("helper").output == ["res1: int = 41"]

def test_bridge_load_in_cell(interp, tmp_path):
    (tmp_path / "lib.py").write_text("helper = 41\n")
    interp.run_cell("interp.load_script('lib.py');")
    assert interp.run_cell("helper + 1").output == ["res1: int = 42"]

def test_bridge_load_returns_exports(interp, tmp_path):
    (tmp_path / "lib.py").write_text("a = 1\n@\nb = 2\n")
    interp.run_cell("names = sorted(interp.load_script('lib.py').names())")
    assert interp.run_cell("names").output == ["res1: list = ['b']"]

def test_evaluate_cell_tags_are_deterministic(interp):
    processed = preprocess(["value = 3\nvalue * 3\n"], "", WrapperPath(("repl",)), "cmd9", ImportSet(), 0, echo = True, result_name = "res9")
    printer = Printer(verbose = False)

    first = interp.evaluate_cell(processed, printer, "<cmd9>")
    second = interp.evaluate_cell(processed, printer, "<cmd9>")

    assert first.output == ["res9: int = 9"]
    assert first.tag == second.tag
    assert first.evaluated.imports.names() == {"value", "res9"}
    assert str(first.evaluated.wrapper) == "repl.cmd9"

def test_evaluate_cell_increments_line(interp):
    processed = preprocess(["1\n"], "", WrapperPath(("repl",)), "cmd0", ImportSet(), 0, echo = True, result_name = "res0")
    interp.evaluate_cell(processed, Printer(verbose = False), "<cmd0>", increment_line = interp.frame.increment_line)
    assert interp.frame.line == 1
