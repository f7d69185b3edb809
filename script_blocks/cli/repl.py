from typing import *
from script_blocks.version import __version__
from script_blocks.config import add_config_args, config_from_args
from script_blocks.interpreter import CellError, Interpreter
from script_blocks.loader import HookResolutionError, ScriptLoadError, ScriptCycleError
from script_blocks.parse.hooks import HookParseError
from script_blocks.parse.splitter import SplitError
from script_blocks.passes.compile import CompilationError
from script_blocks.passes.evaluate import EvaluationError, ExitRequest, Interrupted
from script_blocks.cli.common import print_error
import argparse
import codeop
import sys

CELL_ERRORS = (
    CellError, SplitError, HookParseError, HookResolutionError,
    CompilationError, EvaluationError, Interrupted,
)

def parse_args() -> Tuple[argparse.ArgumentParser, argparse.Namespace]:
    ap = argparse.ArgumentParser(
        description = "evaluate cells interactively"
    )

    add_config_args(ap)

    return ap, ap.parse_args()

def is_complete(code: str) -> bool:
    if code.lstrip().startswith("%"):
        return True
    try:
        return codeop.compile_command(code, "<input>", "single") is not None
    except (SyntaxError, ValueError, OverflowError):
        # let the cell report it
        return True

def read_cell(readline: Callable[[str], str]) -> str:
    code = readline("@ ")
    while not is_complete(code):
        code += "\n" + readline("  ")
    return code

def main():
    ap, args = parse_args()

    if args.version:
        print(f"{ap.prog} {__version__}")
        return

    interp = Interpreter(config_from_args(args))
    try:
        interp.load_predef()
    except (ScriptLoadError, ScriptCycleError) as e:
        print_error(e)
        sys.exit(1)

    while True:
        try:
            code = read_cell(input)
        except EOFError:
            print(file = sys.stderr)
            return
        except KeyboardInterrupt:
            print(file = sys.stderr)
            continue

        try:
            result = interp.run_cell(code)
        except ExitRequest as e:
            sys.exit(e.code)
        except CELL_ERRORS as e:
            print_error(e)
            continue

        if result is not None:
            for line in result.output:
                interp.printer.result(line)

if __name__ == "__main__":
    main()
