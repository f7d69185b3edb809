from typing import *
from script_blocks.version import __version__
from script_blocks.config import add_config_args, config_from_args
from script_blocks.interpreter import Interpreter
from script_blocks.loader import ScriptLoadError, ScriptCycleError
from script_blocks.passes.evaluate import ExitRequest
from script_blocks.cli.common import print_error
import argparse
import os.path
import sys

def parse_args() -> Tuple[argparse.ArgumentParser, argparse.Namespace]:
    ap = argparse.ArgumentParser(
        description = "run a block script"
    )

    ap.add_argument("input", help = "the input script", nargs = "?")
    ap.add_argument("-e", "--echo", action = "store_true", default=False, help = "print the value of a trailing expression in each block")
    add_config_args(ap)

    return ap, ap.parse_args()

def main():
    ap, args = parse_args()

    if args.version:
        print(f"{ap.prog} {__version__}")
        return

    infile = args.input
    if infile is None:
        ap.print_help()
        return

    if not os.path.isfile(infile):
        print(f"error: no such script '{infile}'", file = sys.stderr)
        sys.exit(1)

    interp = Interpreter(config_from_args(args, echo = args.echo))
    try:
        interp.load_predef()
        output = interp.load_script(infile)
    except ExitRequest as e:
        sys.exit(e.code)
    except (ScriptLoadError, ScriptCycleError) as e:
        print_error(e)
        sys.exit(1)

    for line in output.output:
        interp.printer.result(line)

if __name__ == "__main__":
    main()
