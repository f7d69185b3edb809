from typing import *
from script_blocks.version import __version__
from script_blocks.parse.splitter import SplitError, split_script
from script_blocks.pretty.script import pretty_blocks
import argparse
import os.path
import sys

def parse_args() -> Tuple[argparse.ArgumentParser, argparse.Namespace]:
    ap = argparse.ArgumentParser(
        description = "show the blocks and statements of a block script"
    )

    ap.add_argument("input", help = "the input script", nargs = "?")
    ap.add_argument("-o", "--output", help = "the output file")
    ap.add_argument("-v", "--version", action = "store_true", default=False, help = "print current version and exit")

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

    try:
        with open(infile, "r", encoding = "utf-8") as f:
            code = f.read()
    except (OSError, UnicodeDecodeError) as e:
        print(f"error: could not read script '{infile}': {e}", file = sys.stderr)
        sys.exit(1)

    try:
        blocks = split_script(code, infile)
    except SplitError as e:
        print(f"error: {e}", file = sys.stderr)
        sys.exit(1)

    outfile = args.output or "-"
    with sys.stdout if outfile == "-" else open(outfile, "w") as f:
        pretty_blocks(blocks, file=f)

if __name__ == "__main__":
    main()
