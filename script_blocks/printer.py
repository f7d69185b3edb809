from __future__ import annotations
from dataclasses import dataclass
from typing import *
import sys

@dataclass
class Printer:
    out: Optional[TextIO] = None
    err: Optional[TextIO] = None
    verbose: bool = True

    def info(self, msg: str):
        if self.verbose:
            print(f"info: {msg}", file = self.err or sys.stderr)

    def warning(self, msg: str):
        print(f"warning: {msg}", file = self.err or sys.stderr)

    def result(self, line: str):
        print(line, file = self.out or sys.stdout)
