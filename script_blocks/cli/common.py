from typing import *
from ..loader import ScriptLoadError
import sys

def print_error(e: BaseException):
    print(f"error: {e}", file = sys.stderr)
    cause = e.__cause__
    while cause is not None:
        print(f"info: caused by {type(cause).__name__}: {cause}", file = sys.stderr)
        cause = cause.__cause__
    if isinstance(e, ScriptLoadError) and len(e.metadata) > 0:
        print(f"info: {len(e.metadata)} block(s) of {e.source.printable_path} ran before the failure", file = sys.stderr)
