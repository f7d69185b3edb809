from __future__ import annotations
from dataclasses import dataclass
from typing import *
from ..ast.path import WrapperPath
from ..ast.imports import ImportSet

class SkipBlock(Exception):
    pass

@dataclass
class Processed:
    code: str
    wrapper: WrapperPath
    imports: ImportSet
    echo: bool = False
    result_name: Optional[str] = None

def preprocess(stmts: List[str], leading_spaces: str, pkg_name: WrapperPath, wrapper_name: str, imports: ImportSet, line_offset: int, echo: bool = False, result_name: Optional[str] = None) -> Processed:
    if len(stmts) == 0:
        raise SkipBlock(wrapper_name)

    # pad so line numbers match the script file
    code = "\n" * line_offset + leading_spaces + "".join(stmts) + "\n"
    return Processed(code, pkg_name / wrapper_name, imports, echo, result_name)
