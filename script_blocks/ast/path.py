from __future__ import annotations
from dataclasses import dataclass
from typing import *
import keyword
import re

@dataclass(frozen=True, init=False)
class WrapperPath:
    components: Sequence[str]

    def __init__(self, components: Sequence[str]):
        object.__setattr__(self, "components", tuple(components))

    @staticmethod
    def parse(dotted: str) -> WrapperPath:
        return WrapperPath(tuple(c for c in dotted.split(".") if c))

    def name(self) -> str:
        return self.components[-1]

    def parent(self) -> WrapperPath:
        return WrapperPath(self.components[:-1])

    def __str__(self) -> str:
        return ".".join(self.components)

    def __repr__(self) -> str:
        return str(self)

    def __lt__(self, other: WrapperPath) -> bool:
        return tuple(self.components) < tuple(other.components)

    def __truediv__(self, other: Union[WrapperPath, str]) -> WrapperPath:
        if isinstance(other, WrapperPath):
            return WrapperPath(tuple(self.components) + tuple(other.components))
        else:
            return WrapperPath(tuple(self.components) + (other,))

def sanitize_name(name: str) -> str:
    name = re.sub(r"\W", "_", name)
    if name == "" or name[0].isdigit():
        name = "_" + name
    if keyword.iskeyword(name):
        name = name + "_"
    return name

def index_wrapper_name(name: str, index: int) -> str:
    # first block keeps the plain name: foo, foo2, foo3, ...
    if index == 1:
        return name
    return f"{name}{index}"
