from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from types import ModuleType
from typing import *
from .path import WrapperPath

class BindingKind(Enum):
    Type = auto()
    Value = auto()

@dataclass(frozen=True)
class Binding:
    name: str
    kind: BindingKind
    source: WrapperPath
    attr: Optional[str] = None
    # wrapper module the binding was produced by, if already evaluated
    module: Optional[ModuleType] = field(default = None, compare = False, repr = False)

    def __str__(self) -> str:
        target = str(self.source) if self.attr is None else f"{self.source}.{self.attr}"
        prefix = "type " if self.kind == BindingKind.Type else ""
        return f"{prefix}{self.name} = {target}"

@dataclass(frozen=True, init=False)
class ImportSet:
    bindings: Mapping[str, Binding]

    def __init__(self, bindings: Iterable[Binding] = ()):
        data: Dict[str, Binding] = {}
        for binding in bindings:
            data[binding.name] = binding
        object.__setattr__(self, "bindings", data)

    def names(self) -> Set[str]:
        return set(self.bindings)

    def get(self, name: str) -> Optional[Binding]:
        return self.bindings.get(name)

    def __len__(self) -> int:
        return len(self.bindings)

    def __iter__(self) -> Iterator[Binding]:
        return iter(sorted(self.bindings.values(), key = lambda b: b.name))

    def __contains__(self, name: object) -> bool:
        return name in self.bindings

    def __or__(self, other: ImportSet) -> ImportSet:
        return ImportSet(list(self.bindings.values()) + list(other.bindings.values()))

    def __str__(self) -> str:
        return "{" + ", ".join(str(b) for b in self) + "}"

    def __repr__(self) -> str:
        return f"ImportSet({self})"
