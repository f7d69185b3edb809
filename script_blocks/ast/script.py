from __future__ import annotations
from dataclasses import dataclass, field
from typing import *
from .path import WrapperPath, sanitize_name
from .imports import ImportSet
import os.path

@dataclass(frozen=True)
class Stmt:
    text: str
    line: int
    is_hook: bool = False

@dataclass
class Block:
    index: int
    leading_spaces: str
    stmts: List[Stmt]
    line_offset: int

@dataclass
class ImportHook:
    pass

@dataclass
class LoadScript(ImportHook):
    target: str
    line: int

    def __str__(self) -> str:
        return f"%load {self.target}"

@dataclass
class RequireModule(ImportHook):
    module: str
    alias: Optional[str]
    line: int

    def __str__(self) -> str:
        if self.alias is None:
            return f"%require {self.module}"
        return f"%require {self.module} as {self.alias}"

@dataclass
class ImportHookInfo:
    imports: ImportSet
    stmts: List[str]
    hooks: List[ImportHook]

@dataclass(frozen=True)
class Tag:
    code: str
    env: str

    def __str__(self) -> str:
        return f"{self.code[:12]}/{self.env[:12]}"

@dataclass(frozen=True)
class VersionedWrapperId:
    wrapper_path: str
    tag: Tag

@dataclass(frozen=True)
class BlockMetadata:
    id: VersionedWrapperId
    leading_spaces: str
    hook_info: ImportHookInfo
    final_imports: ImportSet

@dataclass(frozen=True)
class ScriptMetadata:
    blocks: Tuple[BlockMetadata, ...] = ()

    def __len__(self) -> int:
        return len(self.blocks)

    def __iter__(self) -> Iterator[BlockMetadata]:
        return iter(self.blocks)

@dataclass
class ScriptOutput:
    metadata: ScriptMetadata
    output: Iterator[str]
    exports: ImportSet

@dataclass(frozen=True)
class CodeSource:
    wrapper_name: str
    pkg_name: WrapperPath
    path: Optional[str] = None
    parents: FrozenSet[str] = frozenset()

    @staticmethod
    def for_file(path: str, wd: str, package: str, parents: FrozenSet[str] = frozenset()) -> CodeSource:
        path = os.path.abspath(path)
        rel = os.path.relpath(path, wd)
        if rel.startswith(os.pardir):
            rel = os.path.splitdrive(path)[1].lstrip(os.sep)

        dirs, file_name = os.path.split(rel)
        pkg = WrapperPath((package,))
        for component in dirs.split(os.sep):
            if component != "":
                pkg = pkg / sanitize_name(component)

        wrapper_name = sanitize_name(file_name.split(".", 1)[0])
        return CodeSource(wrapper_name, pkg, path, parents)

    @staticmethod
    def for_cell(index: int, package: str) -> CodeSource:
        return CodeSource(f"cmd{index}", WrapperPath((package,)))

    @property
    def file_name(self) -> str:
        if self.path is None:
            return f"<{self.wrapper_name}>"
        return self.path

    @property
    def printable_path(self) -> str:
        if self.path is None:
            return str(self.full_path)
        return os.path.basename(self.path)

    @property
    def full_path(self) -> WrapperPath:
        return self.pkg_name / self.wrapper_name

    @property
    def dir(self) -> Optional[str]:
        if self.path is None:
            return None
        return os.path.dirname(self.path)

    def nested(self) -> FrozenSet[str]:
        if self.path is None:
            return self.parents
        return self.parents | {self.path}
