from __future__ import annotations
from dataclasses import dataclass
from types import CodeType
from typing import *
from ..ast.path import WrapperPath
from ..ast.imports import Binding, BindingKind, ImportSet
from ..printer import Printer
from .preprocess import Processed
import ast as pyast
import builtins
import symtable
import warnings

class CompilationError(Exception):
    pass

BRIDGE_NAME = "interp"

MODULE_NAMES = {
    "__name__", "__file__", "__doc__", "__builtins__", "__spec__",
    "__loader__", "__package__", "__annotations__", "__cached__",
}

@dataclass
class CompiledBlock:
    wrapper: WrapperPath
    code: CodeType
    result_code: Optional[CodeType]
    result_name: Optional[str]
    context: ImportSet
    imports: ImportSet

def collect_globals(table: symtable.SymbolTable) -> Tuple[Set[str], Set[str]]:
    bound: Set[str] = set()
    referenced: Set[str] = set()

    for sym in table.get_symbols():
        if sym.is_assigned() or sym.is_imported() or sym.is_namespace():
            bound.add(sym.get_name())
        elif sym.is_referenced():
            referenced.add(sym.get_name())

    def visit_table(table: symtable.SymbolTable):
        for child in table.get_children():
            for sym in child.get_symbols():
                if sym.is_declared_global() and sym.is_assigned():
                    bound.add(sym.get_name())
                elif sym.is_global() and sym.is_referenced():
                    referenced.add(sym.get_name())
            visit_table(child)

    visit_table(table)
    return bound, referenced - bound

def has_star_import(tree: pyast.Module) -> bool:
    for node in tree.body:
        match node:
            case pyast.ImportFrom(names=[pyast.alias(name="*")]):
                return True
    return False

def first_use(tree: pyast.Module, names: Set[str]) -> Tuple[str, int, int]:
    uses = []
    for node in pyast.walk(tree):
        match node:
            case pyast.Name(id=name) if name in names:
                uses.append((node.lineno, node.col_offset + 1, name))

    if not uses:
        name = sorted(names)[0]
        return name, 1, 1

    line, col, name = min(uses)
    return name, line, col

def declared_bindings(tree: pyast.Module, bound: Set[str], wrapper: WrapperPath, result_name: Optional[str]) -> ImportSet:
    types: Set[str] = set()
    for node in tree.body:
        match node:
            case pyast.ClassDef(name=name):
                types.add(name)

    bindings = []
    for name in sorted(bound):
        if name == BRIDGE_NAME or (name.startswith("__") and name.endswith("__")):
            continue
        kind = BindingKind.Type if name in types else BindingKind.Value
        bindings.append(Binding(name, kind, wrapper, name))

    if result_name is not None:
        bindings.append(Binding(result_name, BindingKind.Value, wrapper, result_name))

    return ImportSet(bindings)

def compile_block(processed: Processed, file: str, printer: Printer) -> CompiledBlock:
    def err(line: Optional[int], col: Optional[int], msg: str) -> NoReturn:
        raise CompilationError(f"compile error in file {file} at line {line} col {col}: {msg}")

    with warnings.catch_warnings(record = True) as caught:
        warnings.simplefilter("always")

        try:
            tree = pyast.parse(processed.code, file)
            table = symtable.symtable(processed.code, file, "exec")
        except SyntaxError as e:
            err(e.lineno, e.offset, e.msg)

        bound, referenced = collect_globals(table)
        if not has_star_import(tree):
            allowed = processed.imports.names() | set(dir(builtins)) | MODULE_NAMES | {BRIDGE_NAME}
            undefined = referenced - allowed
            if undefined:
                name, line, col = first_use(tree, undefined)
                err(line, col, f"name '{name}' is not defined")

        body = tree.body
        result_tree: Optional[pyast.Expression] = None
        if processed.echo and len(body) > 0 and isinstance(body[-1], pyast.Expr):
            result_tree = pyast.Expression(body[-1].value)
            body = body[:-1]
        result_name = processed.result_name if result_tree is not None else None

        try:
            code = compile(pyast.Module(body, type_ignores = []), file, "exec")
            result_code = compile(result_tree, file, "eval") if result_tree is not None else None
        except SyntaxError as e:
            err(e.lineno, e.offset, e.msg)

    seen = set()
    for w in caught:
        key = (w.lineno, str(w.message))
        if key not in seen:
            seen.add(key)
            printer.warning(f"{file}:{w.lineno}: {w.category.__name__}: {w.message}")

    imports = declared_bindings(tree, bound, processed.wrapper, result_name)
    return CompiledBlock(processed.wrapper, code, result_code, result_name, processed.imports, imports)
