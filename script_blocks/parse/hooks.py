from __future__ import annotations
from typing import *
from ..ast.script import Stmt, ImportHook, LoadScript, RequireModule
import re

class HookParseError(Exception):
    pass

HOOK_PATTERN = re.compile(r"%(\w+)(?:[ \t]+(.*?))?[ \t]*")
MODULE_PATTERN = re.compile(r"([A-Za-z_][A-Za-z_0-9]*(?:\.[A-Za-z_][A-Za-z_0-9]*)*)(?:[ \t]+as[ \t]+([A-Za-z_][A-Za-z_0-9]*))?")
COMMENT_PATTERN = re.compile(r"[ \t]+#.*$")

def parse_hook(directive: str, line: int, file: str) -> ImportHook:
    def err(msg: str) -> NoReturn:
        raise HookParseError(f"hook error in file {file} at line {line}: {msg}")

    directive = COMMENT_PATTERN.sub("", directive)
    m = HOOK_PATTERN.fullmatch(directive)
    if m is None:
        err(f"malformed import hook '{directive}'")

    name, arg = m.group(1), m.group(2)
    match name:
        case "load":
            if not arg:
                err("'%load' needs a script to load")
            return LoadScript(arg, line)
        case "require":
            if not arg:
                err("'%require' needs a module name")
            mm = MODULE_PATTERN.fullmatch(arg)
            if mm is None:
                err(f"invalid module reference '{arg}'")
            return RequireModule(mm.group(1), mm.group(2), line)
        case _:
            err(f"unknown import hook '%{name}'")

def parse_import_hooks(stmts: List[Stmt], file: str) -> Tuple[List[str], List[ImportHook]]:
    hook_stmts: List[str] = []
    hooks: List[ImportHook] = []

    for stmt in stmts:
        if not stmt.is_hook:
            hook_stmts.append(stmt.text)
            continue

        directive = stmt.text.rsplit("\n", 1)[-1]
        hooks.append(parse_hook(directive.strip(), stmt.line, file))
        # drop the directive but keep its line
        hook_stmts.append(stmt.text[:len(stmt.text) - len(directive)])

    return hook_stmts, hooks
