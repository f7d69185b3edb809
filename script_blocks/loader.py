from __future__ import annotations
from typing import *
from .ast.path import WrapperPath
from .ast.imports import Binding, BindingKind, ImportSet
from .ast.script import CodeSource, ScriptMetadata, ImportHook, ImportHookInfo, LoadScript, RequireModule
import importlib.util
import os.path

class HookResolutionError(Exception):
    pass

class ScriptCycleError(Exception):
    pass

class ScriptLoadError(Exception):
    def __init__(self, message: str, source: CodeSource, metadata: ScriptMetadata):
        super().__init__(message)
        self.source = source
        self.metadata = metadata

LoadScriptFn: TypeAlias = Callable[[str, FrozenSet[str]], ImportSet]

def find_script(target: str, base_dir: str, search_path: List[str]) -> str:
    if os.path.isabs(target):
        if os.path.isfile(target):
            return target
        raise HookResolutionError(f"did not find script '{target}'")

    dotted = os.path.join(*target.split(".")) + ".py"
    for dir in [base_dir] + search_path:
        script_src = os.path.join(dir, target)
        if os.path.isfile(script_src):
            break

        script_src = os.path.join(dir, f"{target}.py")
        if os.path.isfile(script_src):
            break

        script_src = os.path.join(dir, dotted)
        if os.path.isfile(script_src):
            break
    else:
        raise HookResolutionError(f"did not find script '{target}'")

    return os.path.abspath(script_src)

def require_module(hook: RequireModule) -> ImportSet:
    try:
        spec = importlib.util.find_spec(hook.module)
    except (ImportError, ValueError):
        spec = None
    except Exception as e:
        raise HookResolutionError(f"failed to import module '{hook.module}': {type(e).__name__}: {e}") from e
    if spec is None:
        raise HookResolutionError(f"did not find module '{hook.module}'")

    path = WrapperPath.parse(hook.module)
    if hook.alias is not None:
        return ImportSet([Binding(hook.alias, BindingKind.Value, path)])

    # `%require a.b` binds `a`, like `import a.b`
    root = WrapperPath(path.components[:1])
    return ImportSet([Binding(root.components[0], BindingKind.Value, root)])

def resolve_import_hooks(hooks: List[ImportHook], stmts: List[str], source: CodeSource, search_path: List[str], wd: str, load_script: LoadScriptFn) -> ImportHookInfo:
    imports = ImportSet()
    base_dir = source.dir or wd

    for hook in hooks:
        match hook:
            case LoadScript(target, line):
                try:
                    script_src = find_script(target, base_dir, search_path)
                    imports = imports | load_script(script_src, source.nested())
                except HookResolutionError as e:
                    raise HookResolutionError(f"hook error in file {source.file_name} at line {line}: {e}") from e.__cause__
                except (ScriptLoadError, ScriptCycleError) as e:
                    raise HookResolutionError(f"hook error in file {source.file_name} at line {line}: failed to load script '{target}'") from e
            case RequireModule(module, alias, line):
                try:
                    imports = imports | require_module(hook)
                except HookResolutionError as e:
                    raise HookResolutionError(f"hook error in file {source.file_name} at line {line}: {e}") from e.__cause__
            case _:
                raise HookResolutionError(f"unexpected import hook: {hook}")

    return ImportHookInfo(imports, stmts, hooks)
