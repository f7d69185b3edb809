from __future__ import annotations
from dataclasses import dataclass, replace
from types import ModuleType
from typing import *
from ..ast.path import WrapperPath
from ..ast.imports import Binding, ImportSet
from .compile import CompiledBlock, BRIDGE_NAME
import importlib

class EvaluationError(Exception):
    pass

class ExitRequest(Exception):
    def __init__(self, code: Any = None):
        super().__init__(code)
        self.code = code

class Interrupted(Exception):
    pass

@dataclass
class Evaluated:
    wrapper: WrapperPath
    imports: ImportSet

class Frame:
    wrappers: Dict[str, ModuleType]
    imports: ImportSet
    line: int

    def __init__(self, imports: Optional[ImportSet] = None):
        self.wrappers = {}
        self.imports = imports if imports is not None else ImportSet()
        self.line = 0

    def increment_line(self):
        self.line += 1

    def resolve(self, binding: Binding) -> Any:
        key = str(binding.source)
        source: ModuleType
        if binding.module is not None:
            source = binding.module
        elif key in self.wrappers:
            source = self.wrappers[key]
        else:
            try:
                source = importlib.import_module(key)
            except Exception as e:
                raise EvaluationError(f"could not resolve binding '{binding}': {type(e).__name__}: {e}") from e

        if binding.attr is None:
            return source

        try:
            return getattr(source, binding.attr)
        except AttributeError:
            raise EvaluationError(f"could not resolve binding '{binding}': '{key}' has no attribute '{binding.attr}'") from None

class Evaluator:
    frame: Frame

    def __init__(self, frame: Frame):
        self.frame = frame

    def run(self, compiled: CompiledBlock, file: str, bridge: Any) -> Tuple[ModuleType, Any]:
        module = ModuleType(str(compiled.wrapper))
        module.__file__ = file

        value = None
        try:
            for binding in compiled.context:
                setattr(module, binding.name, self.frame.resolve(binding))
            setattr(module, BRIDGE_NAME, bridge)

            exec(compiled.code, module.__dict__)
            if compiled.result_code is not None:
                value = eval(compiled.result_code, module.__dict__)
        except SystemExit as e:
            raise ExitRequest(e.code) from None
        except (ExitRequest, EvaluationError):
            raise
        except Exception as e:
            raise EvaluationError(f"{type(e).__name__} while evaluating {compiled.wrapper}: {e}") from e

        if compiled.result_name is not None and value is not None:
            setattr(module, compiled.result_name, value)

        # latest module per wrapper name; bindings keep their own module
        self.frame.wrappers[str(compiled.wrapper)] = module
        return module, value

    def produced_imports(self, compiled: CompiledBlock, module: ModuleType) -> ImportSet:
        return ImportSet(replace(binding, module = module) for binding in compiled.imports if binding.attr in module.__dict__)

    def process_script_block(self, compiled: CompiledBlock, file: str, bridge: Any) -> Tuple[List[str], Evaluated]:
        module, value = self.run(compiled, file, bridge)
        output = [] if value is None else [repr(value)]
        return output, Evaluated(compiled.wrapper, self.produced_imports(compiled, module))

    def process_cell(self, compiled: CompiledBlock, file: str, bridge: Any, silent: bool = False) -> Tuple[List[str], Evaluated]:
        module, value = self.run(compiled, file, bridge)

        output = []
        if value is not None and not silent:
            if compiled.result_name is not None:
                output.append(f"{compiled.result_name}: {type(value).__name__} = {value!r}")
            else:
                output.append(repr(value))

        return output, Evaluated(compiled.wrapper, self.produced_imports(compiled, module))
