from __future__ import annotations
from dataclasses import dataclass
from typing import *
from .ast.imports import ImportSet
from .ast.path import index_wrapper_name
from .ast.script import Block, BlockMetadata, CodeSource, ImportHookInfo, ScriptMetadata, ScriptOutput, Tag, VersionedWrapperId
from .bridge import ImportCallback, InterpreterBridge
from .config import Config
from .loader import HookResolutionError, ScriptCycleError, ScriptLoadError, resolve_import_hooks
from .parse.hooks import HookParseError, parse_import_hooks
from .parse.splitter import SplitError, split_script
from .passes.compile import CompilationError, compile_block
from .passes.evaluate import EvaluationError, Evaluated, Evaluator, Frame, Interrupted
from .passes.preprocess import Processed, SkipBlock, preprocess
from .printer import Printer
from .tags import env_hash, version_tag
import itertools
import os.path
import threading

class CellError(Exception):
    pass

BLOCK_ERRORS = (HookParseError, HookResolutionError, CompilationError, EvaluationError)

@dataclass
class EvaluatedBlock:
    output: List[str]
    evaluated: Evaluated
    tag: Tag

EvaluateFn: TypeAlias = Callable[[Processed, CodeSource, ImportCallback], EvaluatedBlock]

class NestedImports:
    imports: ImportSet

    def __init__(self):
        self.imports = ImportSet()

    def __call__(self, imports: ImportSet):
        self.imports = self.imports | imports

@dataclass
class BlockLoopState:
    script_imports: ImportSet
    last_imports: ImportSet
    wrapper_index: int
    metadata: List[BlockMetadata]
    output: List[List[str]]

class Interpreter:
    config: Config
    printer: Printer
    frame: Frame
    evaluator: Evaluator
    predef_imports: ImportSet
    env: str

    def __init__(self, config: Optional[Config] = None, printer: Optional[Printer] = None):
        self.config = config if config is not None else Config()
        self.printer = printer if printer is not None else Printer(verbose = self.config.verbose)
        self.frame = Frame()
        self.evaluator = Evaluator(self.frame)
        self.predef_imports = ImportSet()
        self.env = env_hash(self.config.script_path)
        self.lock = threading.RLock()

    def load_predef(self) -> ImportSet:
        with self.lock:
            for path in self.config.predef:
                output = self.load_script(path)
                self.predef_imports = self.predef_imports | output.exports
            self.frame.imports = self.frame.imports | self.predef_imports
            return self.predef_imports

    def load_script(self, path: str, auto_import: bool = False, import_callback: Optional[ImportCallback] = None, parents: FrozenSet[str] = frozenset()) -> ScriptOutput:
        path = os.path.abspath(path)
        if path in parents:
            raise ScriptCycleError(f"cyclical dependency on script '{path}'")

        source = CodeSource.for_file(path, self.config.wd, self.config.script_package, parents)
        try:
            with open(path, "r", encoding = "utf-8") as f:
                code = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ScriptLoadError(f"could not read script '{path}': {e}", source, ScriptMetadata()) from e

        return self.process_module(code, source, auto_import, import_callback)

    def load_nested(self, path: str, parents: FrozenSet[str]) -> ImportSet:
        return self.load_script(path, parents = parents).exports

    def process_module(self, code: str, source: CodeSource, auto_import: bool = False, import_callback: Optional[ImportCallback] = None) -> ScriptOutput:
        with self.lock:
            try:
                blocks = split_script(code, source.file_name)
            except SplitError as e:
                raise ScriptLoadError(str(e), source, ScriptMetadata()) from e

            return self.process_script_blocks(blocks, source, self.predef_imports, self.evaluate_block, auto_import, import_callback)

    def process_script_blocks(self, blocks: Sequence[Block], source: CodeSource, starting_imports: ImportSet, evaluate: EvaluateFn, auto_import: bool, import_callback: Optional[ImportCallback] = None) -> ScriptOutput:
        """Compile and evaluate the blocks of a script in source order.

        Every block is compiled against the starting imports plus the imports
        of all blocks before it, including those of scripts they loaded. Only
        the imports of the last block are exported: they are returned, and
        handed to `import_callback` when `auto_import` is set.

        The first failing block aborts the load with a `ScriptLoadError`
        carrying the metadata of the blocks that did run. `ExitRequest` is
        propagated as is.
        """
        with self.lock:
            state = BlockLoopState(starting_imports, ImportSet(), 1, [], [])

            for block in blocks:
                # imports of scripts loaded while this block runs end up here
                nested = NestedImports()
                wrapper_name = index_wrapper_name(source.wrapper_name, state.wrapper_index)

                try:
                    hook_stmts, hooks = parse_import_hooks(block.stmts, source.file_name)
                    hook_info = resolve_import_hooks(hooks, hook_stmts, source, self.config.script_path, self.config.wd, self.load_nested)
                    block_metadata, output = self.compile_run_block(block, hook_info, source, wrapper_name, state, evaluate, nested)
                except SkipBlock:
                    state.wrapper_index += 1
                    continue
                except BLOCK_ERRORS as e:
                    raise ScriptLoadError(str(e), source, ScriptMetadata(tuple(state.metadata))) from e

                last = hook_info.imports | block_metadata.final_imports | nested.imports
                state.script_imports = state.script_imports | last
                state.last_imports = last
                state.wrapper_index += 1
                state.metadata.append(block_metadata)
                state.output.append(output)

            if auto_import and import_callback is not None:
                import_callback(state.last_imports)

            return ScriptOutput(
                ScriptMetadata(tuple(state.metadata)),
                itertools.chain.from_iterable(state.output),
                state.last_imports,
            )

    def compile_run_block(self, block: Block, hook_info: ImportHookInfo, source: CodeSource, wrapper_name: str, state: BlockLoopState, evaluate: EvaluateFn, nested: NestedImports) -> Tuple[BlockMetadata, List[str]]:
        processed = preprocess(
            hook_info.stmts,
            block.leading_spaces,
            source.pkg_name,
            wrapper_name,
            state.script_imports | hook_info.imports,
            block.line_offset,
            echo = self.config.echo,
        )

        suffix = "" if state.wrapper_index == 1 else f" #{state.wrapper_index}"
        self.printer.info(f"Compiling {source.printable_path}{suffix}")

        result = evaluate(processed, source, nested)
        metadata = BlockMetadata(
            VersionedWrapperId(str(result.evaluated.wrapper), result.tag),
            block.leading_spaces,
            hook_info,
            result.evaluated.imports,
        )
        return metadata, result.output

    def evaluate_block(self, processed: Processed, source: CodeSource, import_callback: ImportCallback) -> EvaluatedBlock:
        tag = version_tag(processed, self.env)
        compiled = compile_block(processed, source.file_name, self.printer)

        bridge = InterpreterBridge(self, source, import_callback)
        try:
            output, evaluated = self.evaluator.process_script_block(compiled, source.file_name, bridge)
        finally:
            bridge.close()

        return EvaluatedBlock(output, evaluated, tag)

    def evaluate_cell(self, processed: Processed, printer: Printer, file_name: str, silent: bool = False, increment_line: Optional[Callable[[], None]] = None, import_callback: Optional[ImportCallback] = None) -> EvaluatedBlock:
        with self.lock:
            source = CodeSource(processed.wrapper.name(), processed.wrapper.parent())
            try:
                compiled = compile_block(processed, file_name, printer)
                if increment_line is not None:
                    increment_line()

                bridge = InterpreterBridge(self, source, import_callback)
                try:
                    output, evaluated = self.evaluator.process_cell(compiled, file_name, bridge, silent)
                finally:
                    bridge.close()
            except KeyboardInterrupt:
                raise Interrupted(f"interrupted while evaluating {processed.wrapper}") from None

            return EvaluatedBlock(output, evaluated, version_tag(processed, self.env))

    def run_cell(self, code: str) -> Optional[EvaluatedBlock]:
        with self.lock:
            index = self.frame.line
            source = CodeSource.for_cell(index, self.config.cell_package)

            blocks = split_script(code, source.file_name)
            if len(blocks) > 1:
                raise CellError(f"block separators are not allowed in cells ({source.file_name})")
            block = blocks[0]

            hook_stmts, hooks = parse_import_hooks(block.stmts, source.file_name)
            hook_info = resolve_import_hooks(hooks, hook_stmts, source, self.config.script_path, self.config.wd, self.load_nested)

            try:
                processed = preprocess(
                    hook_info.stmts,
                    block.leading_spaces,
                    source.pkg_name,
                    source.wrapper_name,
                    self.frame.imports | hook_info.imports,
                    block.line_offset,
                    echo = True,
                    result_name = f"res{index}",
                )
            except SkipBlock:
                return None

            nested = NestedImports()
            result = self.evaluate_cell(
                processed,
                self.printer,
                source.file_name,
                silent = code.rstrip().endswith(";"),
                increment_line = self.frame.increment_line,
                import_callback = nested,
            )

            self.frame.imports = self.frame.imports | hook_info.imports | result.evaluated.imports | nested.imports
            return result
