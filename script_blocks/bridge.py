from __future__ import annotations
from typing import *
from .ast.imports import ImportSet
from .ast.script import CodeSource
import os.path

if TYPE_CHECKING:
    from .interpreter import Interpreter

ImportCallback: TypeAlias = Callable[[ImportSet], None]

class InterpreterBridge:
    """The `interp` object bound inside every evaluated block.

    Scripts loaded through it while the block runs hand their exports to the
    block's import callback; after the block finishes the callback is dropped
    and loads only return their exports.
    """

    interpreter: Interpreter
    source: CodeSource
    import_callback: Optional[ImportCallback]

    def __init__(self, interpreter: Interpreter, source: CodeSource, import_callback: Optional[ImportCallback]):
        self.interpreter = interpreter
        self.source = source
        self.import_callback = import_callback

    def load_script(self, path: str) -> ImportSet:
        if not os.path.isabs(path):
            path = os.path.join(self.source.dir or self.interpreter.config.wd, path)

        output = self.interpreter.load_script(
            path,
            auto_import = self.import_callback is not None,
            import_callback = self.import_callback,
            parents = self.source.nested(),
        )
        return output.exports

    def close(self):
        self.import_callback = None

    def __repr__(self) -> str:
        return f"<interp for {self.source.full_path}>"
