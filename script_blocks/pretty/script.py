from typing import *
from ..ast.script import Block, ScriptMetadata
import sys

def first_code_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip() != "" and not line.lstrip().startswith("#"):
            return line.rstrip()
    return ""

def pretty_blocks(blocks: List[Block], file: TextIO = sys.stdout):
    for block in blocks:
        print(f"# block {block.index} (after line {block.line_offset})", file=file)
        for stmt in block.stmts:
            marker = "hook" if stmt.is_hook else "stmt"
            print(f"  {marker} {stmt.line}: {first_code_line(stmt.text)}", file=file)

def pretty_metadata(metadata: ScriptMetadata, file: TextIO = sys.stdout):
    for block in metadata:
        print(f"{block.id.wrapper_path} code={block.id.tag.code} env={block.id.tag.env}", file=file)
        for hook in block.hook_info.hooks:
            print(f"  hook {hook}", file=file)
        for binding in block.final_imports:
            print(f"  export {binding}", file=file)
