from __future__ import annotations
from typing import *
from ..ast.script import Block, Stmt
import ast as pyast
import io
import tokenize

class SplitError(Exception):
    pass

OPENING = "([{"
CLOSING = ")]}"

def scan_markers(code: str, file: str) -> Tuple[Set[int], Set[int]]:
    """Find block separator lines and import hook lines (1-based).

    Both are only recognized at column 0 of a logical line, so an `@` or `%`
    inside a string or inside brackets is left alone.
    """
    lines = io.StringIO(code).readlines()
    separators: Set[int] = set()
    hooks: Set[int] = set()

    depth = 0
    line_start = True
    try:
        for tok in tokenize.generate_tokens(io.StringIO(code).readline):
            match tok.type:
                case tokenize.NEWLINE | tokenize.NL:
                    line_start = depth == 0
                    continue
                case tokenize.INDENT | tokenize.DEDENT | tokenize.COMMENT | tokenize.ENDMARKER:
                    continue

            row, col = tok.start
            if line_start and col == 0 and tok.type == tokenize.OP:
                if tok.string == "@" and lines[row - 1].strip() == "@":
                    separators.add(row)
                elif tok.string == "%":
                    hooks.add(row)
            line_start = False

            if tok.type == tokenize.OP and tok.string in OPENING:
                depth += 1
            elif tok.type == tokenize.OP and tok.string in CLOSING:
                depth = max(depth - 1, 0)
    except tokenize.TokenError as e:
        msg, (line, col) = e.args
        raise SplitError(f"split error in file {file} at line {line} col {col + 1}: {msg}") from None
    except SyntaxError as e:
        raise SplitError(f"split error in file {file} at line {e.lineno} col {e.offset}: {e.msg}") from None

    return separators, hooks

def split_block(lines: List[str], line_offset: int, hook_lines: Set[int], index: int, file: str) -> Block:
    text = "".join(lines)

    line_starts = [0]
    for line in lines:
        line_starts.append(line_starts[-1] + len(line))

    def offset(lineno: int, col: int) -> int:
        # ast columns are utf-8 byte offsets
        line = lines[lineno - 1]
        return line_starts[lineno - 1] + len(line.encode("utf-8")[:col].decode("utf-8", errors="ignore"))

    local_hooks = sorted(line - line_offset for line in hook_lines if line_offset < line <= line_offset + len(lines))
    masked = [("\n" if line.endswith("\n") else "") if i + 1 in local_hooks else line for i, line in enumerate(lines)]

    try:
        tree = pyast.parse("".join(masked), file)
    except SyntaxError as e:
        lineno = (e.lineno or 1) + line_offset
        raise SplitError(f"split error in file {file} at line {lineno} col {e.offset}: {e.msg}") from None

    spans: List[Tuple[int, int, int, bool]] = []
    for node in tree.body:
        first_line = node.lineno
        start = offset(node.lineno, node.col_offset)
        match node:
            case pyast.FunctionDef() | pyast.AsyncFunctionDef() | pyast.ClassDef() if node.decorator_list:
                first_line = min(d.lineno for d in node.decorator_list)
                start = line_starts[first_line - 1]
        end_line = node.end_lineno if node.end_lineno is not None else node.lineno
        end_col = node.end_col_offset if node.end_col_offset is not None else len(lines[end_line - 1])
        end = offset(end_line, end_col)

        for hook_line in local_hooks:
            if first_line < hook_line < end_line:
                raise SplitError(f"split error in file {file} at line {hook_line + line_offset} col 1: import hook inside statement")

        spans.append((start, end, first_line, False))

    for hook_line in local_hooks:
        start = line_starts[hook_line - 1]
        end = start + len(lines[hook_line - 1].rstrip("\r\n"))
        spans.append((start, end, hook_line, True))

    spans.sort()

    leading_spaces = text[:spans[0][0]] if spans else text
    stmts = []
    prev_end = spans[0][0] if spans else 0
    for start, end, first_line, is_hook in spans:
        stmts.append(Stmt(text[prev_end:end], first_line + line_offset, is_hook))
        prev_end = end

    return Block(index, leading_spaces, stmts, line_offset)

def split_script(code: str, file: str) -> List[Block]:
    separators, hooks = scan_markers(code, file)
    lines = io.StringIO(code).readlines()

    blocks: List[Block] = []
    start = 0
    for i in range(len(lines)):
        if i + 1 in separators:
            blocks.append(split_block(lines[start:i], start, hooks, len(blocks) + 1, file))
            start = i + 1
    blocks.append(split_block(lines[start:], start, hooks, len(blocks) + 1, file))

    return blocks
