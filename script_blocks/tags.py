from typing import *
from .ast.script import Tag
from .passes.preprocess import Processed
from .version import __version__
import hashlib
import sys

def env_hash(search_path: List[str]) -> str:
    h = hashlib.sha1()
    h.update(f"script_blocks {__version__}\n".encode("utf-8"))
    h.update(f"python {sys.version}\n".encode("utf-8"))
    for dir in search_path:
        h.update(f"path {dir}\n".encode("utf-8"))
    return h.hexdigest()

def code_hash(processed: Processed) -> str:
    h = hashlib.sha1()
    h.update(f"wrapper {processed.wrapper}\n".encode("utf-8"))
    h.update(f"echo {processed.echo} {processed.result_name}\n".encode("utf-8"))
    for binding in processed.imports:
        h.update(f"import {binding}\n".encode("utf-8"))
    h.update(processed.code.encode("utf-8"))
    return h.hexdigest()

def version_tag(processed: Processed, env: str) -> Tag:
    return Tag(code_hash(processed), env)
