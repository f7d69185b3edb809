from __future__ import annotations
from dataclasses import dataclass, field
from typing import *
from .search_path import get_script_search_path
import argparse
import os

@dataclass
class Config:
    script_path: List[str] = field(default_factory = list)
    predef: List[str] = field(default_factory = list)
    wd: str = field(default_factory = os.getcwd)
    script_package: str = "scripts"
    cell_package: str = "repl"
    echo: bool = False
    verbose: bool = True

def add_config_args(ap: argparse.ArgumentParser):
    ap.add_argument("-P", "--script-path", action = "append", help = "add a directory to the script search path")
    ap.add_argument("--no-default-script-path", action = "store_true", default=False, help = "do not use default script search paths")
    ap.add_argument("--predef", action = "append", help = "load a predef script before anything else")
    ap.add_argument("-q", "--quiet", action = "store_true", default=False, help = "do not print compilation progress")
    ap.add_argument("-v", "--version", action = "store_true", default=False, help = "print current version and exit")

def config_from_args(args: argparse.Namespace, echo: bool = False) -> Config:
    return Config(
        script_path = get_script_search_path(args.script_path or [], not args.no_default_script_path),
        predef = args.predef or [],
        echo = echo,
        verbose = not args.quiet,
    )
