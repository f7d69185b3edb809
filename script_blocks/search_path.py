from typing import *
import os

DEFAULT_SCRIPT_DIRS = [
    "/usr/lib/script_blocks/scripts/",
    "/usr/local/lib/script_blocks/scripts/",
    "~/.local/lib/script_blocks/scripts/",
]

def get_script_search_path(extra: List[str], with_default: bool = True) -> List[str]:
    """Directories searched by `%load` after the loading script's own directory.

    `extra` comes first, then the entries of `$SCRIPT_BLOCKS_PATH`, then the
    system and user script directories. Duplicates keep their first position.
    """
    dirs = list(extra)
    if with_default:
        dirs += [d for d in os.environ.get("SCRIPT_BLOCKS_PATH", "").split(os.pathsep) if d]
        dirs += [os.path.expanduser(d) for d in DEFAULT_SCRIPT_DIRS]

    script_path: List[str] = []
    for dir in dirs:
        if dir not in script_path:
            script_path.append(dir)
    return script_path
