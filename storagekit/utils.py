"""
Async wrappers for blocking filesystem calls that aiofiles does not cover.
"""

import os
import shutil
from pathlib import Path
from typing import List, Tuple

from asyncer import asyncify


@asyncify
def rmtree_async(path: Path):
    """Asynchronously remove a directory tree."""
    shutil.rmtree(path)


@asyncify
def scandir_async(path: Path) -> List[Tuple[str, bool]]:
    """Asynchronously list (name, is_directory) for every entry in a directory."""
    with os.scandir(path) as entries:
        return [(entry.name, entry.is_dir()) for entry in entries]
