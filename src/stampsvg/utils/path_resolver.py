"""Path helpers for locating stamp assets.

Stamps are referenced by their bitmap url ("assets/stamps/larch.bmp"); the
outline sub-document for that stamp sits one directory up with an .svg
extension ("assets/larch.svg").
"""

import os
import sys
from pathlib import Path
from typing import Optional, Union

from stampsvg.constants import STAMP_DIR_TOKEN, OUTLINE_EXTENSION, CONFIG_FILENAME


def stamp_to_outline_path(url: str) -> str:
    """Apply the naming convention: "/stamps/" -> "/" and the extension -> ".svg".

    A url without an extension gets ".svg" appended.
    """
    path = url.replace(STAMP_DIR_TOKEN, '/')
    stem, ext = os.path.splitext(path)
    if ext == OUTLINE_EXTENSION:
        return path
    return stem + OUTLINE_EXTENSION


def get_base_dir() -> Path:
    """Directory assets are resolved against when no root is configured.

    In frozen mode (PyInstaller executable), the directory containing the
    executable. Otherwise the current working directory, which is where the
    editor is launched from.
    """
    if getattr(sys, 'frozen', False):
        return Path(os.path.dirname(sys.executable))
    return Path.cwd()


def get_config_path(directory: Optional[Union[str, Path]] = None) -> Path:
    """Default location of the editor config file."""
    base = Path(directory) if directory is not None else get_base_dir()
    return base / CONFIG_FILENAME
