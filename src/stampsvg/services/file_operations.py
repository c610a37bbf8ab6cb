"""
Stamp Document Core - File Operations Service

Loading and saving documents. Separates file I/O from the Document model.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Callable, Optional, Union

from stampsvg.models.document import Document

logger = logging.getLogger(__name__)


def save_document_to_file(document: Document, filename: Union[str, Path],
                          resolver: Optional[Callable[[str], str]] = None) -> None:
    """Save a document

    The document is encoded before the file is touched, and written through a
    temporary file in the same directory, so a failed save leaves an
    existing file as it was.

    Args:
        document: Document to save
        filename: Path to save file
        resolver: asset resolver passed to Document.to_string

    Raises:
        AssetResolutionError: an asset sub-document could not be read
        OSError: If file write fails
    """
    text = document.to_string(resolver)

    target = Path(filename)
    directory = target.parent if str(target.parent) else Path('.')
    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix='.tmp', dir=directory)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8', newline='') as f:
            f.write(text)
        os.replace(tmp_name, target)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise

    document.dirty = False
    logger.info(f"Document saved to {target}")


def load_document_from_file(filename: Union[str, Path]) -> Document:
    """Load and parse a document

    Args:
        filename: Path to document file

    Returns:
        Parsed Document

    Raises:
        OSError: If file read fails
        ParseError: If the markup is not a valid document
    """
    with open(filename, 'r', encoding='utf-8', newline='') as f:
        text = f.read()

    document = Document.from_string(text)
    logger.info(f"Document loaded from {filename}")
    return document
