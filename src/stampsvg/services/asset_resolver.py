"""
Stamp Document Core - Asset Resolution Service

A resolver is any callable mapping a stamp's source url to the text of its
per-asset sub-document. Documents call one while encoding the mask block,
and the outline cache calls one to build hit-test polygons.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Union

from stampsvg.utils.errors import AssetResolutionError
from stampsvg.utils.path_resolver import get_base_dir, stamp_to_outline_path

logger = logging.getLogger(__name__)


class FileAssetResolver:
    """Reads sub-documents from disk using the stamp naming convention.

    Args:
        root: directory the convention paths are relative to (defaults to
            the working directory)
    """

    def __init__(self, root: Optional[Union[str, Path]] = None):
        self.root = Path(root) if root is not None else get_base_dir()

    def path_for(self, url: str) -> Path:
        return self.root / stamp_to_outline_path(url)

    def __call__(self, url: str) -> str:
        path = self.path_for(url)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read asset {path} for {url}: {e}")
            raise AssetResolutionError(f"{url}: cannot read {path}: {e}") from e
        logger.debug(f"Resolved {url} -> {path} ({len(text)} chars)")
        return text

    def __repr__(self) -> str:
        return f"FileAssetResolver({str(self.root)!r})"


class DictAssetResolver:
    """In-memory resolver keyed by source url."""

    def __init__(self, assets: Optional[Dict[str, str]] = None):
        self.assets = dict(assets) if assets else {}

    def __call__(self, url: str) -> str:
        try:
            return self.assets[url]
        except KeyError:
            raise AssetResolutionError(f"{url}: no such asset") from None
