"""
Document Serialization Mixin

Provides markup parsing and serialization for the Document model:
- Parsing document text into placements and definitions
- Serializing back to the byte-exact dialect, with per-asset mask bodies
  pulled from a resolver

The element-level work lives in _internal/svg_codec.py.
"""

import logging
from typing import Callable, List, Optional, Tuple

from stampsvg.utils.errors import AssetResolutionError, MarkupStructureError
from ._internal import svg_codec
from ._internal.records import Definitions

logger = logging.getLogger('Document')

AssetResolver = Callable[[str], str]


class DocumentSerializationMixin:
    """Mixin providing from_string/to_string for Document

    This mixin assumes the class has:
    - self.version, self.width, self.height
    - self.definitions: Definitions
    - self.placements: List[Placement]
    - self.grown_size() from the query mixin
    """

    @classmethod
    def from_string(cls, text: str) -> 'Document':
        """Decode document markup.

        Every clip-path reference must name a clipPath in the defs block.

        Raises:
            ParseError subclasses: MarkupStructureError, NumericParseError,
                ColorFormatError, PolygonPointCountError and the transform
                grammar errors. Nothing is partially decoded.
        """
        try:
            parts = svg_codec.parse_svg(text)
        except ValueError as e:
            logger.error(f"Failed to parse document: {e}")
            raise

        clip_ids = {clip.id for clip in parts['clip_paths']}
        for placement in parts['placements']:
            if placement.clip_id and placement.clip_id not in clip_ids:
                logger.error(f"Placement {placement.source_url} references unknown clip path '{placement.clip_id}'")
                raise MarkupStructureError(f"clip-path references undefined id '{placement.clip_id}'")

        document = cls(
            width=parts['width'],
            height=parts['height'],
            version=parts['version'],
            definitions=Definitions(clip_paths=parts['clip_paths'], masks=parts['masks']),
            placements=parts['placements'],
        )
        logger.debug(
            f"Parsed document v{document.version} {document.width}x{document.height}: "
            f"{len(document.placements)} placements, {len(document.definitions.clip_paths)} clip paths"
        )
        return document

    @classmethod
    def decode(cls, text: str) -> 'Document':
        return cls.from_string(text)

    def to_string(self, resolver: Optional[AssetResolver] = None) -> str:
        """Serialize to markup.

        Args:
            resolver: callable mapping a source url to its asset sub-document
                text. Defaults to reading files relative to the working
                directory.

        Raises:
            AssetResolutionError: an asset could not be resolved; no text is
                produced
        """
        if resolver is None:
            from stampsvg.services.asset_resolver import FileAssetResolver
            resolver = FileAssetResolver()

        mask_bodies = self._resolve_mask_bodies(resolver)
        width, height = self.grown_size()
        defs = svg_codec.defs_to_string(self.definitions.clip_paths, mask_bodies)
        text = svg_codec.svg_to_string(self.version, width, height, self.placements, defs)
        logger.debug(f"Serialized {len(self.placements)} placements at {width}x{height}")
        return text

    def encode(self, resolver: Optional[AssetResolver] = None) -> str:
        return self.to_string(resolver)

    def _resolve_mask_bodies(self, resolver: AssetResolver) -> List[Tuple[str, str]]:
        bodies = []
        for url in self.active_sources():
            try:
                body = resolver(url)
            except AssetResolutionError:
                logger.error(f"Could not resolve asset for {url}")
                raise
            except Exception as e:
                logger.error(f"Could not resolve asset for {url}: {e}")
                raise AssetResolutionError(f"{url}: {e}") from e
            if not isinstance(body, str):
                raise AssetResolutionError(f"{url}: resolver returned {type(body).__name__}, expected str")
            bodies.append((url, body))
        return bodies
