"""
Stamp Document Core - Document Data Model

THE MODEL the editor saves and loads. Owns the placed stamps and the defs
block of one drawing.

This class handles:
- Placements (append, undo/redo as whole values)
- Clip path definitions
- Nominal canvas size
- Markup serialization (from_string/to_string, via the serialization mixin)
- Hit-testing and overlap queries (via the query mixin)

The Document is INDEPENDENT of UI:
- No windowing or rendering imports
- No cursor or selection state
- No undo stack (the editor keeps popped placements itself)

Usage:
    doc = Document.new(800, 600)
    doc.add_placement(Transform.from_box(64, 64), "assets/stamps/larch.bmp")
    text = doc.to_string(resolver)

    doc = Document.from_string(text)
"""

import logging
from typing import List, Optional

from stampsvg.constants import SVG_VERSION, DEFAULT_CANVAS_WIDTH, DEFAULT_CANVAS_HEIGHT, DEFAULT_FILL
from stampsvg.models.color import Color
from stampsvg.models.transform import Transform

from ._internal.records import ClipPath, Definitions, ImageRect, ImageReference, Placement
from .query_mixin import DocumentQueryMixin
from .serialization_mixin import DocumentSerializationMixin


class Document(DocumentSerializationMixin, DocumentQueryMixin):
    """A drawing: version, nominal canvas size, definitions and placements.

    Properties:
        version: document format version text
        width, height: nominal canvas size (encode may grow it)
        definitions: clip paths and mask placeholders
        placements: placed stamps in paint order
        dirty: True when modified since the last save or load
    """

    def __init__(self, width: int = DEFAULT_CANVAS_WIDTH, height: int = DEFAULT_CANVAS_HEIGHT,
                 version: str = SVG_VERSION, definitions: Optional[Definitions] = None,
                 placements: Optional[List[Placement]] = None):
        self._logger = logging.getLogger('Document')
        self.version = version
        self.width = int(width)
        self.height = int(height)
        self.definitions = definitions if definitions is not None else Definitions()
        self.placements = list(placements) if placements is not None else []
        self.dirty = False

    @classmethod
    def new(cls, width: int, height: int) -> 'Document':
        """Empty document with the current format version."""
        return cls(width=width, height=height)

    # ========================================
    # Placements
    # ========================================

    def add_placement(self, transform: Transform, source_url: str, clip_id: str = "",
                      fill: Optional[Color] = None) -> Placement:
        """Append a stamp.

        The image rectangle sits at (0, 0) and spans the transform's local
        box, 2*pivot rounded to whole pixels.

        Args:
            transform: where the stamp lands
            source_url: source image of the stamp
            clip_id: id of a clip path in definitions, "" for none
            fill: stamp color, black when omitted

        Returns:
            The new Placement
        """
        if fill is None:
            fill = Color.from_hex(DEFAULT_FILL)
        rect = ImageRect(
            x=0,
            y=0,
            width=max(0, round(transform.pivot_x * 2.0)),
            height=max(0, round(transform.pivot_y * 2.0)),
            href=ImageReference(source_url=source_url, clip_id=clip_id),
            fill=fill,
        )
        placement = Placement(transform=transform, rect=rect)
        self.placements.append(placement)
        self.dirty = True
        self._logger.debug(f"Added placement {source_url} at {transform}")
        return placement

    def pop_placement(self) -> Optional[Placement]:
        """Remove and return the most recent placement (undo), None if empty."""
        if not self.placements:
            return None
        placement = self.placements.pop()
        self.dirty = True
        self._logger.debug(f"Popped placement {placement.source_url}")
        return placement

    def restore_placement(self, placement: Placement) -> None:
        """Re-append a previously popped placement (redo)."""
        self.placements.append(placement)
        self.dirty = True
        self._logger.debug(f"Restored placement {placement.source_url}")

    # ========================================
    # Definitions and canvas
    # ========================================

    def add_clip_path(self, clip_id: str, polygon) -> ClipPath:
        """Add a clip boundary that placements can reference by id."""
        if self.definitions.has_clip_path(clip_id):
            raise ValueError(f"Clip path '{clip_id}' already defined")
        clip = ClipPath(id=clip_id, polygon=[(float(x), float(y)) for x, y in polygon])
        self.definitions.clip_paths.append(clip)
        self.dirty = True
        self._logger.debug(f"Added clip path {clip_id} with {len(clip.polygon)} points")
        return clip

    def resize(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        self.dirty = True

    # ========================================
    # Comparison
    # ========================================

    def __eq__(self, other) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        return (self.version == other.version
                and self.width == other.width
                and self.height == other.height
                and self.definitions == other.definitions
                and self.placements == other.placements)

    __hash__ = None

    def __repr__(self) -> str:
        return (f"Document(version={self.version!r}, width={self.width}, height={self.height}, "
                f"placements={len(self.placements)}, clip_paths={len(self.definitions.clip_paths)})")
