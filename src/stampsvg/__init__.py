"""
Stamp Document Core

Transform algebra, geometry predicates and the stamp SVG document model used
by the stamp editor.

Usage:
    from stampsvg import Document, Transform

    doc = Document.from_string(text)
    doc.add_placement(Transform.from_box(64, 64).moved(100, 40), "assets/stamps/larch.bmp")
    text = doc.to_string(resolver)
"""

from .models import Transform, Color, Document, Placement, ImageReference, ImageRect, ClipPath, Mask, Definitions
from .utils.geometry import (
    RayHit, PolyIntersection,
    ray_segment_intersect, ray_polygon_intersect, point_inside_polygon,
    segment_overlaps_polygon, convex_polygons_overlap,
)
from .utils.errors import (
    StampError, ParseError, TransformGrammarMismatch, TransformConsistencyError,
    NumericParseError, ColorFormatError, PolygonPointCountError, MarkupStructureError,
    EncodeError, AssetResolutionError,
)

__version__ = '0.1.0'

__all__ = [
    'Transform', 'Color', 'Document', 'Placement', 'ImageReference', 'ImageRect',
    'ClipPath', 'Mask', 'Definitions',
    'RayHit', 'PolyIntersection',
    'ray_segment_intersect', 'ray_polygon_intersect', 'point_inside_polygon',
    'segment_overlaps_polygon', 'convex_polygons_overlap',
    'StampError', 'ParseError', 'TransformGrammarMismatch', 'TransformConsistencyError',
    'NumericParseError', 'ColorFormatError', 'PolygonPointCountError', 'MarkupStructureError',
    'EncodeError', 'AssetResolutionError',
]
