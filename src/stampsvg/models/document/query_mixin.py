"""
Query Mixin for Document Model

Read-only queries the editor uses for hit-testing and layout:
- Which source images are in use
- Canvas size after growth
- Which placement lies under a point
- Which placement a dragged segment runs into, and how to push it out
- Which placements a candidate transform would overlap

Outline lookups are injected: ``outlines`` is any callable mapping a
source url to its local-frame polygon (see services.outline_loader).
"""

import math
from typing import Callable, List, Optional, Sequence, Tuple

from stampsvg.models.transform import Transform
from stampsvg.utils.geometry import (
    PolyIntersection, convex_polygons_overlap, point_inside_polygon, segment_overlaps_polygon,
)
from ._internal.records import Placement

Point = Tuple[float, float]
OutlineLookup = Callable[[str], Sequence[Point]]

_U32_MAX = 2 ** 32 - 1


def _truncate_unsigned(value: float) -> int:
    """Saturating float -> u32 conversion (NaN and negatives become 0)."""
    if math.isnan(value) or value <= 0.0:
        return 0
    if value >= _U32_MAX:
        return _U32_MAX
    return int(value)


class DocumentQueryMixin:
    """Mixin providing query API for Document

    This mixin assumes the class has:
    - self.width, self.height
    - self.placements: List[Placement]
    """

    # ========================================
    # Document-level queries
    # ========================================

    def active_sources(self) -> List[str]:
        """Distinct source urls of all placements, sorted."""
        return sorted({p.source_url for p in self.placements})

    def grown_size(self) -> Tuple[int, int]:
        """Canvas size large enough for every placement.

        Per placement the extent on each axis is
        translate + |pivot| + pivot, truncated to an unsigned integer. The
        result never shrinks below the nominal size.
        """
        max_width = self.width
        max_height = self.height
        for placement in self.placements:
            t = placement.transform
            diag = math.sqrt(t.pivot_x * t.pivot_x + t.pivot_y * t.pivot_y)
            max_width = max(max_width, _truncate_unsigned(t.translate_x + diag + t.pivot_x))
            max_height = max(max_height, _truncate_unsigned(t.translate_y + diag + t.pivot_y))
        return (max_width, max_height)

    # ========================================
    # Hit-testing
    # ========================================

    def placement_at(self, point: Point, outlines: OutlineLookup) -> Optional[Placement]:
        """Topmost placement whose outline contains ``point``."""
        for placement in reversed(self.placements):
            outline = outlines(placement.source_url)
            if len(outline) == 0:
                continue
            if point_inside_polygon(point, (1.0, 0.0), placement.transform, outline) is not None:
                return placement
        return None

    def first_segment_overlap(self, a: Point, b: Point, outward_hint: Point,
                              outlines: OutlineLookup) -> Optional[Tuple[Placement, PolyIntersection]]:
        """First placement, in paint order, that segment a-b overlaps.

        Returns:
            (placement, intersection) where intersection.outward moves the
            segment clear of that placement, or None
        """
        for placement in self.placements:
            outline = outlines(placement.source_url)
            if len(outline) == 0:
                continue
            hit = segment_overlaps_polygon(a, b, placement.transform, outline, outward_hint)
            if hit is not None:
                return (placement, hit)
        return None

    def overlapping_placements(self, transform: Transform) -> List[Placement]:
        """Placements whose bounding boxes overlap ``transform``'s box."""
        box = transform.bounding_box()
        return [p for p in self.placements
                if convex_polygons_overlap(box, p.transform.bounding_box())]
