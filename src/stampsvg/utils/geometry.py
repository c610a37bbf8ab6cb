"""
Stamp Document Core - Geometry Predicates

Ray/segment and ray/polygon intersection, segment-vs-polygon overlap with an
outward displacement, and a separating-axis overlap test for convex
polygons. Used by the editor for hit-testing stamps and generating clips.

Points are plain (x, y) tuples. Polygons are sequences of points forming a
closed loop; the last point connects back to the first.

None of these functions raise for "no result": they return None / False.
Degenerate input that would need a division by zero falls into the
no-intersection branch. NaN/inf from other degenerate divisions is passed
through as-is.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from stampsvg.constants import PARALLEL_EPSILON, GRAZE_PERTURBATION
from stampsvg.models.transform import Transform

Point = Tuple[float, float]


@dataclass(frozen=True)
class RayHit:
    """Nearest ray parameter and inside/outside parity for a ray cast."""
    t: float
    inside: bool


@dataclass(frozen=True)
class PolyIntersection:
    """Displacement that moves an overlapping segment out of a polygon."""
    outward: Point


# ========================================
# Vector helpers
# ========================================

def dot2d(a: Point, b: Point) -> float:
    return a[0] * b[0] + a[1] * b[1]


def scale2d(a: Point, b: float) -> Point:
    return (a[0] * b, a[1] * b)


def sub2d(a: Point, b: Point) -> Point:
    return (a[0] - b[0], a[1] - b[1])


def add2d(a: Point, b: Point) -> Point:
    return (a[0] + b[0], a[1] + b[1])


# ========================================
# Ray casting
# ========================================

def ray_segment_intersect(origin: Point, direction: Point, a: Point, b: Point) -> Optional[float]:
    """Parameter t >= 0 where origin + t*direction crosses segment [a, b).

    The segment end ``b`` is excluded so a ray through a shared vertex of two
    consecutive edges counts once.

    Parallel segments (|dot(b-a, perp(direction))| < 1e-10) are only resolved
    for an exactly vertical ray on the same x as ``a``; other parallel or
    collinear cases return None. That is a known limitation, not handled.
    """
    v1 = (origin[0] - a[0], origin[1] - a[1])
    v2 = (b[0] - a[0], b[1] - a[1])
    v3 = (-direction[1], direction[0])
    len_v2_cross_v1 = v2[0] * v1[1] - v2[1] * v1[0]
    dot_v2_v3 = dot2d(v2, v3)
    if not (dot_v2_v3 >= PARALLEL_EPSILON or dot_v2_v3 <= -PARALLEL_EPSILON):
        if direction[0] == 0.0:
            # Vertical ray: only a segment starting on the ray's x can touch it
            if a[0] != origin[0] or direction[1] == 0.0:
                return None
            ta = (a[1] - origin[1]) / direction[1]
            tb = (b[1] - origin[1]) / direction[1]
            if ta >= 0.0 and tb >= 0.0:
                return min(ta, tb)
            if (ta >= 0.0) != (tb >= 0.0):
                # origin lies in the middle of the segment
                return 0.0
            return None
        return None

    t1 = len_v2_cross_v1 / dot_v2_v3
    t2 = dot2d(v1, v3) / dot_v2_v3
    if 0.0 <= t2 < 1.0 and t1 >= 0.0:
        return t1
    return None


def _cast_ray(origin: Point, direction: Point, poly_transform: Transform,
              poly: Sequence[Point]) -> Optional[RayHit]:
    """Single cast against every transformed edge, no degeneracy fallback."""
    if len(poly) == 0:
        return None
    last = poly_transform.forward(poly[-1])
    hit_count = 0
    nearest = None
    for point in poly:
        current = poly_transform.forward(point)
        t = ray_segment_intersect(origin, direction, last, current)
        if t is not None:
            nearest = t if nearest is None else min(t, nearest)
            hit_count += 1
        last = current
    if nearest is None:
        return None
    return RayHit(t=nearest, inside=(hit_count & 1) == 1)


def _recheck_from_perturbed_origin(origin: Point, direction: Point, poly_transform: Transform,
                                   poly: Sequence[Point]) -> Optional[RayHit]:
    """Cast again from a slightly shifted origin.

    Heuristic for rays that graze a vertex and get the parity wrong. It is
    not a robust predicate; clip generation relies on the exact offset.
    """
    shifted = (origin[0] + GRAZE_PERTURBATION[0], origin[1] + GRAZE_PERTURBATION[1])
    return _cast_ray(shifted, direction, poly_transform, poly)


def ray_polygon_intersect(origin: Point, direction: Point, poly_transform: Transform,
                          poly: Sequence[Point]) -> Optional[RayHit]:
    """Nearest hit of a ray against a transformed polygon, with inside parity.

    An "inside" answer is double-checked from a perturbed origin: if that
    cast misses entirely the result is None, if it says outside the first
    hit is kept but reported as outside.
    """
    ret = _cast_ray(origin, direction, poly_transform, poly)
    if ret is None:
        return None
    if ret.inside:
        backup_check = _recheck_from_perturbed_origin(origin, direction, poly_transform, poly)
        if backup_check is None:
            return None
        if not backup_check.inside:
            return RayHit(t=ret.t, inside=False)
    return ret


def point_inside_polygon(point: Point, direction: Point, poly_transform: Transform,
                         poly: Sequence[Point]) -> Optional[float]:
    """Ray parameter of the exit hit if ``point`` is inside, else None."""
    hit = ray_polygon_intersect(point, direction, poly_transform, poly)
    if hit is not None and hit.inside:
        return hit.t
    return None


# ========================================
# Segment vs polygon
# ========================================

def segment_overlaps_polygon(a: Point, b: Point, poly_transform: Transform, poly: Sequence[Point],
                             up: Point) -> Optional[PolyIntersection]:
    """Whether segment a-b overlaps the polygon, and how to push it out.

    Both endpoints are ray-tested toward each other:

    - both inside: test the midpoint, then a, then b along ``up``; the first
      candidate that is inside gives ``up * t``
    - neither inside but a hit within the segment: the segment spans a
      corner; the displacement comes from whichever end pierced first
    - only one inside: displacement from the partial intersection parameter

    The branches below keep their own arithmetic; they differ on
    boundary/coincident input and callers depend on those exact values.
    """
    a_hit = ray_polygon_intersect(a, sub2d(b, a), poly_transform, poly)
    b_hit = ray_polygon_intersect(b, sub2d(a, b), poly_transform, poly)
    if a_hit is None and b_hit is None:
        return None
    a_inside = a_hit.inside if a_hit is not None else False
    b_inside = b_hit.inside if b_hit is not None else False
    # Parameter used for the partial-overlap displacement when a cast missed
    a_t_or_one = a_hit.t if a_hit is not None else 1.0
    b_t_or_one = b_hit.t if b_hit is not None else 1.0

    if a_inside and b_inside:
        middle = ((a[0] + b[0]) * 0.5, (a[1] + b[1]) * 0.5)
        for candidate in (middle, a, b):
            w = point_inside_polygon(candidate, up, poly_transform, poly)
            if w is not None:
                return PolyIntersection(outward=(up[0] * w, up[1] * w))
        # no candidate was inside; fall through to the single-endpoint case

    first_hit = a_hit if a_hit is not None else b_hit
    if not a_inside and not b_inside and first_hit.t <= 1.0:
        # segment spans a corner but neither end is inside
        a_t = a_hit.t if a_hit is not None else 2.0
        b_t = b_hit.t if b_hit is not None else 2.0
        if a_t < b_t:
            return PolyIntersection(outward=sub2d(add2d(b, scale2d(sub2d(a, b), b_t_or_one)), a))
        return PolyIntersection(outward=sub2d(add2d(a, scale2d(sub2d(b, a), a_t_or_one)), b))

    if a_inside:
        return PolyIntersection(outward=sub2d(add2d(b, scale2d(sub2d(a, b), b_t_or_one)), a))
    if b_inside:
        return PolyIntersection(outward=sub2d(add2d(b, scale2d(sub2d(a, b), b_t_or_one)), b))
    return None


# ========================================
# Separating axis test
# ========================================

def _has_separating_axis(a: np.ndarray, b: np.ndarray) -> bool:
    """True if some edge normal of ``a`` separates the two vertex sets."""
    edges = np.roll(a, -1, axis=0) - a
    # perpendicular of each edge (p1 - p0): (dy, -dx)
    axes = np.column_stack((edges[:, 1], -edges[:, 0]))
    proj_a = a @ axes.T
    proj_b = b @ axes.T
    separated = (proj_a.max(axis=0) < proj_b.min(axis=0)) | (proj_b.max(axis=0) < proj_a.min(axis=0))
    return bool(separated.any())


def convex_polygons_overlap(a: Sequence[Point], b: Sequence[Point]) -> bool:
    """Separating-axis overlap test for two convex polygons.

    Overlap iff no edge normal of either polygon separates them. Touching
    polygons (projection intervals sharing an end) count as overlapping.
    """
    if len(a) == 0 or len(b) == 0:
        return False
    pa = np.asarray(a, dtype=np.float64).reshape(-1, 2)
    pb = np.asarray(b, dtype=np.float64).reshape(-1, 2)
    return not _has_separating_axis(pa, pb) and not _has_separating_axis(pb, pa)
