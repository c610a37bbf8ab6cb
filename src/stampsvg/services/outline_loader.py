"""
Asset outline loader.

Turns a per-asset sub-document into a single hit-test polygon. Only the
first top-level <g> is read; its direct polygon, rect, ellipse and circle
children are joined (in that type order) into one vertex loop and mapped
through the group's transform. Masks, fills and everything else in the
sub-document are ignored.

Joining keeps the loop closed: each shape after the first is followed by
the vertex the loop ended on before it, so the parity rule still sees one
polygon.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from stampsvg.constants import ELLIPSE_RESOLUTION
from stampsvg.models.transform import Transform
from stampsvg.utils.errors import MarkupStructureError
from stampsvg.utils.svg_text import parse_float, unpack_polygon_points

logger = logging.getLogger(__name__)

Point = Tuple[float, float]

SHAPE_ORDER = ('polygon', 'rect', 'ellipse', 'circle')


def _local_name(tag: str) -> str:
    if tag.startswith('{'):
        return tag.split('}', 1)[1]
    return tag


def _number(element: ET.Element, name: str) -> float:
    value = element.get(name)
    if value is None:
        raise MarkupStructureError(f"<{_local_name(element.tag)}> missing attribute '{name}'")
    return parse_float(value)


def ellipse_points(cx: float, cy: float, rx: float, ry: float,
                   resolution: int = ELLIPSE_RESOLUTION) -> List[Point]:
    """Sample an ellipse at ``resolution`` evenly spaced angles starting at 0."""
    angles = np.arange(resolution, dtype=np.float64) * np.pi * 2.0 / resolution
    xs = cx + rx * np.cos(angles)
    ys = cy + ry * np.sin(angles)
    return [(float(x), float(y)) for x, y in zip(xs, ys)]


def rect_points(x: float, y: float, width: float, height: float) -> List[Point]:
    return [(x, y), (x + width, y), (x + width, y + height), (x, y + height)]


def _shape_points(element: ET.Element, kind: str) -> List[Point]:
    if kind == 'polygon':
        points = element.get('points')
        if points is None:
            raise MarkupStructureError("<polygon> missing attribute 'points'")
        return unpack_polygon_points(points)
    if kind == 'rect':
        return rect_points(_number(element, 'x'), _number(element, 'y'),
                           _number(element, 'width'), _number(element, 'height'))
    if kind == 'ellipse':
        return ellipse_points(_number(element, 'cx'), _number(element, 'cy'),
                              _number(element, 'rx'), _number(element, 'ry'))
    r = _number(element, 'r')
    return ellipse_points(_number(element, 'cx'), _number(element, 'cy'), r, r)


def poly_join(outline: List[Point], shape: List[Point]) -> None:
    """Append ``shape`` to ``outline``, bridging back to the previous end vertex."""
    if not outline:
        outline.extend(shape)
        return
    last = outline[-1]
    outline.extend(shape)
    outline.append(last)


def outline_from_string(text: str) -> List[Point]:
    """Hit-test polygon for an asset sub-document, in the stamp's local frame.

    Returns an empty list when the sub-document has no top-level <g>.

    Raises:
        MarkupStructureError: markup is malformed or a shape lacks geometry
        NumericParseError, PolygonPointCountError: bad shape numbers
        TransformGrammarMismatch, TransformConsistencyError: bad group transform
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise MarkupStructureError(f"malformed asset markup: {e}") from e

    group = next((child for child in root if _local_name(child.tag) == 'g'), None)
    if group is None:
        return []

    transform_text = group.get('transform')
    transform = Transform.from_string(transform_text) if transform_text is not None else Transform()

    outline: List[Point] = []
    for kind in SHAPE_ORDER:
        for child in group:
            if _local_name(child.tag) == kind:
                poly_join(outline, _shape_points(child, kind))
    return transform.forward_points(outline)


class OutlineCache:
    """Memoized outlines per source url.

    Args:
        resolver: callable mapping a source url to its sub-document text

    Instances are callable, so they can be passed directly as the
    ``outlines`` argument of the Document queries.
    """

    def __init__(self, resolver: Callable[[str], str]):
        self._resolver = resolver
        self._outlines: Dict[str, List[Point]] = {}

    def get(self, url: str) -> List[Point]:
        outline = self._outlines.get(url)
        if outline is None:
            outline = outline_from_string(self._resolver(url))
            logger.debug(f"Loaded outline for {url}: {len(outline)} vertices")
            self._outlines[url] = outline
        return outline

    __call__ = get

    def clear(self, url: Optional[str] = None) -> None:
        if url is None:
            self._outlines.clear()
        else:
            self._outlines.pop(url, None)

    def __contains__(self, url: str) -> bool:
        return url in self._outlines

    def __len__(self) -> int:
        return len(self._outlines)
