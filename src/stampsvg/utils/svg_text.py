"""
Attribute-level text helpers for the stamp SVG dialect.

Number printing/parsing, attribute escaping, the packed polygon point list
and url(#...) references. Shared by the transform grammar and the document
codec so both print numbers the same way.
"""

import re
from typing import List, Tuple

from stampsvg.constants import ATTR_ESCAPES
from stampsvg.utils.errors import NumericParseError, PolygonPointCountError, MarkupStructureError

_FLOAT_RE = re.compile(
    r'[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|[+-]?(?:inf|infinity|nan)',
    re.IGNORECASE,
)
_INT_RE = re.compile(r'[+-]?\d+')
_UNSIGNED_RE = re.compile(r'\+?\d+')
_URL_RE = re.compile(r'\s*url\(#(.+)\)\s*')


def format_number(value: float) -> str:
    """Shortest text that parses back to exactly ``value``.

    Integral values print without a fractional part ("64", "-64"), everything
    else uses repr ("4.25", "0.1").
    """
    value = float(value)
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


def parse_float(token: str) -> float:
    """Parse a float token, rejecting anything float() would be lenient about."""
    text = token.strip()
    if not _FLOAT_RE.fullmatch(text):
        raise NumericParseError(f"invalid float literal: {token!r}")
    return float(text)


def parse_int(token: str, unsigned: bool = False) -> int:
    """Parse an integer attribute value (optionally unsigned)."""
    text = token.strip()
    pattern = _UNSIGNED_RE if unsigned else _INT_RE
    if not pattern.fullmatch(text):
        kind = "unsigned integer" if unsigned else "integer"
        raise NumericParseError(f"invalid {kind} literal: {token!r}")
    return int(text)


def attr_escape(value: str) -> str:
    """Escape the five markup-significant characters in an attribute value."""
    if not any(c in ATTR_ESCAPES for c in value):
        return value
    return ''.join(ATTR_ESCAPES.get(c, c) for c in value)


def pack_polygon_points(points: List[Tuple[float, float]]) -> str:
    """Encode points as "x y,x y,..." """
    return ','.join(f"{format_number(x)} {format_number(y)}" for x, y in points)


def unpack_polygon_points(text: str) -> List[Tuple[float, float]]:
    """Decode a packed point list.

    Pairs are comma separated and coordinates whitespace separated, so
    "1 2,3 4, 5 6" is valid.

    Raises:
        PolygonPointCountError: a pair does not have exactly two tokens
        NumericParseError: a coordinate is not a number
    """
    points = []
    for pair in text.split(','):
        coords = pair.split()
        if len(coords) != 2:
            raise PolygonPointCountError(
                f"expected 2 coordinates per point, got {len(coords)} in {pair!r}"
            )
        points.append((parse_float(coords[0]), parse_float(coords[1])))
    return points


def format_url_reference(target: str) -> str:
    return f"url(#{target})"


def parse_url_reference(value: str) -> str:
    """Extract the target of a ``url(#target)`` attribute value."""
    match = _URL_RE.fullmatch(value)
    if not match:
        raise MarkupStructureError(f"expected url(#...) reference, got {value!r}")
    return match.group(1)
