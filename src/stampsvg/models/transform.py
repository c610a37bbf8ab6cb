"""Transform data structure for stamp placement.

A stamp is drawn in its own local frame, a box spanning [0, 2*pivot]. The
Transform maps that frame onto the canvas: rotate (clockwise-positive
degrees) and uniformly scale about the pivot, then translate.

In the document the transform is stored as up to five chained SVG
operations:

    scale(s) translate(tx, ty) translate(px, py) rotate(deg) translate(-px, -py)

Each term is only written when it differs from identity. ``from_string``
decomposes that text back into the independent fields, exactly.
"""
import math
import re
from dataclasses import dataclass, replace
from typing import List, Tuple

from stampsvg.utils.errors import TransformGrammarMismatch, TransformConsistencyError
from stampsvg.utils.svg_text import format_number, parse_float

Point = Tuple[float, float]

# Slot 3 (the pivot translate) is lazy so that a lone "translate ... translate"
# pair lands in slots 2 and 5; the fold-back rule in from_string handles it.
_TRANSFORM_RE = re.compile(
    r'\s*'
    r'(?:scale\(\s*([^\)]+)\)\s*)?'
    r'(?:translate\(\s*([^,\)]+),\s*([^\)]+)\)\s*)?'
    r'(?:translate\(\s*([^,\)]+),\s*([^\)]+)\)\s*)??'
    r'(?:rotate\(\s*([^\)]+)\)\s*)?'
    r'(?:translate\(\s*([^,\)]+),\s*([^\)]+)\)\s*)?'
)


@dataclass(frozen=True)
class Transform:
    """Uniform scale + rotation about a pivot, followed by a translation.

    Attributes:
        pivot_x, pivot_y: centre of the local unrotated box (local units)
        rotation_degrees: clockwise-positive rotation
        translate_x, translate_y: offset applied after rotation and scale
        scale: uniform scale factor, assumed > 0
    """
    pivot_x: float = 0.0
    pivot_y: float = 0.0
    rotation_degrees: float = 0.0
    translate_x: float = 0.0
    translate_y: float = 0.0
    scale: float = 1.0

    # ========================================
    # Construction
    # ========================================

    @classmethod
    def from_box(cls, width: float, height: float, rotation_degrees: float = 0.0) -> 'Transform':
        """Transform for a width x height stamp, pivot at the box centre.

        Rotation is wrapped into [0, 360) here and nowhere else.
        """
        return cls(
            pivot_x=width / 2.0,
            pivot_y=height / 2.0,
            rotation_degrees=rotation_degrees % 360.0,
        )

    @classmethod
    def identity(cls) -> 'Transform':
        return cls()

    def moved(self, dx: float, dy: float) -> 'Transform':
        return replace(self, translate_x=self.translate_x + dx, translate_y=self.translate_y + dy)

    def rotated(self, degrees: float) -> 'Transform':
        # No wrapping during accumulation
        return replace(self, rotation_degrees=self.rotation_degrees + degrees)

    def scaled(self, factor: float) -> 'Transform':
        return replace(self, scale=self.scale * factor)

    # ========================================
    # Point mapping
    # ========================================

    def forward(self, p: Point) -> Point:
        """Map a point from the local frame to the placed (canvas) frame."""
        centered_x = p[0] - self.pivot_x
        centered_y = p[1] - self.pivot_y
        if self.rotation_degrees != 0.0:
            rotate_rad = -self.rotation_degrees * math.pi / 180.0
            rotated_x = centered_x * math.cos(rotate_rad) + centered_y * math.sin(rotate_rad)
            rotated_y = -centered_x * math.sin(rotate_rad) + centered_y * math.cos(rotate_rad)
        else:
            rotated_x, rotated_y = centered_x, centered_y
        scaled_x = rotated_x * self.scale
        scaled_y = rotated_y * self.scale
        recentered_x = scaled_x + self.pivot_x
        recentered_y = scaled_y + self.pivot_y
        return (recentered_x + self.translate_x, recentered_y + self.translate_y)

    def inverse(self, p: Point) -> Point:
        """Map a canvas point back into the local frame (inverse of forward)."""
        untranslated_x = p[0] - self.translate_x
        untranslated_y = p[1] - self.translate_y
        recentered_x = untranslated_x - self.pivot_x
        recentered_y = untranslated_y - self.pivot_y
        unscaled_x = recentered_x / self.scale
        unscaled_y = recentered_y / self.scale
        rotate_rad = self.rotation_degrees * math.pi / 180.0
        rotated_x = unscaled_x * math.cos(rotate_rad) + unscaled_y * math.sin(rotate_rad)
        rotated_y = -unscaled_x * math.sin(rotate_rad) + unscaled_y * math.cos(rotate_rad)
        return (rotated_x + self.pivot_x, rotated_y + self.pivot_y)

    def forward_points(self, points) -> List[Point]:
        return [self.forward(p) for p in points]

    def bounding_box(self) -> List[Point]:
        """Placed corners of the local box: top-left, bottom-left, bottom-right, top-right."""
        width = self.pivot_x * 2.0
        height = self.pivot_y * 2.0
        return [
            self.forward((0.0, 0.0)),
            self.forward((0.0, height)),
            self.forward((width, height)),
            self.forward((width, 0.0)),
        ]

    def compose(self, inner: 'Transform') -> 'Transform':
        """Transform equivalent to applying ``inner`` inside this one's frame."""
        return compose(self, inner)

    # ========================================
    # Text encoding
    # ========================================

    def to_string(self) -> str:
        """Encode as the chained SVG transform attribute value."""
        components = []
        has_pivot = self.pivot_x != 0.0 or self.pivot_y != 0.0
        if self.scale != 1.0:
            components.append(f"scale({format_number(self.scale)})")
        if self.translate_x != 0.0 or self.translate_y != 0.0:
            components.append(f"translate({format_number(self.translate_x)}, {format_number(self.translate_y)})")
        if has_pivot:
            components.append(f"translate({format_number(self.pivot_x)}, {format_number(self.pivot_y)})")
        if self.rotation_degrees != 0.0:
            components.append(f"rotate({format_number(self.rotation_degrees)})")
        if has_pivot:
            components.append(f"translate({format_number(-self.pivot_x)}, {format_number(-self.pivot_y)})")
        return ' '.join(components)

    @classmethod
    def from_string(cls, text: str) -> 'Transform':
        """Decode transform attribute text.

        Raises:
            TransformGrammarMismatch: text is not in the five-slot form
            NumericParseError: a numeric group is not a number
            TransformConsistencyError: the trailing translate does not undo the pivot
        """
        match = _TRANSFORM_RE.fullmatch(text)
        if match is None:
            raise TransformGrammarMismatch(f"No matches for {text!r}")
        (scale, tx, ty, pivot_x, pivot_y, rotate, inv_x, inv_y) = match.groups()

        fields = {'scale': 1.0, 'translate_x': 0.0, 'translate_y': 0.0,
                  'pivot_x': 0.0, 'pivot_y': 0.0, 'rotation_degrees': 0.0}
        if scale is not None:
            fields['scale'] = parse_float(scale)
        if tx is not None:
            fields['translate_x'] = parse_float(tx)
            fields['translate_y'] = parse_float(ty)
        if pivot_x is not None:
            fields['pivot_x'] = parse_float(pivot_x)
            fields['pivot_y'] = parse_float(pivot_y)
        ix = iy = 0.0
        if inv_x is not None:
            ix = parse_float(inv_x)
            iy = parse_float(inv_y)

        if fields['pivot_x'] != -ix or fields['pivot_y'] != -iy:
            # Fold-back: "translate(a, b) ... translate(-a, -b)" with no explicit pivot term
            if (fields['pivot_x'] == 0.0 and fields['pivot_y'] == 0.0
                    and fields['translate_x'] == -ix and fields['translate_y'] == -iy):
                fields['pivot_x'] = fields['translate_x']
                fields['pivot_y'] = fields['translate_y']
                fields['translate_x'] = 0.0
                fields['translate_y'] = 0.0
            else:
                raise TransformConsistencyError(
                    f"translate({fields['pivot_x']}, {fields['pivot_y']}) != "
                    f"-translate({ix}, {iy}) in {text!r}"
                )

        if rotate is not None:
            fields['rotation_degrees'] = parse_float(rotate)
        return cls(**fields)

    def __str__(self) -> str:
        return self.to_string()


def compose(outer: Transform, inner: Transform) -> Transform:
    """Apply ``inner`` in ``outer``'s frame. Not commutative."""
    tx, ty = outer.forward((inner.translate_x, inner.translate_y))
    return Transform(
        pivot_x=inner.pivot_x,
        pivot_y=inner.pivot_y,
        rotation_degrees=outer.rotation_degrees + inner.rotation_degrees,
        translate_x=tx,
        translate_y=ty,
        scale=outer.scale * inner.scale,
    )


def forward(t: Transform, p: Point) -> Point:
    return t.forward(p)


def inverse(t: Transform, p: Point) -> Point:
    return t.inverse(p)
