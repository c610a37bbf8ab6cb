"""
Stamp Document Core - Color Domain Model

Fill color of a placed stamp. Canonical text form is exactly seven ASCII
characters, '#rrggbb', lowercase on output.
"""

import string

from stampsvg.utils.errors import ColorFormatError

_HEX_DIGITS = set(string.hexdigits)


class Color:
    """Immutable RGB color with uint8 storage.

    Internal storage: _r, _g, _b (0-255). Equality and hashing are by value,
    so colors can be compared field-for-field after a document round trip.
    """

    __slots__ = ('_r', '_g', '_b')

    def __init__(self, r: int, g: int, b: int):
        """Direct construction from RGB uint8 values (0-255).

        Args:
            r: Red component (0-255)
            g: Green component (0-255)
            b: Blue component (0-255)
        """
        for component in (r, g, b):
            if not 0 <= int(component) <= 255:
                raise ValueError(f"color component out of range: {component}")
        self._r = int(r)
        self._g = int(g)
        self._b = int(b)

    @property
    def r(self) -> int:
        """Red component (0-255) - READ ONLY"""
        return self._r

    @property
    def g(self) -> int:
        """Green component (0-255) - READ ONLY"""
        return self._g

    @property
    def b(self) -> int:
        """Blue component (0-255) - READ ONLY"""
        return self._b

    # ========================================
    # Output Methods
    # ========================================

    def to_hex(self) -> str:
        """Convert to the document form: #rrggbb (lowercase)."""
        return f"#{self._r:02x}{self._g:02x}{self._b:02x}"

    # ========================================
    # Static Factory Methods
    # ========================================

    @staticmethod
    def from_hex(hex_string: str) -> 'Color':
        """Create Color from '#rrggbb' (either case).

        Raises:
            ColorFormatError: non-ASCII text, length other than 7, missing '#',
                or a digit group that is not base 16
        """
        if not isinstance(hex_string, str):
            raise ColorFormatError(f"{hex_string!r}: not a string")
        if not hex_string.isascii():
            raise ColorFormatError(f"{hex_string!r}: non-ASCII color")
        if len(hex_string) != 7:
            raise ColorFormatError(f"{hex_string!r}: is not 7 long")
        if hex_string[0] != '#':
            raise ColorFormatError(f"{hex_string!r}: does not begin with #")

        channels = []
        for start in (1, 3, 5):
            group = hex_string[start:start + 2]
            if not all(c in _HEX_DIGITS for c in group):
                raise ColorFormatError(f"{group!r} not base 16")
            channels.append(int(group, 16))
        return Color(*channels)

    # ========================================
    # Equality and Hashing
    # ========================================

    def __eq__(self, other) -> bool:
        if not isinstance(other, Color):
            return NotImplemented
        return self._r == other._r and self._g == other._g and self._b == other._b

    def __hash__(self) -> int:
        return hash((self._r, self._g, self._b))

    def __repr__(self) -> str:
        return f"Color({self._r}, {self._g}, {self._b})"

    def __str__(self) -> str:
        return self.to_hex()
