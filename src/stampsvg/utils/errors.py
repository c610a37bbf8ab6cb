"""Typed errors for the stamp document core.

Decode-path errors derive from ParseError (also a ValueError, so callers that
already catch ValueError around parsing keep working). Encode-path errors
derive from EncodeError.
"""


class StampError(Exception):
    """Base error for the project."""


class ParseError(StampError, ValueError):
    """Text could not be decoded into a model value."""


class TransformGrammarMismatch(ParseError):
    """Transform text does not match the five-slot grammar."""


class TransformConsistencyError(ParseError):
    """Trailing translate is not the negation of the pivot translate."""


class NumericParseError(ParseError):
    """A float or integer token failed to parse."""


class ColorFormatError(ParseError):
    """Color text is not a 7 character ASCII '#rrggbb' value."""


class PolygonPointCountError(ParseError):
    """A polygon coordinate pair did not have exactly two components."""


class MarkupStructureError(ParseError):
    """Unexpected or missing element/attribute in document markup."""


class EncodeError(StampError):
    """Document could not be serialized."""


class AssetResolutionError(EncodeError):
    """A per-asset sub-document could not be read."""
