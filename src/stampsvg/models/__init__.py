"""
Stamp Document Core - Data Models

Transform and Color are plain value types; Document is the scene that gets
saved. Public API: import from stampsvg.models.

Transform and Color must be imported before the document package, which
depends on both.
"""

from .transform import Transform, compose, forward, inverse
from .color import Color
from .document import Document, Placement, ImageReference, ImageRect, ClipPath, Mask, Definitions

__all__ = [
    'Transform', 'compose', 'forward', 'inverse',
    'Color',
    'Document', 'Placement', 'ImageReference', 'ImageRect', 'ClipPath', 'Mask', 'Definitions',
]
