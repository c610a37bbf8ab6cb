"""
Document internals - records and the markup codec.

External code should go through Document (from_string / to_string) rather
than calling the codec functions directly.
"""

from .records import ImageReference, ImageRect, Placement, ClipPath, Mask, Definitions

__all__ = ['ImageReference', 'ImageRect', 'Placement', 'ClipPath', 'Mask', 'Definitions']
