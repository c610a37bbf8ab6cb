"""Document model mixins package"""

from .query_mixin import DocumentQueryMixin
from .serialization_mixin import DocumentSerializationMixin
from .core import Document
from ._internal.records import ImageReference, ImageRect, Placement, ClipPath, Mask, Definitions

__all__ = [
    'Document',
    'ImageReference',
    'ImageRect',
    'Placement',
    'ClipPath',
    'Mask',
    'Definitions',
    'DocumentQueryMixin',
    'DocumentSerializationMixin',
]
