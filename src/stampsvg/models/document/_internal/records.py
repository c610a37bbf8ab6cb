"""Record types held by a Document: placements and their definitions"""

from dataclasses import dataclass, field
from typing import List, Tuple

from stampsvg.models.color import Color
from stampsvg.models.transform import Transform

Point = Tuple[float, float]


@dataclass(frozen=True)
class ImageReference:
    """Which source image, and which optional clip boundary, a placement uses.

    Equal references are interchangeable for render caching.
    """
    source_url: str
    clip_id: str = ""

    @property
    def has_clip(self) -> bool:
        return self.clip_id != ""


@dataclass(frozen=True)
class ImageRect:
    """The ``rect`` element inside a placement, in the placement's local frame."""
    x: int
    y: int
    width: int
    height: int
    href: ImageReference
    fill: Color


@dataclass(frozen=True)
class Placement:
    """One stamp on the canvas (a ``g`` element)."""
    transform: Transform
    rect: ImageRect

    @property
    def source_url(self) -> str:
        return self.rect.href.source_url

    @property
    def clip_id(self) -> str:
        return self.rect.href.clip_id


@dataclass
class ClipPath:
    id: str
    polygon: List[Point] = field(default_factory=list)


@dataclass(frozen=True)
class Mask:
    """Placeholder for a per-asset sub-document, resolved when encoding."""
    id: str


@dataclass
class Definitions:
    """Contents of the ``defs`` block."""
    clip_paths: List[ClipPath] = field(default_factory=list)
    masks: List[Mask] = field(default_factory=list)

    def clip_path(self, clip_id: str) -> ClipPath:
        for clip in self.clip_paths:
            if clip.id == clip_id:
                return clip
        raise KeyError(clip_id)

    def has_clip_path(self, clip_id: str) -> bool:
        return any(clip.id == clip_id for clip in self.clip_paths)
