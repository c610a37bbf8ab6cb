"""
Stamp SVG markup codec - INTERNAL IMPLEMENTATION ONLY

Reads and writes the narrow SVG dialect the editor saves. This is not a
general SVG parser: only the elements and attributes below are accepted,
anything else raises MarkupStructureError.

    <svg version width height xmlns>
      <g transform>                       (zero or more)
        <rect x y width height fill mask [clip-path]/>
      </g>
      <defs>                              (at most one)
        <clipPath id><polygon points/></clipPath>
        <mask id>...</mask>               (body is not inspected)
      </defs>
    </svg>

Use Document.from_string() / Document.to_string() instead of calling
these functions directly.
"""

import xml.etree.ElementTree as ET
from typing import Dict, Iterable, List, Optional, Set, Tuple

from stampsvg.constants import SVG_XMLNS
from stampsvg.models.color import Color
from stampsvg.models.transform import Transform
from stampsvg.utils.errors import MarkupStructureError
from stampsvg.utils.svg_text import (
    attr_escape, format_url_reference, pack_polygon_points, parse_int,
    parse_url_reference, unpack_polygon_points,
)
from .records import ClipPath, ImageRect, ImageReference, Mask, Placement

_NS_PREFIX = '{' + SVG_XMLNS + '}'

ROOT_ATTRIBUTES = {'version', 'width', 'height'}
G_ATTRIBUTES = {'transform'}
RECT_ATTRIBUTES = {'x', 'y', 'width', 'height', 'fill', 'mask'}
RECT_OPTIONAL_ATTRIBUTES = {'clip-path'}


# ========================================
# Decoding
# ========================================

def _local_name(element: ET.Element) -> str:
    """Element tag without the SVG namespace; other namespaces are rejected."""
    tag = element.tag
    if not isinstance(tag, str):
        raise MarkupStructureError(f"unexpected markup node {tag!r}")
    if tag.startswith(_NS_PREFIX):
        return tag[len(_NS_PREFIX):]
    if tag.startswith('{'):
        raise MarkupStructureError(f"unexpected namespace in element {tag}")
    return tag


def _check_attributes(element: ET.Element, name: str, required: Set[str],
                      optional: Iterable[str] = ()) -> Dict[str, str]:
    present = set(element.attrib)
    missing = required - present
    if missing:
        raise MarkupStructureError(f"<{name}> missing attribute(s): {', '.join(sorted(missing))}")
    unknown = present - required - set(optional)
    if unknown:
        raise MarkupStructureError(f"<{name}> has unexpected attribute(s): {', '.join(sorted(unknown))}")
    return dict(element.attrib)


def _check_no_text(element: ET.Element, name: str) -> None:
    """Only whitespace may sit between elements of the dialect."""
    if element.text and element.text.strip():
        raise MarkupStructureError(f"unexpected text inside <{name}>: {element.text.strip()!r}")
    for child in element:
        if child.tail and child.tail.strip():
            raise MarkupStructureError(f"unexpected text inside <{name}>: {child.tail.strip()!r}")


def _only_child(element: ET.Element, name: str, child_name: str) -> ET.Element:
    children = list(element)
    if len(children) != 1 or _local_name(children[0]) != child_name:
        found = [_local_name(c) for c in children]
        raise MarkupStructureError(f"<{name}> must contain exactly one <{child_name}>, found {found}")
    return children[0]


def parse_rect(element: ET.Element) -> ImageRect:
    attrs = _check_attributes(element, 'rect', RECT_ATTRIBUTES, RECT_OPTIONAL_ATTRIBUTES)
    _check_no_text(element, 'rect')
    if len(element):
        raise MarkupStructureError("<rect> must be empty")
    clip_id = ""
    if 'clip-path' in attrs:
        clip_id = parse_url_reference(attrs['clip-path'])
    return ImageRect(
        x=parse_int(attrs['x']),
        y=parse_int(attrs['y']),
        width=parse_int(attrs['width'], unsigned=True),
        height=parse_int(attrs['height'], unsigned=True),
        href=ImageReference(source_url=parse_url_reference(attrs['mask']), clip_id=clip_id),
        fill=Color.from_hex(attrs['fill']),
    )


def parse_placement(element: ET.Element) -> Placement:
    attrs = _check_attributes(element, 'g', G_ATTRIBUTES)
    _check_no_text(element, 'g')
    rect = _only_child(element, 'g', 'rect')
    return Placement(
        transform=Transform.from_string(attrs['transform']),
        rect=parse_rect(rect),
    )


def parse_clip_path(element: ET.Element) -> ClipPath:
    attrs = _check_attributes(element, 'clipPath', {'id'})
    _check_no_text(element, 'clipPath')
    polygon = _only_child(element, 'clipPath', 'polygon')
    poly_attrs = _check_attributes(polygon, 'polygon', {'points'})
    if len(polygon):
        raise MarkupStructureError("<polygon> must be empty")
    return ClipPath(id=attrs['id'], polygon=unpack_polygon_points(poly_attrs['points']))


def parse_defs(element: ET.Element) -> Tuple[List[ClipPath], List[Mask]]:
    _check_attributes(element, 'defs', set())
    _check_no_text(element, 'defs')
    clip_paths = []
    masks = []
    for child in element:
        name = _local_name(child)
        if name == 'clipPath':
            clip_paths.append(parse_clip_path(child))
        elif name == 'mask':
            # Body is a copy of the asset sub-document, regenerated on encode
            attrs = _check_attributes(child, 'mask', {'id'})
            masks.append(Mask(id=attrs['id']))
        else:
            raise MarkupStructureError(f"unexpected element <{name}> in <defs>")
    return clip_paths, masks


def parse_svg(text: str) -> dict:
    """Parse document text into its parts.

    Returns:
        Dict with 'version', 'width', 'height', 'placements', 'clip_paths'
        and 'masks'.

    Raises:
        ParseError subclasses for any structural, numeric, color, polygon or
        transform problem.
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise MarkupStructureError(f"malformed markup: {e}") from e

    if _local_name(root) != 'svg':
        raise MarkupStructureError(f"root element must be <svg>, got <{_local_name(root)}>")
    attrs = _check_attributes(root, 'svg', ROOT_ATTRIBUTES)
    _check_no_text(root, 'svg')

    placements = []
    clip_paths: List[ClipPath] = []
    masks: List[Mask] = []
    seen_defs = False
    for child in root:
        name = _local_name(child)
        if name == 'g':
            placements.append(parse_placement(child))
        elif name == 'defs':
            if seen_defs:
                raise MarkupStructureError("more than one <defs> block")
            seen_defs = True
            clip_paths, masks = parse_defs(child)
        else:
            raise MarkupStructureError(f"unexpected element <{name}> in <svg>")

    return {
        'version': attrs['version'],
        'width': parse_int(attrs['width'], unsigned=True),
        'height': parse_int(attrs['height'], unsigned=True),
        'placements': placements,
        'clip_paths': clip_paths,
        'masks': masks,
    }


# ========================================
# Encoding
# ========================================

def rect_to_string(rect: ImageRect) -> str:
    mask = attr_escape(format_url_reference(rect.href.source_url))
    text = (
        f'<rect x="{rect.x}" y="{rect.y}" width="{rect.width}" height="{rect.height}" '
        f'fill="{rect.fill.to_hex()}" mask="{mask}"'
    )
    if rect.href.has_clip:
        text += f' clip-path="{attr_escape(format_url_reference(rect.href.clip_id))}"'
    return text + '/>'


def placement_to_string(placement: Placement) -> str:
    return (
        f'<g transform="{attr_escape(placement.transform.to_string())}">\n'
        f'{rect_to_string(placement.rect)}\n'
        f'</g>'
    )


def clip_path_to_string(clip: ClipPath) -> str:
    return (
        f'<clipPath id="{attr_escape(clip.id)}">\n'
        f'<polygon points="{pack_polygon_points(clip.polygon)}"/>\n'
        f'</clipPath>\n'
    )


def mask_to_string(source_url: str, body: str) -> str:
    return f'<mask id="{attr_escape(source_url)}">{body}</mask>\n'


def defs_to_string(clip_paths: List[ClipPath], mask_bodies: List[Tuple[str, str]]) -> str:
    entries = [clip_path_to_string(clip) for clip in clip_paths]
    entries.extend(mask_to_string(url, body) for url, body in mask_bodies)
    return f"<defs>\n{''.join(entries)}</defs>\n"


def svg_to_string(version: str, width: int, height: int, placements: List[Placement],
                  defs: Optional[str]) -> str:
    body = '\n'.join(placement_to_string(p) for p in placements)
    return (
        f'<svg version="{attr_escape(version)}" width="{width}" height="{height}" '
        f'xmlns="{SVG_XMLNS}">\n'
        f'{body}\n'
        f'{defs or ""}'
        f'</svg>'
    )
