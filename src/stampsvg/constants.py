"""
Stamp Document Core - Constants and Configuration

This module contains constant values used throughout the library:
- Document format identifiers
- Default stamp and canvas sizes
- Geometry tolerances and the vertex-grazing perturbation
- Asset naming convention tokens
"""

# ======================================================================
# DOCUMENT FORMAT
# ======================================================================

SVG_VERSION = "2.0"
SVG_XMLNS = "http://www.w3.org/2000/svg"

# Attribute values that need entity escaping on output
ATTR_ESCAPES = {
    '<': '&lt;',
    '>': '&gt;',
    '"': '&quot;',
    "'": '&apos;',
    '&': '&amp;',
}

# ======================================================================
# DEFAULTS
# ======================================================================

# Stamp bitmaps are square; a fresh Transform is built from this box
DEFAULT_STAMP_SIZE = 64

# Nominal canvas for new documents (matches the editor window)
DEFAULT_CANVAS_WIDTH = 800
DEFAULT_CANVAS_HEIGHT = 600

# Fill of a stamp placed without an explicit color
DEFAULT_FILL = '#000000'

# ======================================================================
# GEOMETRY
# ======================================================================

# Below this |dot(edge, perp(dir))| a segment is treated as parallel to the ray
PARALLEL_EPSILON = 1.0e-10

# Origin offset for the second ray cast when the first one reports "inside".
# Clip generation in the editor depends on these exact values.
GRAZE_PERTURBATION = (0.01, 0.0125)

# Number of vertices used to approximate ellipses and circles in outlines
ELLIPSE_RESOLUTION = 16

# ======================================================================
# ASSET NAMING CONVENTION
# ======================================================================
# "assets/stamps/larch.bmp" -> "assets/larch.svg"

STAMP_DIR_TOKEN = '/stamps/'
OUTLINE_EXTENSION = '.svg'

CONFIG_FILENAME = 'stampsvg_config.json'
