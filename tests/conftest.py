"""
Shared fixtures for stamp document tests.

Provides sample documents, the asset sub-documents they embed, and an
in-memory asset resolver.
"""
import sys
import os
import pytest

# Ensure src is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))


# ── Asset sub-documents ──────────────────────────────────────────────────

LARCH_ASSET = """\
<svg version="2.0" width="64" height="64" xmlns="http://www.w3.org/2000/svg">
  <defs>
    <mask id="larch">
      <g>
      <rect x="0" y="0" width="64" height="64" fill="white"/>
      <ellipse cx="96" cy="66" rx="74" ry="85" fill="black"/>
      </g>
    </mask>
  </defs>
  <g transform="translate(0, 0)">
    <polygon fill="white" stroke="white" points="17 1,47 1,47 63,17 63" mask="url(#larch)"/>
  </g>
</svg>
"""

RARCH_ASSET = """\
<svg version="2.0" width="64" height="64" xmlns="http://www.w3.org/2000/svg">
  <defs>
    <mask id="rarch">
      <g>
      <rect x="0" y="0" width="64" height="64" fill="white"/>
      <ellipse cx="-32" cy="66" rx="74" ry="85" fill="black"/>
      </g>
    </mask>
  </defs>
  <g transform="translate(0, 0)">
    <polygon fill="white" stroke="white" points="17 1,47 1,47 63,17 63" mask="url(#rarch)"/>
  </g>
</svg>
"""

LARCH_URL = "assets/stamps/larch.bmp"
RARCH_URL = "assets/stamps/rarch.bmp"

ASSETS = {
    LARCH_URL: LARCH_ASSET,
    RARCH_URL: RARCH_ASSET,
}

_MASKS = (
    f'<mask id="{LARCH_URL}">{LARCH_ASSET}</mask>\n'
    f'<mask id="{RARCH_URL}">{RARCH_ASSET}</mask>\n'
)


# ── Sample documents ─────────────────────────────────────────────────────

SAMPLE_LARCH_RARCH = (
    '<svg version="2.0" width="500" height="500" xmlns="http://www.w3.org/2000/svg">\n'
    '<g transform="scale(2) translate(64, 64) rotate(8) translate(-64, -64)">\n'
    '<rect x="0" y="0" width="128" height="128" fill="#000000" mask="url(#assets/stamps/larch.bmp)"/>\n'
    '</g>\n'
    '<g transform="translate(290, 80) translate(64, 64) rotate(220) translate(-64, -64)">\n'
    '<rect x="0" y="0" width="128" height="128" fill="#ff1008" mask="url(#assets/stamps/rarch.bmp)"/>\n'
    '</g>\n'
    '<defs>\n'
    + _MASKS +
    '</defs>\n'
    '</svg>'
)

SAMPLE_CLIPPED = (
    '<svg version="2.0" width="500" height="500" xmlns="http://www.w3.org/2000/svg">\n'
    '<g transform="scale(2) translate(64, 64) rotate(8) translate(-64, -64)">\n'
    '<rect x="0" y="0" width="128" height="128" fill="#040506" mask="url(#assets/stamps/larch.bmp)" clip-path="url(#hellote)"/>\n'
    '</g>\n'
    '<g transform="translate(290, 80) translate(64, 64) rotate(220) translate(-64, -64)">\n'
    '<rect x="0" y="0" width="128" height="128" fill="#00ff00" mask="url(#assets/stamps/rarch.bmp)"/>\n'
    '</g>\n'
    '<defs>\n'
    '<clipPath id="hellote">\n'
    '<polygon points="1 -1,2 2,3 3,4 4.25"/>\n'
    '</clipPath>\n'
    '<clipPath id="goodbyte">\n'
    '<polygon points="0 0,1 1,2 2,-3 3"/>\n'
    '</clipPath>\n'
    + _MASKS +
    '</defs>\n'
    '</svg>'
)

SAMPLE_EMPTY = (
    '<svg version="2.0" width="800" height="600" xmlns="http://www.w3.org/2000/svg">\n'
    '\n'
    '<defs>\n'
    '</defs>\n'
    '</svg>'
)


@pytest.fixture
def larch_rarch_text():
    """Two stamps, no clip paths"""
    return SAMPLE_LARCH_RARCH


@pytest.fixture
def clipped_text():
    """Two stamps, one of them clipped, two clip paths"""
    return SAMPLE_CLIPPED


@pytest.fixture
def asset_resolver():
    """In-memory resolver for the larch and rarch stamps"""
    from stampsvg.services.asset_resolver import DictAssetResolver
    return DictAssetResolver(ASSETS)


@pytest.fixture
def assets_dir(tmp_path):
    """Directory laid out by the naming convention: assets/larch.svg, assets/rarch.svg"""
    root = tmp_path / "assets_root"
    (root / "assets").mkdir(parents=True)
    (root / "assets" / "larch.svg").write_text(LARCH_ASSET, encoding="utf-8")
    (root / "assets" / "rarch.svg").write_text(RARCH_ASSET, encoding="utf-8")
    return root


@pytest.fixture
def parsed_larch_rarch(larch_rarch_text):
    from stampsvg.models.document import Document
    return Document.from_string(larch_rarch_text)


@pytest.fixture
def parsed_clipped(clipped_text):
    from stampsvg.models.document import Document
    return Document.from_string(clipped_text)
