"""
Tests for the art renderer.
"""
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from vinylla.config import ART_WIDTH, ART_HEIGHT, ART_GLYPH
from vinylla.models import RenderedArt
from vinylla.ui.art import render


class TestRender:
    """Tests for converting image bytes to a glyph grid."""

    def test_fixed_dimensions(self, png_bytes):
        """Output is always ART_WIDTH x ART_HEIGHT."""
        art = render(png_bytes)
        assert (art.width, art.height) == (ART_WIDTH, ART_HEIGHT)
        assert len(art.glyphs) == ART_HEIGHT
        assert all(len(row) == ART_WIDTH for row in art.glyphs)
        assert all(len(row) == ART_WIDTH for row in art.colors)

    def test_colours_follow_image(self, png_bytes):
        """Left textels take the left half's red, right textels the right half's blue."""
        art = render(png_bytes)
        glyph, left = art.textel(0, ART_HEIGHT // 2)
        _, right = art.textel(ART_WIDTH - 1, ART_HEIGHT // 2)
        assert glyph == ART_GLYPH
        assert left[0] > 200 and left[2] < 50
        assert right[2] > 200 and right[0] < 50

    def test_alpha_and_palette_images(self):
        """Non-RGB modes are converted instead of failing."""
        for mode in ('RGBA', 'P', 'L'):
            buf = BytesIO()
            Image.new(mode, (20, 20)).save(buf, format='PNG')
            art = render(buf.getvalue(), width=4, height=2)
            assert (art.width, art.height) == (4, 2)
            assert art.glyphs == [ART_GLYPH * 4] * 2

    @pytest.mark.parametrize('data', [b'', None, b'not an image', b'\x89PNG\r\n\x1a\n truncated'])
    def test_malformed_input_gives_placeholder(self, data):
        """Bad input never raises and yields same-size placeholder art."""
        art = render(data)
        assert art == RenderedArt.placeholder()

    def test_custom_size(self, png_bytes):
        art = render(png_bytes, width=10, height=5)
        assert len(art.colors) == 5 and len(art.colors[0]) == 10
