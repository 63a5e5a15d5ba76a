"""
Art Renderer - Cover image bytes to a fixed-size glyph grid.

Each textel is a full block glyph coloured with the average of a 3x3
grid of samples from its area of the image.
"""
import logging
from io import BytesIO
from typing import Optional

import numpy as np
from PIL import Image

from ..config import ART_WIDTH, ART_HEIGHT, ART_GLYPH, ART_SAMPLES
from ..models import RenderedArt

logger = logging.getLogger(__name__)


def render(data: Optional[bytes], width: int = ART_WIDTH, height: int = ART_HEIGHT) -> RenderedArt:
    """
    Convert image bytes into RenderedArt of exactly width x height.

    Never raises: unreadable input gives placeholder art of the same size.
    """
    if not data:
        return RenderedArt.placeholder(width, height)

    try:
        img = Image.open(BytesIO(data))
        source_size = img.size
        img = img.convert('RGB').resize(
            (width * ART_SAMPLES, height * ART_SAMPLES),
            Image.Resampling.LANCZOS,
        )
        pixels = np.asarray(img, dtype=np.float32)
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        logger.warning(f'Could not decode cover image ({len(data)} bytes): {e}')
        return RenderedArt.placeholder(width, height)
    except Exception as e:
        logger.error(f'Unexpected error decoding cover image: {e}', exc_info=True)
        return RenderedArt.placeholder(width, height)

    # (H*S, W*S, 3) -> (H, S, W, S, 3), averaged over each S x S block
    blocks = pixels.reshape(height, ART_SAMPLES, width, ART_SAMPLES, 3)
    averaged = np.clip(np.rint(blocks.mean(axis=(1, 3))), 0, 255).astype(np.uint8)

    colors = [
        [tuple(int(c) for c in averaged[y, x]) for x in range(width)]
        for y in range(height)
    ]
    logger.debug(f'Rendered cover art {width}x{height} from {source_size[0]}x{source_size[1]} image')
    return RenderedArt(
        width=width,
        height=height,
        glyphs=[ART_GLYPH * width for _ in range(height)],
        colors=colors,
    )
