"""
Image output.

Linear colors are encoded to 8 bits with a square-root gamma and a clamp
just below 1.0, then written as plain-text PPM (P3) or, through Pillow,
as any raster format Pillow can save.
"""

from __future__ import annotations
import logging
from pathlib import Path
import numpy as np
from PIL import Image as PILImage

from .vec3 import Color

logger = logging.getLogger(__name__)

CLAMP_MAX = 1.0 - 1e-8
PIL_FORMATS = ('.png', '.jpg', '.jpeg', '.bmp', '.tga')


def format_color(pixel_color: Color, samples_per_pixel: int) -> str:
    """Encode an accumulated sample sum as a PPM "R G B" triple.

    Args:
        pixel_color: Sum of `samples_per_pixel` linear radiance samples
        samples_per_pixel: Number of samples in the sum

    Returns:
        Space-separated 0-255 integers, e.g. "255 255 255"
    """
    scaled = pixel_color * (1.0 / samples_per_pixel)
    encoded = scaled.gamma_correct(2.0).clamp(0.0, CLAMP_MAX)
    return ' '.join(str(int(255.999 * c)) for c in encoded)


def to_ldr(hdr_image: np.ndarray) -> np.ndarray:
    """Convert an averaged linear image to uint8 with the PPM encoding.

    Args:
        hdr_image: Float image of shape (height, width, 3)

    Returns:
        uint8 array of the same shape
    """
    corrected = np.power(np.clip(hdr_image, 0.0, None), 0.5)
    return np.floor(255.999 * np.clip(corrected, 0.0, CLAMP_MAX)).astype(np.uint8)


def write_ppm(filename: str, image: np.ndarray, samples_per_pixel: int = 1) -> None:
    """Write an image as ASCII PPM (P3).

    Args:
        filename: Output path; I/O errors propagate to the caller
        image: Float image of shape (height, width, 3), row 0 at the top
        samples_per_pixel: Sample count already summed into each pixel
            (1 for an averaged image)
    """
    height, width = image.shape[:2]

    with open(filename, 'w') as f:
        f.write(f'P3\n{width} {height}\n255\n')
        for row in image:
            for pixel in row:
                f.write(format_color(Color.from_array(pixel), samples_per_pixel))
                f.write('\n')

    logger.info("Wrote %dx%d PPM to %s", width, height, filename)


def save_image(image: np.ndarray, filename: str) -> None:
    """Save an averaged linear image; the extension selects the format.

    Args:
        image: Float image of shape (height, width, 3)
        filename: Output path ending in .ppm or a Pillow raster extension
    """
    suffix = Path(filename).suffix.lower()

    if suffix == '.ppm':
        write_ppm(filename, image)
    elif suffix in PIL_FORMATS:
        PILImage.fromarray(to_ldr(image)).save(filename)
        logger.info("Wrote %s image to %s", suffix[1:].upper(), filename)
    else:
        raise ValueError(f"Unsupported image format: {suffix or filename}")
