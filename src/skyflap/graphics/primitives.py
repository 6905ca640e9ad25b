"""Basic drawing primitives on numpy RGB buffers."""

from functools import lru_cache
from typing import Tuple
import numpy as np
from numpy.typing import NDArray

# Type aliases
Color = Tuple[int, int, int]
Buffer = NDArray[np.uint8]

GLYPH_WIDTH = 3
GLYPH_HEIGHT = 5
SPACE_WIDTH = 3

# 3x5 bitmap font, one string per row
_GLYPHS: dict[str, tuple[str, ...]] = {
    'A': ("010", "101", "111", "101", "101"),
    'B': ("110", "101", "110", "101", "110"),
    'C': ("011", "100", "100", "100", "011"),
    'D': ("110", "101", "101", "101", "110"),
    'E': ("111", "100", "110", "100", "111"),
    'F': ("111", "100", "110", "100", "100"),
    'G': ("011", "100", "101", "101", "011"),
    'H': ("101", "101", "111", "101", "101"),
    'I': ("111", "010", "010", "010", "111"),
    'J': ("001", "001", "001", "101", "010"),
    'K': ("101", "101", "110", "101", "101"),
    'L': ("100", "100", "100", "100", "111"),
    'M': ("101", "111", "101", "101", "101"),
    'N': ("101", "111", "111", "101", "101"),
    'O': ("010", "101", "101", "101", "010"),
    'P': ("110", "101", "110", "100", "100"),
    'Q': ("010", "101", "101", "111", "011"),
    'R': ("110", "101", "110", "101", "101"),
    'S': ("011", "100", "010", "001", "110"),
    'T': ("111", "010", "010", "010", "010"),
    'U': ("101", "101", "101", "101", "010"),
    'V': ("101", "101", "101", "010", "010"),
    'W': ("101", "101", "101", "111", "101"),
    'X': ("101", "101", "010", "101", "101"),
    'Y': ("101", "101", "010", "010", "010"),
    'Z': ("111", "001", "010", "100", "111"),
    '0': ("010", "101", "101", "101", "010"),
    '1': ("010", "110", "010", "010", "111"),
    '2': ("010", "101", "001", "010", "111"),
    '3': ("110", "001", "010", "001", "110"),
    '4': ("101", "101", "111", "001", "001"),
    '5': ("111", "100", "110", "001", "110"),
    '6': ("011", "100", "110", "101", "010"),
    '7': ("111", "001", "010", "010", "010"),
    '8': ("010", "101", "010", "101", "010"),
    '9': ("010", "101", "011", "001", "110"),
    '?': ("010", "101", "001", "000", "010"),
    '!': ("010", "010", "010", "000", "010"),
    '.': ("000", "000", "000", "000", "010"),
    ',': ("000", "000", "000", "010", "100"),
    ':': ("000", "010", "000", "010", "000"),
    '-': ("000", "000", "111", "000", "000"),
    '+': ("000", "010", "111", "010", "000"),
    '/': ("001", "001", "010", "100", "100"),
}


@lru_cache(maxsize=None)
def _glyph(char: str, scale: int) -> NDArray[np.bool_]:
    """Boolean pixel mask for a character, scaled up."""
    rows = _GLYPHS.get(char.upper(), _GLYPHS['?'])
    mask = np.array([[c == "1" for c in row] for row in rows], dtype=bool)
    if scale > 1:
        mask = np.kron(mask, np.ones((scale, scale), dtype=bool)).astype(bool)
    return mask


def clear(buffer: Buffer, color: Color = (0, 0, 0)) -> None:
    """Clear buffer to a solid color."""
    buffer[:, :] = color


def draw_rect(
    buffer: Buffer,
    x: int,
    y: int,
    width: int,
    height: int,
    color: Color,
    filled: bool = True,
    thickness: int = 1,
) -> None:
    """Draw a rectangle on the buffer.

    Args:
        buffer: Target numpy array (height, width, 3)
        x: Left edge x coordinate
        y: Top edge y coordinate
        width: Rectangle width
        height: Rectangle height
        color: RGB color tuple
        filled: If True, fill rectangle; if False, draw outline only
        thickness: Line thickness for outline (when filled=False)
    """
    h, w = buffer.shape[:2]

    # Clamp to buffer bounds
    x1 = max(0, min(x, w))
    y1 = max(0, min(y, h))
    x2 = max(0, min(x + width, w))
    y2 = max(0, min(y + height, h))

    if x2 <= x1 or y2 <= y1:
        return

    if filled:
        buffer[y1:y2, x1:x2] = color
        return

    t = max(1, thickness)
    buffer[y1:min(y1 + t, y2), x1:x2] = color
    buffer[max(y2 - t, y1):y2, x1:x2] = color
    buffer[y1:y2, x1:min(x1 + t, x2)] = color
    buffer[y1:y2, max(x2 - t, x1):x2] = color


def draw_image(
    buffer: Buffer,
    image: Buffer,
    x: int,
    y: int,
    alpha: float = 1.0,
) -> None:
    """Draw an image onto the buffer with optional alpha blending.

    Args:
        buffer: Target numpy array (height, width, 3)
        image: Source image array (height, width, 3 or 4)
        x: Top-left x coordinate
        y: Top-left y coordinate
        alpha: Global alpha multiplier (0.0 to 1.0)
    """
    buf_h, buf_w = buffer.shape[:2]
    img_h, img_w = image.shape[:2]

    # Visible region
    src_x1 = max(0, -x)
    src_y1 = max(0, -y)
    src_x2 = min(img_w, buf_w - x)
    src_y2 = min(img_h, buf_h - y)

    dst_x1 = max(0, x)
    dst_y1 = max(0, y)
    dst_x2 = dst_x1 + (src_x2 - src_x1)
    dst_y2 = dst_y1 + (src_y2 - src_y1)

    if src_x2 <= src_x1 or src_y2 <= src_y1:
        return

    src_region = image[src_y1:src_y2, src_x1:src_x2]

    if alpha >= 1.0 and image.shape[2] == 3:
        buffer[dst_y1:dst_y2, dst_x1:dst_x2] = src_region
        return

    dst_region = buffer[dst_y1:dst_y2, dst_x1:dst_x2]

    if image.shape[2] == 4:
        # Per-pixel alpha
        img_alpha = (src_region[:, :, 3:4] / 255.0) * alpha
        src_rgb = src_region[:, :, :3]
    else:
        img_alpha = alpha
        src_rgb = src_region

    blended = (src_rgb * img_alpha + dst_region * (1 - img_alpha)).astype(np.uint8)
    buffer[dst_y1:dst_y2, dst_x1:dst_x2] = blended


def tile_image(image: Buffer, width: int, height: int) -> Buffer:
    """Repeat an image to cover width x height, cropped to that size."""
    img_h, img_w = image.shape[:2]
    if width <= 0 or height <= 0 or img_h == 0 or img_w == 0:
        return image[:0, :0]
    reps_y = -(-height // img_h)
    reps_x = -(-width // img_w)
    tiled = np.tile(image, (reps_y, reps_x, 1))
    return tiled[:height, :width]


def text_size(text: str, scale: int = 1) -> Tuple[int, int]:
    """Pixel size of text rendered with draw_text."""
    if not text:
        return 0, 0
    width = 0
    for char in text:
        if char == ' ':
            width += SPACE_WIDTH * scale
        else:
            width += (GLYPH_WIDTH + 1) * scale
    # No spacing after the last glyph
    return width - scale, GLYPH_HEIGHT * scale


def draw_text(
    buffer: Buffer,
    text: str,
    x: int,
    y: int,
    color: Color,
    scale: int = 1,
) -> Tuple[int, int]:
    """Draw text using the built-in bitmap font.

    Returns:
        Tuple of (width, height) of rendered text in pixels
    """
    h, w = buffer.shape[:2]
    cursor_x = x

    for char in text:
        if char == ' ':
            cursor_x += SPACE_WIDTH * scale
            continue

        mask = _glyph(char, scale)
        gh, gw = mask.shape

        # Clip glyph to buffer
        sx1 = max(0, -cursor_x)
        sy1 = max(0, -y)
        sx2 = min(gw, w - cursor_x)
        sy2 = min(gh, h - y)
        if sx2 > sx1 and sy2 > sy1:
            region = buffer[y + sy1:y + sy2, cursor_x + sx1:cursor_x + sx2]
            region[mask[sy1:sy2, sx1:sx2]] = color

        cursor_x += (GLYPH_WIDTH + 1) * scale

    return text_size(text, scale)


def crop_image(image: Buffer, x: int, y: int, width: int, height: int) -> Buffer:
    """Copy a rectangular part of an image (e.g. one sprite of a sheet)."""
    return image[y:y + height, x:x + width].copy()
