"""
Notification icon generation.

Two producers, one contract: whatever goes in, what comes out is either a
square 128x128 image data URI short enough to be stored with the settings,
or '' when the input could not be turned into one.
"""
from __future__ import annotations
import base64
import binascii
import logging
import re
from pathlib import Path
from typing import Optional, Tuple
from urllib.parse import unquote_to_bytes

from PySide6.QtCore import QBuffer, QByteArray, QIODevice, QRect, QRectF, Qt
from PySide6.QtGui import QColor, QImage, QPainter
from PySide6.QtSvg import QSvgRenderer

from .glyphs import GLYPHS
from .settings import MAX_ICON_DATA_URL_LENGTH

logger = logging.getLogger(__name__)

ICON_SIZE = 128
GLYPH_BOX = 84
GLYPH_OFFSET = (ICON_SIZE - GLYPH_BOX) // 2
DEFAULT_BACKGROUND = "#1d4ed8"
DARK_FOREGROUND = "#111827"
LIGHT_FOREGROUND = "#ffffff"

# The last JPEG tier is returned even if it is still over the cap.
# Flip to False to reject oversized results instead.
ACCEPT_OVERSIZED_FINAL_TIER = True

_HEX_RE = re.compile(r"^[0-9a-fA-F]{6}$")


# ---------- Colors ----------

def hex_to_rgb(value: str) -> Optional[Tuple[int, int, int]]:
    cleaned = value.replace("#", "").strip()
    if not _HEX_RE.match(cleaned):
        return None
    return int(cleaned[0:2], 16), int(cleaned[2:4], 16), int(cleaned[4:6], 16)


def contrast_color(background: str) -> str:
    """Dark foreground on light backgrounds, white on everything else."""
    rgb = hex_to_rgb(background)
    if rgb is None:
        return DARK_FOREGROUND
    r, g, b = rgb
    luminance = (0.299 * r + 0.587 * g + 0.114 * b) / 255
    return DARK_FOREGROUND if luminance > 0.6 else LIGHT_FOREGROUND


# ---------- Data URIs ----------

def encode_data_url(image: QImage, fmt: str = "PNG", quality: int = -1) -> str:
    buf = QBuffer()
    buf.open(QIODevice.OpenModeFlag.WriteOnly)
    if not image.save(buf, fmt, quality):
        raise ValueError(f"could not encode image as {fmt}")
    payload = base64.b64encode(bytes(buf.data())).decode("ascii")
    return f"data:image/{fmt.lower()};base64,{payload}"


def decode_data_url(url: str) -> bytes:
    """Payload bytes of a data: URI. Raises ValueError if it is not one."""
    if not url.startswith("data:") or "," not in url:
        raise ValueError("not a data URI")
    header, payload = url[5:].split(",", 1)
    if header.endswith(";base64"):
        try:
            return base64.b64decode(payload, validate=True)
        except binascii.Error as exc:
            raise ValueError(f"bad base64 payload: {exc}") from exc
    return unquote_to_bytes(payload)


# ---------- Uploaded images ----------

def center_square(width: int, height: int) -> QRect:
    side = min(width, height)
    return QRect((width - side) // 2, (height - side) // 2, side, side)


def _fits(url: str) -> bool:
    return len(url) <= MAX_ICON_DATA_URL_LENGTH


def _encode_with_fallback(image: QImage) -> str:
    png = encode_data_url(image, "PNG")
    if _fits(png):
        return png
    jpeg90 = encode_data_url(image, "JPEG", 90)
    if _fits(jpeg90):
        return jpeg90
    jpeg75 = encode_data_url(image, "JPEG", 75)
    if ACCEPT_OVERSIZED_FINAL_TIER or _fits(jpeg75):
        return jpeg75
    return ""


def image_to_icon_data_url(data: bytes, size: int = ICON_SIZE) -> str:
    """
    Center-crop an uploaded image to a square and shrink it to an icon.

    PNG first; JPEG at quality 90, then 75, when PNG is over the size cap.
    Returns '' if the bytes are not a decodable image.
    """
    try:
        source = QImage.fromData(data)
        if source.isNull():
            logger.info("uploaded icon could not be decoded (%d bytes)", len(data))
            return ""

        canvas = QImage(size, size, QImage.Format.Format_ARGB32)
        canvas.fill(Qt.GlobalColor.transparent)
        painter = QPainter(canvas)
        try:
            painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
            painter.drawImage(QRect(0, 0, size, size), source, center_square(source.width(), source.height()))
        finally:
            painter.end()

        return _encode_with_fallback(canvas)
    except Exception:
        logger.warning("failed to convert uploaded icon", exc_info=True)
        return ""


def image_file_to_icon_data_url(path, size: int = ICON_SIZE) -> str:
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        logger.info("cannot read icon file %s: %s", path, exc)
        return ""
    return image_to_icon_data_url(data, size)


# ---------- Vector glyphs ----------

def ensure_svg_xmlns(svg: str) -> str:
    if "xmlns=" in svg:
        return svg
    return svg.replace("<svg", '<svg xmlns="http://www.w3.org/2000/svg"', 1)


def glyph_to_icon_data_url(svg: str, background: str = DEFAULT_BACKGROUND, transparent: bool = True) -> str:
    """
    Draw an SVG glyph on a solid or transparent square.

    `currentColor` becomes the contrast color of a solid background, or the
    dark foreground when the background is transparent.
    Single PNG attempt: '' when it does not fit.
    """
    try:
        fg = DARK_FOREGROUND if transparent else contrast_color(background)
        markup = ensure_svg_xmlns(svg).replace("currentColor", fg)
        renderer = QSvgRenderer(QByteArray(markup.encode("utf-8")))
        if not renderer.isValid():
            logger.info("glyph svg could not be parsed")
            return ""

        canvas = QImage(ICON_SIZE, ICON_SIZE, QImage.Format.Format_ARGB32)
        canvas.fill(Qt.GlobalColor.transparent)
        painter = QPainter(canvas)
        try:
            painter.setRenderHint(QPainter.RenderHint.Antialiasing)
            fill = QColor(background.strip())
            if not transparent and fill.isValid():
                painter.fillRect(QRect(0, 0, ICON_SIZE, ICON_SIZE), fill)
            renderer.render(painter, QRectF(GLYPH_OFFSET, GLYPH_OFFSET, GLYPH_BOX, GLYPH_BOX))
        finally:
            painter.end()

        png = encode_data_url(canvas, "PNG")
        return png if _fits(png) else ""
    except Exception:
        logger.warning("failed to render glyph icon", exc_info=True)
        return ""


def builtin_glyph_data_url(key: str, background: str = DEFAULT_BACKGROUND, transparent: bool = True) -> str:
    svg = GLYPHS.get(key)
    if svg is None:
        return ""
    return glyph_to_icon_data_url(svg, background, transparent)
