import pytest
from PySide6.QtCore import QBuffer, QIODevice
from PySide6.QtGui import QColor, QImage, QPainter

import sitless.icons as icons
from sitless.glyphs import GLYPHS


def _png_bytes(image: QImage) -> bytes:
    buf = QBuffer()
    buf.open(QIODevice.OpenModeFlag.WriteOnly)
    image.save(buf, "PNG")
    return bytes(buf.data())


def _striped(width=300, height=200) -> QImage:
    """Red side bands around a centered green square."""
    img = QImage(width, height, QImage.Format.Format_ARGB32)
    img.fill(QColor("#ff0000"))
    side = min(width, height)
    p = QPainter(img)
    p.fillRect((width - side) // 2, (height - side) // 2, side, side, QColor("#00ff00"))
    p.end()
    return img


def _decode(url: str) -> QImage:
    return QImage.fromData(icons.decode_data_url(url))


@pytest.mark.parametrize(
    "background, expected",
    [
        ("#ffffff", icons.DARK_FOREGROUND),
        ("#FFFF00", icons.DARK_FOREGROUND),
        ("#1d4ed8", icons.LIGHT_FOREGROUND),
        ("000000", icons.LIGHT_FOREGROUND),
        ("  #9a9a9a ", icons.DARK_FOREGROUND),
        ("#F0F0F0", icons.DARK_FOREGROUND),
        ("#989898", icons.LIGHT_FOREGROUND),
        ("not-a-color", icons.DARK_FOREGROUND),
        ("#fff", icons.DARK_FOREGROUND),
    ],
)
def test_contrast_color(background, expected):
    assert icons.contrast_color(background) == expected


def test_center_square_offsets():
    r = icons.center_square(301, 200)
    assert (r.x(), r.y(), r.width(), r.height()) == (50, 0, 200, 200)
    r = icons.center_square(100, 251)
    assert (r.x(), r.y(), r.width(), r.height()) == (0, 75, 100, 100)


def test_upload_is_center_cropped_to_128_square(qapp):
    url = icons.image_to_icon_data_url(_png_bytes(_striped()))

    assert url.startswith("data:image/png;base64,")
    img = _decode(url)
    assert (img.width(), img.height()) == (128, 128)
    for x, y in [(64, 64), (4, 64), (123, 64)]:
        c = img.pixelColor(x, y)
        assert c.green() > 200 and c.red() < 60


def test_portrait_upload_is_cropped_too(qapp):
    url = icons.image_to_icon_data_url(_png_bytes(_striped(120, 400)))
    img = _decode(url)
    assert (img.width(), img.height()) == (128, 128)
    c = img.pixelColor(64, 4)
    assert c.green() > 200 and c.red() < 60


def test_undecodable_upload_yields_empty(qapp):
    assert icons.image_to_icon_data_url(b"definitely not an image") == ""
    assert icons.image_to_icon_data_url(b"") == ""


def test_missing_file_yields_empty(tmp_path):
    assert icons.image_file_to_icon_data_url(tmp_path / "nope.png") == ""


def test_file_upload(qapp, tmp_path):
    path = tmp_path / "photo.png"
    path.write_bytes(_png_bytes(_striped()))
    assert icons.image_file_to_icon_data_url(path).startswith("data:image/png;base64,")


class _FakeEncoder:
    def __init__(self, sizes):
        self.sizes = sizes
        self.calls = []

    def __call__(self, image, fmt="PNG", quality=-1):
        self.calls.append((fmt, quality))
        return f"data:image/{fmt.lower()};q{quality}," + "A" * self.sizes[(fmt, quality)]


def test_png_over_cap_falls_back_to_jpeg_90(monkeypatch, qapp):
    fake = _FakeEncoder({("PNG", -1): 500, ("JPEG", 90): 50, ("JPEG", 75): 10})
    monkeypatch.setattr(icons, "encode_data_url", fake)
    monkeypatch.setattr(icons, "MAX_ICON_DATA_URL_LENGTH", 100)

    url = icons.image_to_icon_data_url(_png_bytes(_striped()))

    assert url.startswith("data:image/jpeg;q90,")
    assert fake.calls == [("PNG", -1), ("JPEG", 90)]


def test_png_that_fits_is_kept(monkeypatch, qapp):
    fake = _FakeEncoder({("PNG", -1): 50, ("JPEG", 90): 10, ("JPEG", 75): 5})
    monkeypatch.setattr(icons, "encode_data_url", fake)
    monkeypatch.setattr(icons, "MAX_ICON_DATA_URL_LENGTH", 100)

    assert icons.image_to_icon_data_url(_png_bytes(_striped())).startswith("data:image/png")
    assert fake.calls == [("PNG", -1)]


def test_final_jpeg_tier_is_returned_even_when_oversized(monkeypatch, qapp):
    fake = _FakeEncoder({("PNG", -1): 500, ("JPEG", 90): 400, ("JPEG", 75): 300})
    monkeypatch.setattr(icons, "encode_data_url", fake)
    monkeypatch.setattr(icons, "MAX_ICON_DATA_URL_LENGTH", 100)

    assert icons.image_to_icon_data_url(_png_bytes(_striped())).startswith("data:image/jpeg;q75,")

    monkeypatch.setattr(icons, "ACCEPT_OVERSIZED_FINAL_TIER", False)
    assert icons.image_to_icon_data_url(_png_bytes(_striped())) == ""


def test_glyph_on_solid_background(qapp):
    url = icons.glyph_to_icon_data_url(GLYPHS["timer-fill"], "#ffffff", transparent=False)

    img = _decode(url)
    assert (img.width(), img.height()) == (128, 128)
    corner = img.pixelColor(2, 2)
    assert (corner.red(), corner.green(), corner.blue(), corner.alpha()) == (255, 255, 255, 255)
    # dark glyph drawn inside the inset box
    center = img.pixelColor(64, 46)
    assert center.red() < 100


def test_glyph_on_transparent_background(qapp):
    url = icons.glyph_to_icon_data_url(GLYPHS["timer"], "#1d4ed8", transparent=True)
    img = _decode(url)
    assert img.pixelColor(2, 2).alpha() == 0
    assert img.pixelColor(125, 125).alpha() == 0


def test_glyph_without_xmlns_is_accepted(qapp):
    svg = '<svg viewBox="0 0 10 10"><rect width="10" height="10" fill="currentColor"/></svg>'
    assert icons.ensure_svg_xmlns(svg).startswith('<svg xmlns="http://www.w3.org/2000/svg"')
    assert icons.glyph_to_icon_data_url(svg, "#000000", transparent=False).startswith("data:image/png")


def test_glyph_over_cap_has_no_fallback(monkeypatch, qapp):
    monkeypatch.setattr(icons, "MAX_ICON_DATA_URL_LENGTH", 10)
    assert icons.glyph_to_icon_data_url(GLYPHS["timer"]) == ""


def test_broken_glyph_yields_empty(qapp):
    assert icons.glyph_to_icon_data_url("<svg><unclosed") == ""
    assert icons.builtin_glyph_data_url("no-such-glyph") == ""


@pytest.mark.parametrize("key", sorted(GLYPHS))
def test_every_builtin_glyph_renders(qapp, key):
    assert icons.builtin_glyph_data_url(key, "#1d4ed8", transparent=False).startswith("data:image/png;base64,")


def test_decode_data_url():
    assert icons.decode_data_url("data:image/png;base64,AAEC") == b"\x00\x01\x02"
    assert icons.decode_data_url("data:image/svg+xml;utf8,%3Csvg%3E") == b"<svg>"
    with pytest.raises(ValueError):
        icons.decode_data_url("data:image/png;base64,@@@")
    with pytest.raises(ValueError):
        icons.decode_data_url("http://example.com/a.png")


def test_glyph_on_transparent_background_is_drawn_dark(qapp):
    url = icons.glyph_to_icon_data_url(GLYPHS["timer-fill"], "#1d4ed8", transparent=True)
    img = _decode(url)

    glyph = img.pixelColor(64, 46)
    assert glyph.alpha() == 255
    assert glyph.name() == icons.DARK_FOREGROUND


def test_glyph_on_dark_solid_background_is_drawn_light(qapp):
    url = icons.glyph_to_icon_data_url(GLYPHS["timer-fill"], "#1d4ed8", transparent=False)
    assert _decode(url).pixelColor(64, 46).name() == icons.LIGHT_FOREGROUND
