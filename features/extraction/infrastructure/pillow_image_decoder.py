"""
Pillow image decoder for single-image uploads.
"""

from __future__ import annotations

from io import BytesIO

from PIL import Image, ImageOps

from features.extraction.domain.interfaces import IImageDecoder


def _has_transparency(img: Image.Image) -> bool:
    return "A" in img.getbands() or "transparency" in img.info


class PillowImageDecoder(IImageDecoder):
    """Decodes PNG/JPEG/TIFF/... bytes into an RGB bitmap (first frame only)."""

    def decode(self, data: bytes) -> Image.Image:
        with Image.open(BytesIO(data)) as img:
            img.load()
            # Phone photos carry their rotation in EXIF
            upright = ImageOps.exif_transpose(img)
            if _has_transparency(upright):
                # Transparent areas become paper white, not black
                rgba = upright.convert("RGBA")
                flattened = Image.new("RGB", rgba.size, "white")
                flattened.paste(rgba, mask=rgba.getchannel("A"))
                return flattened
            return upright.convert("RGB")
