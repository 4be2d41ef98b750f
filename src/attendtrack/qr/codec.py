from __future__ import annotations

import io
from typing import BinaryIO

import qrcode
import qrcode.image.svg
from PIL import Image

from ..core.constants import QR_BORDER, QR_BOX_SIZE
from ..core.exceptions import InvalidQRCodeError


def _build(data: str) -> qrcode.QRCode:
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_H,
        box_size=QR_BOX_SIZE,
        border=QR_BORDER,
    )
    qr.add_data(data)
    qr.make(fit=True)
    return qr


def render_png(data: str) -> bytes:
    img = _build(data).make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def render_svg(data: str) -> bytes:
    img = _build(data).make_image(image_factory=qrcode.image.svg.SvgPathImage)
    buf = io.BytesIO()
    img.save(buf)
    return buf.getvalue()


def decode_image(stream: BinaryIO) -> str:
    """Decode the first QR symbol found in an uploaded photo."""
    # pyzbar loads the native zbar library on import
    from pyzbar.pyzbar import decode as pyzbar_decode

    try:
        img = Image.open(stream).convert("RGB")
    except (OSError, ValueError):
        raise InvalidQRCodeError("The uploaded file is not a readable image.")

    decoded = pyzbar_decode(img)
    if not decoded:
        raise InvalidQRCodeError("No QR code was found in the uploaded image.")
    return decoded[0].data.decode("utf-8").strip()
