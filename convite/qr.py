"""QR code rendering for PIX payloads."""

from __future__ import annotations

import base64
import logging
from io import BytesIO

import qrcode
from qrcode.image.pil import PilImage

logger = logging.getLogger(__name__)

# Banking apps expect level M for BR Codes
ERROR_CORRECTION = qrcode.constants.ERROR_CORRECT_M


def build_qrcode(payload: str, *, box_size: int = 6, border: int = 2) -> qrcode.QRCode:
    """Encode ``payload`` into the smallest QR symbol that fits it."""
    qr = qrcode.QRCode(error_correction=ERROR_CORRECTION, box_size=box_size, border=border)
    qr.add_data(payload.encode("ascii"))
    qr.make(fit=True)
    logger.debug("QR symbol version %d for %d-character payload", qr.version, len(payload))
    return qr


def render_qrcode_png(payload: str, *, box_size: int = 6, border: int = 2) -> bytes:
    img: PilImage = build_qrcode(payload, box_size=box_size, border=border).make_image()
    buf = BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def render_qrcode_data_uri(payload: str, *, box_size: int = 6, border: int = 2) -> str:
    png = render_qrcode_png(payload, box_size=box_size, border=border)
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")
