"""QR codes pointing at a client's public review page."""

from __future__ import annotations

import base64
import io
from dataclasses import dataclass

import qrcode
from qrcode.constants import ERROR_CORRECT_H
from qrcode.exceptions import DataOverflowError
from qrcode.image.pil import PilImage
from PIL import Image

from .errors import QrEncodeError

QR_WIDTH = 300
QR_BORDER = 2


@dataclass
class QrImage:
    image_bytes: bytes
    url: str

    @property
    def data_url(self) -> str:
        encoded = base64.b64encode(self.image_bytes).decode("ascii")
        return f"data:image/png;base64,{encoded}"


def review_page_url(base_url: str, client_id: str) -> str:
    return f"{base_url.rstrip('/')}/review/{client_id}"


def encode_png(data: str, width: int = QR_WIDTH, border: int = QR_BORDER) -> bytes:
    """Render `data` as a square PNG QR code with high error correction."""
    qr = qrcode.QRCode(
        error_correction=ERROR_CORRECT_H,
        border=border,
        box_size=1,
    )
    qr.add_data(data)
    qr.make(fit=True)
    modules = qr.modules_count + 2 * border
    qr.box_size = max(1, width // modules)
    image = qr.make_image(image_factory=PilImage).get_image()
    if image.size != (width, width):
        image = image.resize((width, width), Image.Resampling.NEAREST)
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def generate_qr(client_id: str, base_url: str) -> QrImage:
    url = review_page_url(base_url, client_id)
    try:
        return QrImage(image_bytes=encode_png(url), url=url)
    except (DataOverflowError, ValueError, OSError) as exc:
        raise QrEncodeError(f"Failed to generate QR code: {exc}") from exc
