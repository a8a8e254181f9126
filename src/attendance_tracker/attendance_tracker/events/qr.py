from __future__ import annotations

import base64
import io
import json
import math
from datetime import datetime
from typing import IO, Optional

import qrcode
from PIL import Image, UnidentifiedImageError

from ..common.datetime_utils import now_local, to_epoch_millis
from ..core.exceptions import ValidationError
from .model import IssuedQr, QrPayload


def _reject_constant(name: str):
    # NaN, Infinity and -Infinity are not JSON
    raise ValueError(f"unsupported constant {name}")


class QrCodeService:
    """Build, render and read event QR codes.

    Payload format: {"eventId": <int>, "timestamp": <ms since epoch>}. It carries
    no student identity; who checks in always comes from the authenticated caller.
    """

    def __init__(self, *, box_size: int = 10, border: int = 2):
        self._box_size = box_size
        self._border = border

    def build_payload(self, event_id: int, *, now: Optional[datetime] = None) -> str:
        now = now or now_local()
        return json.dumps({"eventId": int(event_id), "timestamp": to_epoch_millis(now)}, separators=(",", ":"))

    def issue(self, event_id: int, *, now: Optional[datetime] = None) -> IssuedQr:
        payload = self.build_payload(event_id, now=now)
        return IssuedQr(payload=payload, image=self.to_data_url(payload))

    def render_png(self, payload: str) -> bytes:
        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=self._box_size,
            border=self._border,
        )
        qr.add_data(payload)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()

    def to_data_url(self, payload: str) -> str:
        encoded = base64.b64encode(self.render_png(payload)).decode("ascii")
        return f"data:image/png;base64,{encoded}"

    @staticmethod
    def decode_payload(raw: str) -> QrPayload:
        try:
            data = json.loads(raw, parse_constant=_reject_constant)
        except (TypeError, ValueError):
            raise ValidationError("Invalid QR code", field="qr_code_data")

        if not isinstance(data, dict):
            raise ValidationError("Invalid QR code", field="qr_code_data")

        event_id = data.get("eventId")
        if isinstance(event_id, str) and event_id.isascii() and event_id.isdigit():
            event_id = int(event_id)
        if not isinstance(event_id, int) or isinstance(event_id, bool) or event_id <= 0:
            raise ValidationError("Invalid QR code", field="qr_code_data")

        issued_at = data.get("timestamp")
        if isinstance(issued_at, bool) or not isinstance(issued_at, (int, float)):
            issued_at = 0
        elif not math.isfinite(issued_at):
            raise ValidationError("Invalid QR code", field="qr_code_data")
        return QrPayload(event_id=event_id, issued_at=int(issued_at))

    @staticmethod
    def read_image(stream: IO[bytes]) -> str:
        """Decode the first QR code found in an uploaded photo."""

        # Imported here: pyzbar needs the native zbar library at import time.
        from pyzbar.pyzbar import decode as pyzbar_decode

        try:
            img = Image.open(stream).convert("RGB")
        except (UnidentifiedImageError, OSError):
            raise ValidationError("Uploaded file is not a readable image", field="image")

        decoded = pyzbar_decode(img)
        if not decoded:
            raise ValidationError("No QR code detected in the image", field="image")
        return decoded[0].data.decode("utf-8").strip()
