from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from convite.pix import InvalidAmountError, PixError
from convite.qr import render_qrcode_data_uri
from convite.settings import settings
from web.deps import get_pix_builder

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def _optional_str(value: object) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


@router.post("/pix")
async def create_pix_payment(request: Request):
    logger.info("POST /api/pix: generating PIX payment")
    try:
        body = await request.json()
    except ValueError:
        logger.warning("PIX request rejected: malformed JSON body")
        return JSONResponse({"success": False, "error": "Invalid JSON body"}, status_code=400)
    if not isinstance(body, dict):
        body = {}

    try:
        payment = get_pix_builder().generate(
            body.get("amount"),
            description=_optional_str(body.get("description")),
            transaction_id=_optional_str(body.get("txId")),
        )
    except InvalidAmountError:
        return JSONResponse({"success": False, "error": "Invalid amount"}, status_code=400)
    except PixError as exc:
        logger.warning("PIX request rejected: %s", exc)
        return JSONResponse({"success": False, "error": str(exc)}, status_code=400)

    qr_code = render_qrcode_data_uri(
        payment.payload,
        box_size=settings.qr_box_size,
        border=settings.qr_border,
    )
    return JSONResponse(
        {
            "success": True,
            "payload": payment.payload,
            "qrCode": qr_code,
            "amount": float(payment.amount),
            "txId": payment.transaction_id,
        }
    )
