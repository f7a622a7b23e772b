"""PIX BR Code payload generator following the BCB EMV QR Code specification.

Builds the dynamic payload used for gift payments: nested TLV fields for the
merchant, amount and transaction id, terminated by a CRC16/CCITT-FALSE
checksum. Everything here is pure; QR rendering lives in ``convite.qr``.
"""

from __future__ import annotations

import logging
import secrets
import unicodedata
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from convite.settings import Settings

logger = logging.getLogger(__name__)

PIX_GUI = "BR.GOV.BCB.PIX"
CRC_PLACEHOLDER = "6304"

DEFAULT_MERCHANT_NAME = "RECEBEDOR PIX"
DEFAULT_MERCHANT_CITY = "SAO PAULO"
DEFAULT_TRANSACTION_ID = "PIX"

MAX_MERCHANT_NAME = 25
MAX_MERCHANT_CITY = 15
MAX_DESCRIPTION = 50
MAX_TRANSACTION_ID = 25
MAX_TLV_VALUE = 99

_CENTS = Decimal("0.01")


class PixError(ValueError):
    """Base error for PIX payload generation and parsing."""


class InvalidAmountError(PixError):
    pass


class FieldTooLongError(PixError):
    pass


class MerchantConfig(BaseModel):
    """Static receiver data shared by every payment."""

    model_config = ConfigDict(frozen=True)

    pix_key: str
    merchant_name: str = ""
    merchant_city: str = ""

    def __init__(self, **data) -> None:
        super().__init__(**data)
        if not self.pix_key.isascii():
            raise PixError(f"PIX key must be ASCII: {self.pix_key!r}")

    @classmethod
    def from_settings(cls, app_settings: Settings | None = None) -> MerchantConfig:
        if app_settings is None:
            from convite.settings import settings as app_settings
        return cls(
            pix_key=app_settings.pix_key,
            merchant_name=app_settings.pix_merchant_name,
            merchant_city=app_settings.pix_merchant_city,
        )


class PixPayload(BaseModel):
    """Normalized BR Code fields. Build through ``PixPayloadBuilder``."""

    model_config = ConfigDict(frozen=True)

    pix_key: str
    merchant_name: str
    merchant_city: str
    amount: Decimal
    transaction_id: str
    description: str = ""

    def encode_fields(self) -> str:
        """Return the payload up to and including the CRC placeholder."""
        mai = tlv("00", PIX_GUI) + tlv("01", self.pix_key)
        if self.description:
            mai += tlv("02", self.description)

        return (
            tlv("00", "01")  # Payload Format Indicator
            + tlv("01", "12")  # Point of Initiation Method
            + tlv("26", mai)  # Merchant Account Information
            + tlv("52", "0000")  # Merchant Category Code
            + tlv("53", "986")  # Transaction Currency (BRL)
            + tlv("54", f"{self.amount:.2f}")
            + tlv("58", "BR")
            + tlv("59", self.merchant_name)
            + tlv("60", self.merchant_city)
            + tlv("62", tlv("05", self.transaction_id))  # Additional Data
            + CRC_PLACEHOLDER
        )

    def encode(self) -> str:
        fields = self.encode_fields()
        return fields + crc16_ccitt(fields)


class PixPayment(BaseModel):
    model_config = ConfigDict(frozen=True)

    payload: str
    amount: Decimal
    transaction_id: str


def to_ascii(value: object, max_length: int) -> str:
    """Strip accents and non-printable characters, then truncate.

    Never raises: ``None`` and empty values normalize to ``""``.
    """
    if value is None:
        return ""
    text = value if isinstance(value, str) else str(value)
    decomposed = unicodedata.normalize("NFD", text)
    printable = "".join(c for c in decomposed if not unicodedata.combining(c) and " " <= c <= "~")
    return printable[:max_length]


def tlv(tag: str, value: str) -> str:
    """Build a TLV (Tag-Length-Value) field."""
    if len(tag) != 2 or not tag.isdigit():
        raise PixError(f"Invalid TLV tag: {tag!r}")
    # LEN counts characters, which equals bytes only for ASCII
    if not value.isascii():
        raise PixError(f"Field {tag} contains non-ASCII characters")
    if len(value) > MAX_TLV_VALUE:
        raise FieldTooLongError(f"Field {tag} has {len(value)} characters (max {MAX_TLV_VALUE})")
    return f"{tag}{len(value):02d}{value}"


def parse_tlv(data: str) -> list[tuple[str, str]]:
    """Split a flat TLV string into ``(tag, value)`` pairs."""
    fields: list[tuple[str, str]] = []
    pos = 0
    while pos < len(data):
        header = data[pos : pos + 4]
        if len(header) < 4 or not header.isdigit():
            raise PixError(f"Malformed TLV header at position {pos}: {header!r}")
        tag, length = header[:2], int(header[2:])
        value = data[pos + 4 : pos + 4 + length]
        if len(value) != length:
            raise PixError(f"Truncated TLV field {tag} at position {pos}")
        fields.append((tag, value))
        pos += 4 + length
    return fields


def crc16_ccitt(data: str) -> str:
    """Compute CRC16/CCITT-FALSE (poly 0x1021, init 0xFFFF) as 4 hex digits."""
    crc = 0xFFFF
    for byte in data.encode("utf-8"):
        crc ^= byte << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = (crc << 1) ^ 0x1021
            else:
                crc <<= 1
            crc &= 0xFFFF
    return f"{crc:04X}"


def verify_payload(payload: str) -> bool:
    """Return True when the trailing CRC field matches the payload."""
    if len(payload) < 8 or payload[-8:-4] != CRC_PLACEHOLDER:
        return False
    return crc16_ccitt(payload[:-4]) == payload[-4:]


def coerce_amount(amount: object) -> Decimal:
    """Convert ``amount`` to a positive two-decimal ``Decimal``.

    Raises:
        InvalidAmountError: missing, non-numeric, non-finite, zero or negative.
    """
    if amount is None or isinstance(amount, bool):
        raise InvalidAmountError(f"Invalid amount: {amount!r}")
    try:
        value = Decimal(amount.strip()) if isinstance(amount, str) else Decimal(str(amount))
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise InvalidAmountError(f"Invalid amount: {amount!r}") from exc
    if not value.is_finite():
        raise InvalidAmountError(f"Invalid amount: {amount!r}")
    try:
        value = value.quantize(_CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise InvalidAmountError(f"Amount out of range: {amount!r}") from exc
    if value <= 0:
        raise InvalidAmountError(f"Amount must be greater than zero: {amount!r}")
    return value


def generate_transaction_id() -> str:
    return f"PIX-{secrets.token_hex(4)}"


class PixPayloadBuilder:
    """Builds payloads for one receiver.

    The merchant configuration is fixed at construction time so the builder
    can be shared freely between requests.
    """

    def __init__(self, merchant: MerchantConfig) -> None:
        if not merchant.pix_key:
            logger.warning("PIX key is not configured; generated payloads will not be payable")
        self.merchant = merchant
        self.merchant_name = to_ascii(merchant.merchant_name, MAX_MERCHANT_NAME) or DEFAULT_MERCHANT_NAME
        self.merchant_city = to_ascii(merchant.merchant_city, MAX_MERCHANT_CITY) or DEFAULT_MERCHANT_CITY

    def build(
        self,
        amount: object,
        description: str | None = None,
        transaction_id: str | None = None,
    ) -> PixPayload:
        txid = to_ascii(transaction_id or generate_transaction_id(), MAX_TRANSACTION_ID)
        return PixPayload(
            pix_key=self.merchant.pix_key,
            merchant_name=self.merchant_name,
            merchant_city=self.merchant_city,
            amount=coerce_amount(amount),
            transaction_id=txid or DEFAULT_TRANSACTION_ID,
            description=to_ascii(description, MAX_DESCRIPTION),
        )

    def assemble(
        self,
        amount: object,
        description: str | None = None,
        transaction_id: str | None = None,
    ) -> str:
        """Return the un-checksummed payload, ending in ``6304``."""
        return self.build(amount, description, transaction_id).encode_fields()

    def generate(
        self,
        amount: object,
        description: str | None = None,
        transaction_id: str | None = None,
    ) -> PixPayment:
        try:
            payload = self.build(amount, description, transaction_id)
        except InvalidAmountError:
            logger.warning("PIX payment rejected: invalid amount %r", amount)
            raise
        result = PixPayment(
            payload=payload.encode(),
            amount=payload.amount,
            transaction_id=payload.transaction_id,
        )
        logger.info("PIX payload generated: txid=%s amount=%s", result.transaction_id, result.amount)
        return result


def generate_pix_payment(
    amount: object,
    description: str | None = None,
    transaction_id: str | None = None,
    *,
    merchant: MerchantConfig | None = None,
) -> PixPayment:
    """Generate a complete PIX BR Code payment.

    Args:
        amount: Amount in reais (e.g. 49.9 or "49.90"). Must be greater than zero.
        description: Optional free text shown by the payer's bank (max 50 chars).
        transaction_id: Optional id (max 25 chars). Generated as ``PIX-xxxxxxxx`` when omitted.
        merchant: Receiver data. Defaults to the configured settings.

    Returns:
        The payment with the final payload, including the CRC16.
    """
    if merchant is None:
        merchant = MerchantConfig.from_settings()
    return PixPayloadBuilder(merchant).generate(amount, description, transaction_id)
