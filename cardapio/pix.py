"""PIX BR Code payload generator following the BCB EMV QR Code specification.

Builds the payload string for a PIX QR code, parses and verifies payloads
read back from receipts or pasted by users, and renders payloads as PNG images.
"""

from __future__ import annotations

import time
import unicodedata
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from io import BytesIO

import qrcode
from pydantic import BaseModel, ConfigDict, Field, field_validator
from qrcode.image.pil import PilImage

PIX_GUI = "br.gov.bcb.pix"
MAX_TLV_LENGTH = 99
MAX_MERCHANT_NAME_LENGTH = 25
MAX_MERCHANT_CITY_LENGTH = 15
# Tag 54 holds at most 13 characters: "9999999999.99"
MAX_AMOUNT = Decimal("1e10")
CRC_PREFIX = "6304"

_CENT = Decimal("0.01")


class PixPayloadError(ValueError):
    """Base error for payloads that cannot be built or read."""


class FieldTooLongError(PixPayloadError):
    def __init__(self, tag: str, length: int) -> None:
        super().__init__(f"TLV field {tag} has {length} characters (max {MAX_TLV_LENGTH})")
        self.tag = tag
        self.length = length


class MalformedPayloadError(PixPayloadError):
    pass


class InvalidChecksumError(PixPayloadError):
    pass


@dataclass(frozen=True)
class TLVField:
    """A single Tag-Length-Value field. Composite fields nest serialized sub-fields in ``value``."""

    tag: str
    value: str

    def __post_init__(self) -> None:
        if len(self.tag) != 2 or not (self.tag.isascii() and self.tag.isdigit()):
            raise PixPayloadError(f"Invalid TLV tag: {self.tag!r}")
        if len(self.value) > MAX_TLV_LENGTH:
            raise FieldTooLongError(self.tag, len(self.value))

    @property
    def length(self) -> str:
        return f"{len(self.value):02d}"

    def serialize(self) -> str:
        return f"{self.tag}{self.length}{self.value}"


def tlv(tag: str, value: str) -> str:
    """Build a serialized TLV (Tag-Length-Value) field."""
    return TLVField(tag, value).serialize()


def crc16_ccitt(data: str) -> str:
    """Compute CRC16/CCITT-FALSE (init 0xFFFF, poly 0x1021, no final XOR) as 4 uppercase hex digits."""
    crc = 0xFFFF
    for char in data:
        crc ^= ord(char) << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = (crc << 1) ^ 0x1021
            else:
                crc <<= 1
            crc &= 0xFFFF
    return f"{crc:04X}"


def _strip_accents(text: str) -> str:
    """Remove accents for ASCII-safe PIX payload fields."""
    nfkd = unicodedata.normalize("NFKD", text)
    return "".join(c for c in nfkd if not unicodedata.combining(c))


def _synthetic_transaction_id() -> str:
    return f"ORDER{time.time_ns() // 1_000_000}"


class PixPaymentRequest(BaseModel):
    """Payee and amount data for one BR Code.

    Text fields are accent-stripped before their length limits are checked and
    must be ASCII afterwards, so the CRC over characters matches the bytes
    wallets read. Over-long names and cities are rejected, never truncated.
    """

    model_config = ConfigDict(frozen=True)

    merchant_name: str = Field(min_length=1, max_length=MAX_MERCHANT_NAME_LENGTH)
    merchant_city: str = Field(min_length=1, max_length=MAX_MERCHANT_CITY_LENGTH)
    amount: Decimal | None = Field(default=None, ge=0, lt=MAX_AMOUNT)
    description: str = ""
    transaction_id: str = Field(default=None, min_length=1, validate_default=True)

    @field_validator("merchant_name", "merchant_city", "description", "transaction_id", mode="before")
    @classmethod
    def _ascii_text(cls, value: object) -> object:
        if not isinstance(value, str):
            return value
        value = _strip_accents(value).strip()
        if not value.isascii():
            raise ValueError("only ASCII characters are allowed after accent removal")
        return value

    @field_validator("transaction_id", mode="before")
    @classmethod
    def _default_transaction_id(cls, value: object) -> object:
        if value is None or value == "":
            return _synthetic_transaction_id()
        return value

    @property
    def formatted_amount(self) -> str | None:
        """Amount rounded half-up to cents, e.g. ``12.50``. None when there is no amount to charge."""
        if self.amount is None:
            return None
        rounded = self.amount.quantize(_CENT, rounding=ROUND_HALF_UP)
        if rounded == 0:
            return None
        return f"{rounded:.2f}"


def merchant_account_information(transaction_id: str) -> str:
    """Value of tag 26: scheme GUI (sub-tag 00) followed by the transaction reference (sub-tag 01)."""
    return tlv("00", PIX_GUI) + tlv("01", transaction_id)


def additional_data_field(description: str) -> str:
    """Value of tag 62: reference label (sub-tag 05)."""
    return tlv("05", description)


def build_pix_payload(request: PixPaymentRequest) -> str:
    """Serialize a validated request into a complete BR Code payload, CRC included."""
    fields = [
        TLVField("00", "01"),  # Payload Format Indicator
        TLVField("26", merchant_account_information(request.transaction_id)),
        TLVField("52", "0000"),  # Merchant Category Code
        TLVField("53", "986"),  # Transaction Currency (BRL)
    ]

    amount = request.formatted_amount
    if amount is not None:
        fields.append(TLVField("54", amount))

    fields += [
        TLVField("58", "BR"),  # Country Code
        TLVField("59", request.merchant_name),
        TLVField("60", request.merchant_city),
    ]

    if request.description:
        fields.append(TLVField("62", additional_data_field(request.description)))

    # CRC is computed over everything before it, including its own "6304" prefix
    payload = "".join(field.serialize() for field in fields) + CRC_PREFIX
    return payload + crc16_ccitt(payload)


def generate_pix_payload(
    *,
    merchant_name: str,
    merchant_city: str,
    amount: Decimal | float | None = None,
    description: str = "",
    transaction_id: str | None = None,
) -> str:
    """Generate a PIX BR Code payload string.

    Args:
        merchant_name: Recipient name (max 25 chars after accent stripping).
        merchant_city: Recipient city (max 15 chars after accent stripping).
        amount: Transaction amount in reais (e.g. 25.90). None or zero for open amount.
        description: Reference label for the additional data field. Omitted when empty.
        transaction_id: Transaction reference. A timestamp-derived id is used when missing.

    Returns:
        The complete BR Code payload string with CRC16.

    Raises:
        pydantic.ValidationError: name/city too long or empty, text not ASCII after accent
            removal, amount negative, not finite or 1e10 and above.
        FieldTooLongError: a composed TLV value exceeds 99 characters.
    """
    request = PixPaymentRequest(
        merchant_name=merchant_name,
        merchant_city=merchant_city,
        amount=amount,
        description=description,
        transaction_id=transaction_id,
    )
    return build_pix_payload(request)


def parse_tlv(data: str) -> list[TLVField]:
    """Split a TLV string into its fields, without descending into composite values."""
    fields: list[TLVField] = []
    idx = 0
    while idx < len(data):
        header = data[idx : idx + 4]
        if len(header) < 4 or not (header.isascii() and header.isdigit()):
            raise MalformedPayloadError(f"Invalid TLV header at position {idx}: {header!r}")
        end = idx + 4 + int(header[2:])
        if end > len(data):
            raise MalformedPayloadError(f"TLV field {header[:2]} at position {idx} overruns the payload")
        fields.append(TLVField(header[:2], data[idx + 4 : end]))
        idx = end
    return fields


def verify_payload(payload: str) -> bool:
    """Check that ``payload`` ends with a CRC field matching everything before it."""
    if len(payload) < 8 or payload[-8:-4] != CRC_PREFIX:
        return False
    return crc16_ccitt(payload[:-4]) == payload[-4:].upper()


def parse_payload(payload: str) -> dict[str, str]:
    """Verify and parse a BR Code payload into ``{tag: value}`` for its top-level fields.

    Composite values (tags 26 and 62) are returned serialized; feed them to
    ``parse_tlv`` to read their sub-fields.
    """
    if not verify_payload(payload):
        raise InvalidChecksumError("PIX payload CRC does not match its contents")
    return {field.tag: field.value for field in parse_tlv(payload)}


def generate_pix_qrcode_png(payload: str, *, box_size: int = 10, border: int = 2) -> bytes:
    """Render a BR Code payload as a QR code.

    Returns:
        PNG image bytes ready to be saved or shown.
    """
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    qr.add_data(payload)
    qr.make(fit=True)

    img: PilImage = qr.make_image(fill_color="black", back_color="white")

    buf = BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
