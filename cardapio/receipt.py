"""ESC/POS receipt formatting for thermal printers.

A receipt is produced as a list of byte chunks in print order, so transports
with small write buffers (e.g. BLE characteristics) can send them one by one.
"""

from __future__ import annotations

import logging

from cardapio.constants import PAYMENT_METHOD_LABELS, RECEIPT_WIDTH, format_datetime
from cardapio.models import format_brl
from cardapio.models.order import Order, PaymentMethod
from cardapio.pix import generate_pix_payload

logger = logging.getLogger(__name__)

ESC = b"\x1b"
GS = b"\x1d"
INIT = ESC + b"@"
CENTER = ESC + b"a" + b"\x01"
LEFT = ESC + b"a" + b"\x00"
CUT = GS + b"V" + b"\x00"

SEPARATOR = "-" * RECEIPT_WIDTH
BANNER = "=" * RECEIPT_WIDTH

PIX_FALLBACK_MESSAGE = "Nao foi possivel gerar o codigo PIX - verifique a configuracao do estabelecimento"

# GS ( k function arguments
QR_MODEL_2 = 50
QR_ERROR_CORRECTION_M = 49


def _encode(text: str) -> bytes:
    return text.encode("cp1252", errors="replace")


def _section(title: str) -> list[str]:
    return [SEPARATOR, title, SEPARATOR]


def qrcode_commands(data: str, module_size: int = 6) -> bytes:
    """Build the GS ( k sequence that stores ``data`` in the printer's QR buffer and prints it."""
    payload = data.encode("utf-8")
    store_len = len(payload) + 3
    return (
        GS + b"(k" + bytes([4, 0, 49, 65, QR_MODEL_2, 0])
        + GS + b"(k" + bytes([3, 0, 49, 67, module_size])
        + GS + b"(k" + bytes([3, 0, 49, 69, QR_ERROR_CORRECTION_M])
        + GS + b"(k" + bytes([store_len % 256, store_len // 256, 49, 80, 48]) + payload
        + GS + b"(k" + bytes([3, 0, 49, 81, 48])
    )


def order_pix_payload(order: Order, *, merchant_name: str, merchant_city: str) -> str:
    """BR Code payload charging the order total, referenced by the order id."""
    return generate_pix_payload(
        merchant_name=merchant_name,
        merchant_city=merchant_city,
        amount=order.total,
        description=f"Pedido #{order.short_id}",
        transaction_id=order.id,
    )


def _body_section(order: Order, header: str) -> bytes:
    title = [BANNER, header.center(RECEIPT_WIDTH).rstrip(), BANNER, "", ""]

    lines = [f"Pedido: #{order.short_id}"]
    if order.created_at is not None:
        lines.append(f"Data: {format_datetime(order.created_at)}")
    lines.append("")

    lines += _section("CLIENTE")
    lines.append(f"Nome: {order.customer_name}")
    lines.append(f"Telefone: {order.customer_phone}")
    if order.customer_address:
        lines.append(f"Endereço: {order.customer_address}")
    lines.append("")

    lines += _section("ITENS")
    for item in order.items:
        lines.append(f"{item.quantity}x {item.product_name}")
        lines.append(f"   {format_brl(item.price)} x {item.quantity} = {format_brl(item.subtotal)}")
    lines.append("")

    lines += [SEPARATOR, f"TOTAL: {format_brl(order.total)}", SEPARATOR, ""]
    lines += _section("PAGAMENTO")
    lines.append(f"Método: {PAYMENT_METHOD_LABELS.get(order.payment_method, order.payment_method)}")

    return INIT + CENTER + _encode("\n".join(title)) + LEFT + _encode("\n".join(lines) + "\n")


def _pix_section(order: Order, merchant_name: str, merchant_city: str) -> bytes:
    try:
        payload = order_pix_payload(order, merchant_name=merchant_name, merchant_city=merchant_city)
    except ValueError:
        logger.warning("Could not generate PIX code for order %s", order.id, exc_info=True)
        return _encode(f"\n{PIX_FALLBACK_MESSAGE}\n")
    return CENTER + qrcode_commands(payload) + LEFT


def _footer_section(order: Order) -> bytes:
    lines: list[str] = []
    if order.payment_method == PaymentMethod.PIX:
        lines.append("Escaneie o QR Code acima para pagar")
    elif order.change_due is not None:
        lines.append(f"Valor recebido: {format_brl(order.change_amount)}")
        lines.append(f"TROCO: {format_brl(order.change_due)}")
    lines += ["", ""]

    thanks = [BANNER, "OBRIGADO PELA PREFERÊNCIA!".center(RECEIPT_WIDTH).rstrip(), BANNER, "", "", ""]
    return _encode("\n".join(lines) + "\n") + CENTER + _encode("\n".join(thanks) + "\n") + CUT


def build_receipt(order: Order, *, merchant_name: str, merchant_city: str, header: str) -> list[bytes]:
    """Format ``order`` as ESC/POS byte chunks: body, PIX QR code (PIX orders only), footer with paper cut."""
    chunks = [_body_section(order, header)]
    if order.payment_method == PaymentMethod.PIX:
        chunks.append(_pix_section(order, merchant_name, merchant_city))
    chunks.append(_footer_section(order))
    return chunks
