from __future__ import annotations

import logging

from cardapio.models.order import Order
from cardapio.printer.base import PrinterTransport
from cardapio.receipt import build_receipt, order_pix_payload
from cardapio.settings import settings

logger = logging.getLogger(__name__)


class ReceiptService:
    def __init__(
        self,
        printer: PrinterTransport,
        merchant_name: str | None = None,
        merchant_city: str | None = None,
        header: str | None = None,
    ) -> None:
        self.printer = printer
        self.merchant_name = merchant_name or settings.pix_merchant_name
        self.merchant_city = merchant_city or settings.pix_merchant_city
        self.header = header or settings.receipt_header

    def pix_payload_for(self, order: Order) -> str:
        """BR Code payload for the order, as stored in ``Order.pix_qr_code``."""
        return order_pix_payload(order, merchant_name=self.merchant_name, merchant_city=self.merchant_city)

    def print_receipt(self, order: Order) -> None:
        chunks = build_receipt(
            order,
            merchant_name=self.merchant_name,
            merchant_city=self.merchant_city,
            header=self.header,
        )
        try:
            for chunk in chunks:
                self.printer.write(chunk)
        except Exception:
            logger.exception("Error printing receipt for order %s", order.id)
            raise
        logger.info(
            "Receipt printed for order %s (%d chunks, %d bytes)",
            order.id,
            len(chunks),
            sum(len(chunk) for chunk in chunks),
        )
