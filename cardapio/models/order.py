from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel


class PaymentMethod(str, Enum):
    PIX = "PIX"
    DINHEIRO = "DINHEIRO"


class OrderStatus(str, Enum):
    NOVO = "NOVO"
    EM_PREPARACAO = "EM_PREPARACAO"
    SAIU_PARA_ENTREGA = "SAIU_PARA_ENTREGA"
    CONCLUIDO = "CONCLUIDO"


class OrderItem(BaseModel):
    id: str | None = None
    product_id: str = ""
    product_name: str = "Produto"
    quantity: int
    price: Decimal
    subtotal: Decimal


class Order(BaseModel):
    id: str
    tenant_id: str = ""
    customer_name: str
    customer_phone: str
    customer_address: str | None = None
    items: list[OrderItem] = []
    total: Decimal
    payment_method: PaymentMethod
    status: OrderStatus = OrderStatus.NOVO
    change_amount: Decimal | None = None  # cash handed over by the customer
    pix_qr_code: str | None = None
    created_at: datetime | None = None

    @property
    def short_id(self) -> str:
        return self.id[:8]

    @property
    def change_due(self) -> Decimal | None:
        if not self.change_amount:
            return None
        return self.change_amount - self.total
