"""Root conftest — sample orders shared by receipt and service tests."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from cardapio.models.order import Order, OrderItem, PaymentMethod


def _sample_order(**overrides) -> Order:
    defaults = dict(
        id="ABC12345-6789-4def-8123-456789abcdef",
        customer_name="Maria Souza",
        customer_phone="(11) 98765-4321",
        customer_address="Rua das Flores, 123",
        items=[
            OrderItem(product_name="X-Salada", quantity=2, price=Decimal("10.00"), subtotal=Decimal("20.00")),
            OrderItem(product_name="Refrigerante", quantity=1, price=Decimal("5.90"), subtotal=Decimal("5.90")),
        ],
        total=Decimal("25.90"),
        payment_method=PaymentMethod.PIX,
        created_at=datetime(2025, 3, 10, 15, 30, tzinfo=timezone.utc),
    )
    defaults.update(overrides)
    return Order(**defaults)


@pytest.fixture()
def pix_order() -> Order:
    return _sample_order()


@pytest.fixture()
def cash_order() -> Order:
    return _sample_order(payment_method=PaymentMethod.DINHEIRO, change_amount=Decimal("50.00"))
