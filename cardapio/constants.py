from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from cardapio.models.order import PaymentMethod

SP_TZ = ZoneInfo("America/Sao_Paulo")

RECEIPT_WIDTH = 32

PAYMENT_METHOD_LABELS = {PaymentMethod.PIX: "PIX", PaymentMethod.DINHEIRO: "Dinheiro"}

PIX_FIELD_LABELS = {
    "00": "Indicador de formato",
    "26": "Conta do recebedor",
    "52": "Categoria do estabelecimento",
    "53": "Moeda",
    "54": "Valor",
    "58": "País",
    "59": "Nome do recebedor",
    "60": "Cidade",
    "62": "Dados adicionais",
    "63": "CRC",
}


def format_datetime(value: datetime | None) -> str:
    """Render a timestamp as 'dd/mm/YYYY HH:MM' in São Paulo time. Naive values are taken as UTC."""
    if value is None:
        return ""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(SP_TZ).strftime("%d/%m/%Y %H:%M")
