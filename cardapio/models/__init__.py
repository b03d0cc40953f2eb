from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext


def format_brl(value: Decimal | float | int) -> str:
    """Format reais as BRL string: Decimal('2850') -> 'R$ 2.850,00'"""
    reais = Decimal(str(value))
    with localcontext() as ctx:
        # enough digits to keep the cents of very large values
        ctx.prec = max(ctx.prec, reais.adjusted() + 3)
        reais = reais.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    formatted = f"{reais:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    return f"R$ {formatted}"


def parse_brl(text: str) -> Decimal | None:
    """Parse a BRL amount string into reais. Returns None on invalid input.

    Accepts formats like '2850', '2850.00', '2.850,00', '2850,50'.
    """
    text = text.strip()
    if not text:
        return None
    if "," in text:
        text = text.replace(".", "").replace(",", ".")
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value
