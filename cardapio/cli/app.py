from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

import questionary
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from cardapio.constants import PIX_FIELD_LABELS, SP_TZ
from cardapio.models import format_brl, parse_brl
from cardapio.models.order import Order, OrderItem, PaymentMethod
from cardapio.pix import generate_pix_payload, generate_pix_qrcode_png, parse_payload
from cardapio.printer.factory import get_printer
from cardapio.services.receipt_service import ReceiptService
from cardapio.settings import settings

console = Console()

MENU_GENERATE = "Gerar Código PIX"
MENU_VALIDATE = "Validar Código PIX"
MENU_TEST_RECEIPT = "Imprimir Recibo de Teste"
MENU_EXIT = "Sair"


def _build_receipt_service() -> ReceiptService:
    return ReceiptService(get_printer())


def _ask_amount() -> Decimal | None:
    while True:
        val = questionary.text("Valor (ex: 25.90, vazio para valor livre):").ask()
        if not val:
            return None
        parsed = parse_brl(val)
        if parsed is not None and parsed >= 0:
            return parsed
        console.print("[red]Valor inválido. Tente novamente.[/red]")


def _save_qrcode_png(payload: str) -> Path:
    out_dir = Path(settings.qrcode_output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / f"pix_{payload[-4:]}.png"
    path.write_bytes(generate_pix_qrcode_png(payload))
    return path.resolve()


def generate_pix_menu() -> None:
    console.print()
    console.print("[bold]Gerar Código PIX[/bold]", style="cyan")

    name = questionary.text("Nome do recebedor (máx. 25):", default=settings.pix_merchant_name).ask()
    if name is None:
        return
    city = questionary.text("Cidade (máx. 15):", default=settings.pix_merchant_city).ask()
    if city is None:
        return
    amount = _ask_amount()
    description = questionary.text("Descrição (opcional):").ask() or ""
    transaction_id = questionary.text("Identificador da transação (opcional):").ask() or None

    try:
        payload = generate_pix_payload(
            merchant_name=name,
            merchant_city=city,
            amount=amount,
            description=description,
            transaction_id=transaction_id,
        )
    except ValueError as e:
        console.print(f"[red]Não foi possível gerar o código PIX: {e}[/red]")
        return

    console.print(Panel(payload, title="PIX Copia e Cola"))
    if amount:
        console.print(f"  Valor: {format_brl(amount)}")

    if questionary.confirm("Salvar QR Code em PNG?", default=False).ask():
        path = _save_qrcode_png(payload)
        console.print(f"[green]QR Code salvo em {path}[/green]")


def validate_pix_menu() -> None:
    console.print()
    console.print("[bold]Validar Código PIX[/bold]", style="cyan")

    payload = questionary.text("Cole o código PIX:").ask()
    if not payload:
        return

    try:
        fields = parse_payload(payload.strip())
    except ValueError as e:
        console.print(f"[red]Código PIX inválido: {e}[/red]")
        return

    table = Table()
    table.add_column("Tag", justify="center")
    table.add_column("Campo")
    table.add_column("Valor")
    for tag, value in fields.items():
        table.add_row(tag, PIX_FIELD_LABELS.get(tag, "-"), value)

    console.print(table)
    console.print("[green]CRC válido.[/green]")


def print_test_receipt_menu() -> None:
    order = Order(
        id="TESTE0000000",
        customer_name="Cliente Teste",
        customer_phone="(11) 99999-9999",
        items=[
            OrderItem(product_name="X-Burguer", quantity=1, price=Decimal("25.90"), subtotal=Decimal("25.90")),
        ],
        total=Decimal("25.90"),
        payment_method=PaymentMethod.PIX,
        created_at=datetime.now(SP_TZ),
    )
    try:
        _build_receipt_service().print_receipt(order)
    except (OSError, ValueError) as e:
        console.print(f"[red]Falha ao imprimir: {e}[/red]")
        return
    console.print("[green]Recibo de teste enviado para a impressora.[/green]")


def main_menu() -> None:
    console.print()
    console.print("[bold]Cardápio Digital - PIX[/bold]", style="cyan")
    console.print()

    while True:
        choice = questionary.select(
            "Menu Principal",
            choices=[MENU_GENERATE, MENU_VALIDATE, MENU_TEST_RECEIPT, MENU_EXIT],
        ).ask()

        if choice is None or choice == MENU_EXIT:
            console.print("[bold]Até logo![/bold]")
            break
        elif choice == MENU_GENERATE:
            generate_pix_menu()
        elif choice == MENU_VALIDATE:
            validate_pix_menu()
        elif choice == MENU_TEST_RECEIPT:
            print_test_receipt_menu()
