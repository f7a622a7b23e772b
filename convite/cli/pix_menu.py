from __future__ import annotations

import logging
from pathlib import Path

import questionary
from rich.console import Console
from rich.table import Table

from convite.pix import InvalidAmountError, PixError, PixPayloadBuilder, parse_tlv
from convite.qr import render_qrcode_png
from convite.settings import settings

logger = logging.getLogger(__name__)

console = Console()

FIELD_LABELS = {
    "00": "Formato",
    "01": "Iniciação",
    "26": "Conta PIX",
    "52": "Categoria",
    "53": "Moeda",
    "54": "Valor",
    "58": "País",
    "59": "Recebedor",
    "60": "Cidade",
    "62": "Dados adicionais",
    "63": "CRC16",
}


def parse_amount(text: str) -> str | None:
    """Normalize a typed amount into a decimal string. Returns None on empty input.

    Accepts formats like '49', '49.90', '49,90', '1.250,00'.
    """
    text = text.strip()
    if not text:
        return None
    # PT-BR format: '1.250,00' -> '1250.00'
    if "," in text:
        text = text.replace(".", "").replace(",", ".")
    return text


def _fields_table(payload: str) -> Table:
    table = Table(title="Campos do BR Code")
    table.add_column("Tag", style="dim")
    table.add_column("Campo")
    table.add_column("Valor")
    for tag, value in parse_tlv(payload):
        table.add_row(tag, FIELD_LABELS.get(tag, ""), value)
    return table


def generate_pix_menu(builder: PixPayloadBuilder) -> None:
    console.print()
    console.print("[bold]Novo PIX[/bold]", style="cyan")

    while True:
        amount_str = questionary.text("Valor (ex: 49,90):").ask()
        amount = parse_amount(amount_str or "")
        if amount is None:
            console.print("[yellow]Operação cancelada.[/yellow]")
            return
        description = questionary.text("Descrição (opcional):").ask() or None
        txid = questionary.text("Identificador (opcional):").ask() or None
        try:
            payment = builder.generate(amount, description=description, transaction_id=txid)
            break
        except InvalidAmountError:
            console.print("[red]Valor inválido. Tente novamente.[/red]")
        except PixError as exc:
            logger.warning("CLI PIX generation failed: %s", exc)
            console.print(f"[red]Erro ao gerar PIX: {exc}[/red]")
            return

    console.print()
    console.print(_fields_table(payment.payload))
    console.print()
    console.print("[bold]Copia e cola:[/bold]")
    console.print(payment.payload, soft_wrap=True)
    console.print()

    save = questionary.confirm("Salvar QR code em PNG?", default=False).ask()
    if not save:
        return
    default_path = f"{payment.transaction_id}.png"
    path = questionary.text("Arquivo:", default=default_path).ask() or default_path
    png = render_qrcode_png(payment.payload, box_size=settings.qr_box_size, border=settings.qr_border)
    Path(path).write_bytes(png)
    console.print(f"[green]QR code salvo em {path}[/green]")
