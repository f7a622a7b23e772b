import questionary
from rich.console import Console

from convite.cli.pix_menu import generate_pix_menu
from convite.pix import MerchantConfig, PixPayloadBuilder
from convite.settings import settings

console = Console()


def _build_builder() -> PixPayloadBuilder:
    return PixPayloadBuilder(MerchantConfig.from_settings(settings))


def main_menu() -> None:
    builder = _build_builder()

    console.print()
    console.print("[bold]Lista de Presentes: PIX[/bold]", style="cyan")
    console.print()

    while True:
        choice = questionary.select(
            "Menu Principal",
            choices=["Gerar PIX", "Sair"],
        ).ask()

        if choice is None or choice == "Sair":
            console.print("[bold]Até logo![/bold]")
            break
        elif choice == "Gerar PIX":
            generate_pix_menu(builder)
