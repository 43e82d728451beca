"""Rich terminal display manager."""
from __future__ import annotations

from typing import Iterable

from rich import box
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.text import Text

from glitch_city.llm.provider import LLMProvider
from glitch_city.models.state import LogEntry, Sender

console = Console()

BOOT_SEQUENCE = (
    "[SYSTEM_BOOT] :: Initializing Glitch Metropolis v1.3.37...",
    "[KERNEL] :: Loading core modules...",
    "[NETWORK] :: Pinging reality daemon... OK",
    "[RENDER] :: Compiling shaders... Welcome, user.",
)


class Display:
    def __init__(self, width: int = 80):
        self.console = console
        self.width = width

    def show_title_screen(self) -> None:
        title = Text()
        title.append("  _  _    ___  _  _      ___ ___ _______   __\n", style="bold cyan")
        title.append(" | || |  / _ \\| || |    / __|_ _|_   _\\ \\ / /\n", style="bold cyan")
        title.append(" |__   _| (_) |__   _|  | (__ | |  | |  \\ V /\n", style="bold cyan")
        title.append("    |_|  \\___/   |_|     \\___|___| |_|   |_|\n", style="bold cyan")
        title.append("\n        The Glitch Metropolis\n", style="dim")
        self.console.print(Panel(title, border_style="cyan", box=box.DOUBLE, width=self.width))
        for line in BOOT_SEQUENCE:
            self.console.print(f"[green]{line}[/green]")

    def show_log_entries(self, entries: Iterable[LogEntry]) -> None:
        for entry in entries:
            if entry.sender == Sender.PLAYER:
                self.console.print(f"[bold cyan]{entry.text}[/bold cyan]")
                continue
            border = "red" if entry.text.startswith((":: KERNEL_PANIC", ":: FATAL_EXCEPTION")) else "green"
            self.console.print(Panel(
                Markdown(entry.text),
                border_style=border,
                box=box.ROUNDED,
                width=self.width,
                padding=(0, 1),
            ))

    def show_combat_options(self, options: Iterable[str]) -> None:
        self.console.print("  " + "   ".join(f"[bold red][{o}][/bold red]" for o in options))

    def show_critical(self) -> None:
        self.console.print(Panel(
            Text("CRITICAL ERROR\nSYSTEM RECALIBRATING...", justify="center", style="bold red"),
            border_style="red", box=box.HEAVY, width=self.width,
        ))

    def show_game_over(self) -> None:
        self.console.print(Panel(
            Text("SYSTEM CRASHED\nConnection Terminated", justify="center", style="bold red"),
            border_style="red", box=box.HEAVY, width=self.width,
        ))

    def show_error(self, message: str) -> None:
        self.console.print(f"[bold red]Error:[/bold red] {message}")

    def show_info(self, message: str) -> None:
        self.console.print(f"[bold blue]Info:[/bold blue] {message}")

    def get_input(self, prompt: str = "> ") -> str:
        return self.console.input(f"[bold cyan]{prompt}[/bold cyan]").strip()

    def show_system_check(self, llm: LLMProvider) -> None:
        self.console.print("\n[bold]System Check[/bold]\n")
        if llm.is_available():
            self.console.print(f"[green]Ollama:[/green] Running, model '{llm.model_name}' found")
        else:
            self.console.print(
                f"[red]Ollama:[/red] Not reachable or '{llm.model_name}' missing. "
                f"Run: ollama serve && ollama pull {llm.model_name}"
            )
        for pkg in ["pydantic", "litellm", "rich", "typer", "jinja2"]:
            try:
                __import__(pkg)
                self.console.print(f"[green]{pkg}:[/green] Installed")
            except ImportError:
                self.console.print(f"[red]{pkg}:[/red] Not installed")
        self.console.print()
