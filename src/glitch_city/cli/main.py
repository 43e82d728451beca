"""Typer CLI application."""
from __future__ import annotations

from typing import Optional

import typer

app = typer.Typer(
    name="glitch-city",
    help="404 City: a glitch-metropolis text adventure run by an LLM game master",
    no_args_is_help=False,
)


@app.command()
def play(
    model: Optional[str] = typer.Option(None, "--model", "-m", help="LLM model to use"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed the engine's random source"),
    tutorial: bool = typer.Option(False, "--tutorial", "-t", help="Run the training simulation first"),
) -> None:
    """Jack into 404 City."""
    from glitch_city.app import GameApp, configure_logging

    game_app = GameApp(model_override=model, seed=seed)
    configure_logging(game_app.config)
    game_app.run(force_tutorial=tutorial)


@app.command("reset-tutorial")
def reset_tutorial() -> None:
    """Forget that the tutorial was completed."""
    from glitch_city.app import GameApp

    GameApp().reset_tutorial()


@app.command()
def check() -> None:
    """Check system requirements (Ollama, models, etc)."""
    from glitch_city.app import GameApp

    GameApp().system_check()


if __name__ == "__main__":
    app()
