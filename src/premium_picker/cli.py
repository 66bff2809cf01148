from __future__ import annotations

import typer

app = typer.Typer(add_completion=False, help="Premium Picker CLI: cash-secured put suggestions from an option chain")

_COMMANDS_REGISTERED = False


def _register_commands() -> None:
    global _COMMANDS_REGISTERED
    if _COMMANDS_REGISTERED:
        return
    # Import here to keep `premium_picker.cli` lightweight at import time.
    from premium_picker.cli_commands.suggest_cmd import register as register_suggest

    register_suggest(app)
    _COMMANDS_REGISTERED = True


def main():
    _register_commands()
    app()


# Register commands when imported as a console-script entrypoint (`pyproject.toml` uses `premium_picker.cli:app`).
_register_commands()


if __name__ == "__main__":
    main()
