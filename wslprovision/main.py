#!/usr/bin/env python3
"""wslprovision CLI - Main entry point"""

import os
import sys

from rich.console import Console

import rich_click as click

from wslprovision import __version__
from wslprovision.commands.render import render
from wslprovision.commands.status import status
from wslprovision.commands.up import up

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.USE_MARKDOWN = False
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.MAX_WIDTH = 100

click.rich_click.STYLE_COMMAND = "bold cyan"
click.rich_click.STYLE_OPTION = "bold magenta"
click.rich_click.STYLE_SWITCH = "bold green"
click.rich_click.STYLE_ARGUMENT = "bold yellow"
click.rich_click.STYLE_HEADER_TEXT = "bold cyan"
click.rich_click.STYLE_USAGE = "bold yellow"
click.rich_click.STYLE_OPTION_DEFAULT = "dim cyan"
click.rich_click.STYLE_OPTIONS_PANEL_BORDER = "cyan"
click.rich_click.STYLE_COMMANDS_PANEL_BORDER = "cyan"

console = Console()

BANNER = """
[bold cyan]╔═══════════════════════════════════════════════════════════╗[/bold cyan]
[bold cyan]║[/bold cyan]  [bold white]wslprovision[/bold white] - WSL2 workstation provisioning         [bold cyan]║[/bold cyan]
[bold cyan]╚═══════════════════════════════════════════════════════════╝[/bold cyan]
"""


def handle_cli_errors(func):
    """Decorator to handle errors that escape command classes."""
    import functools
    from click.exceptions import ClickException

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ClickException as e:
            e.show()
            sys.exit(e.exit_code)
        except KeyboardInterrupt:
            console.print("\n\n[yellow]⚠️  Operation cancelled by user[/yellow]")
            sys.exit(130)
        except Exception as e:
            console.print(f"\n[bold red]✗ Unexpected error:[/bold red] {e}\n")

            if os.environ.get("DEBUG") or os.environ.get("VERBOSE"):
                import traceback

                console.print("[dim]Traceback:[/dim]")
                traceback.print_exc()
            sys.exit(1)

    return wrapper


@click.group()
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """
    wslprovision - Idempotent WSL2 workstation setup.

    \b
    Quick Start (elevated terminal):
      wslprovision up                     # Provision Ubuntu interactively
      wslprovision up -u alice --no-cuda  # Preset answers
      wslprovision status -u alice        # Show what is already in place
      wslprovision render bootstrap       # Print the guest bootstrap script
    """
    if ctx.invoked_subcommand is None:
        console.print(BANNER)
        console.print("[yellow]Run 'wslprovision --help' for usage[/yellow]\n")


cli.add_command(up)
cli.add_command(status)
cli.add_command(render)


@handle_cli_errors
def main():
    """Main entry point with error handling."""
    cli()


if __name__ == "__main__":
    main()
