"""
Base Command Class

Abstract base for all wslprovision CLI commands.
Provides common functionality and structure.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Any, Dict
import json

import click
from rich.console import Console

from wslprovision.exceptions import (
    ProvisionError,
    PrivilegeError,
    RemediationError,
    UserDeclined,
)
from wslprovision.logger import ProvisionLogger
from wslprovision.ui_components import show_header
from wslprovision.utils import get_state_dir


class BaseCommand(ABC):
    """
    Abstract base command class.

    Provides:
    - Logger initialization
    - Header display
    - Error handling with exit codes
    - JSON output support
    """

    def __init__(
        self,
        verbose: bool = False,
        json_output: bool = False,
        state_dir: Optional[Path] = None,
    ):
        self.verbose = verbose
        self.json_output = json_output
        self.console = Console()
        self.state_dir = Path(state_dir) if state_dir else get_state_dir()
        self.logger: Optional[ProvisionLogger] = None

    def init_logger(self, distro: str, command_name: str) -> Optional[ProvisionLogger]:
        """
        Initialize command logger (skip in JSON mode).

        Args:
            distro: Target distro name
            command_name: Command name

        Returns:
            ProvisionLogger instance or None if JSON mode
        """
        if self.json_output:
            return None
        self.logger = ProvisionLogger(
            distro,
            command_name,
            verbose=self.verbose,
            log_dir=self.state_dir / "logs",
            rich_console=self.console,
        )
        return self.logger

    def output_json(self, data: Dict[str, Any], exit_code: int = 0) -> None:
        """
        Output data as JSON and exit on error.

        Args:
            data: Data to output as JSON
            exit_code: Exit code (0 for success, non-zero for error)
        """
        print(json.dumps(data, indent=2))
        if exit_code != 0:
            raise SystemExit(exit_code)

    def show_header(
        self,
        title: str,
        subtitle: Optional[str] = None,
        distro: Optional[str] = None,
        details: Optional[dict] = None,
    ) -> None:
        """Show command header (skip in JSON or verbose mode)."""
        if not self.verbose and not self.json_output:
            show_header(
                title=title,
                subtitle=subtitle,
                distro=distro,
                details=details,
                console=self.console,
            )

    def print_success(self, message: str) -> None:
        """Print success message (skip in JSON mode)."""
        if not self.json_output:
            self.console.print(f"[green]✓ {message}[/green]")

    def print_warning(self, message: str) -> None:
        """Print warning message (skip in JSON mode)."""
        if not self.json_output:
            self.console.print(f"[yellow]⚠ {message}[/yellow]")

    def print_dim(self, message: str) -> None:
        """Print dim message (skip in JSON mode)."""
        if not self.json_output:
            self.console.print(f"[dim]{message}[/dim]")

    def confirm(self, question: str, default: bool = False) -> bool:
        """
        Ask for user confirmation.

        Args:
            question: Question to ask
            default: Default answer

        Returns:
            True if confirmed
        """
        return click.confirm(question, default=default)

    def _print_log_location(self) -> None:
        if self.logger:
            self.console.print(f"\n[dim]Logs saved to:[/dim] {self.logger.log_path}\n")

    @abstractmethod
    def execute(self, **kwargs) -> None:
        """
        Execute command logic.

        Must be implemented by subclasses.
        """
        pass

    def run(self, **kwargs) -> None:
        """
        Run command with error handling.

        Every failure ends the process with a non-zero exit status.

        Args:
            **kwargs: Command arguments
        """
        try:
            self.execute(**kwargs)
        except KeyboardInterrupt:
            self.console.print("\n[yellow]⚠️  Operation cancelled by user[/yellow]")
            self._print_log_location()
            raise SystemExit(130)
        except SystemExit:
            raise
        except PrivilegeError as e:
            self.console.print(f"\n[bold red]✗ {e.message}[/bold red]")
            self.print_dim(e.context)
            raise SystemExit(1)
        except UserDeclined as e:
            self.console.print(f"\n[yellow]{e.message}[/yellow]")
            raise SystemExit(1)
        except RemediationError as e:
            self.console.print(
                f"\n[bold red]✗ Provisioning aborted at step '{e.step_name}'[/bold red]"
            )
            if e.context:
                self.console.print(f"  [color(208)]{e.context}[/color(208)]")
            self._print_log_location()
            raise SystemExit(1)
        except ProvisionError as e:
            self.console.print(f"\n[bold red]✗ Error:[/bold red] {e.message}")
            if e.context:
                self.print_dim(e.context)
            if self.logger:
                self.logger.log_error(e.message, context=e.context)
            self._print_log_location()
            raise SystemExit(1)
        except Exception as e:
            error_type = type(e).__name__
            self.console.print(f"\n[bold red]✗ {error_type}:[/bold red] {e}\n")
            if self.logger:
                self.logger.log_error(f"{error_type}: {e}")
            self._print_log_location()
            raise SystemExit(1)
