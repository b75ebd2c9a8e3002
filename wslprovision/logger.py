"""
Logging system for wslprovision
Provides real-time logging to files with clean console output
"""

import re
from pathlib import Path
from datetime import datetime
from typing import Optional, TextIO
from rich.console import Console

from wslprovision.constants import LOG_DATE_FORMAT, LOG_TIME_FORMAT

console = Console()

ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


class ProvisionLogger:
    """
    Manages logging for provisioning runs
    - Writes all output to log files in real-time
    - Shows clean progress UI in console (unless verbose)
    - Captures errors with context
    - Acts as the step runner's reporter via report(level, message)
    """

    def __init__(
        self,
        distro: str,
        operation: str,
        verbose: bool = False,
        log_dir: Optional[Path] = None,
        rich_console: Optional[Console] = None,
    ):
        """
        Initialize logger

        Args:
            distro: Name of the target distro
            operation: Operation name (e.g., 'up', 'status')
            verbose: If True, show all output in console
            log_dir: Root log directory (defaults to <state dir>/logs)
            rich_console: Rich console to print to (defaults to module console)
        """
        self.distro = distro
        self.operation = operation
        self.verbose = verbose
        self.console = rich_console or console
        self.log_file: Optional[TextIO] = None
        self.log_path: Optional[Path] = None
        self.has_errors = False

        if log_dir is None:
            from wslprovision.utils import get_state_dir

            log_dir = get_state_dir() / "logs"

        # Structure: logs/{distro}/{date}/{time}_{operation}.log
        now = datetime.now()
        distro_logs_dir = Path(log_dir) / distro / now.strftime(LOG_DATE_FORMAT)
        distro_logs_dir.mkdir(parents=True, exist_ok=True)

        self.log_path = distro_logs_dir / f"{now.strftime(LOG_TIME_FORMAT)}_{operation}.log"

        # Line buffered for real-time output
        self.log_file = open(self.log_path, "w", buffering=1, encoding="utf-8")

        self._write_log_header()

    def _write_log_header(self):
        """Write log file header"""
        header = f"""
{"=" * 80}
wslprovision Log
{"=" * 80}
Distro: {self.distro}
Operation: {self.operation}
Started: {datetime.now().isoformat()}
{"=" * 80}

"""
        self.log_file.write(header)
        self.log_file.flush()

    def report(self, level: str, message: str) -> None:
        """
        Reporter interface used by the step runner.

        Args:
            level: STEP, INFO, SUCCESS, WARNING, ERROR or DEBUG
            message: Human-readable message
        """
        level = level.upper()
        if level == "STEP":
            self.step(message)
        elif level == "SUCCESS":
            self.success(message)
        elif level == "WARNING":
            self.warning(message)
        elif level == "ERROR":
            self.log_error(message)
        else:
            self.log(message, level)

    def log(self, message: str, level: str = "INFO"):
        """
        Log a message to file and optionally console

        Args:
            message: Message to log
            level: Log level (INFO, WARNING, ERROR, DEBUG)
        """
        timestamp = datetime.now().strftime("%H:%M:%S")
        log_line = f"[{timestamp}] [{level}] {message}\n"

        if self.log_file:
            self.log_file.write(log_line)
            self.log_file.flush()

        if self.verbose:
            if level == "ERROR":
                self.console.print(f"[red]{message}[/red]")
            elif level == "WARNING":
                self.console.print(f"[yellow]{message}[/yellow]")
            elif level == "DEBUG":
                self.console.print(f"[dim]{message}[/dim]")
            else:
                self.console.print(message)

    def log_command(self, command: str):
        """Log a command being executed"""
        self.log(f"Executing: {command}", "DEBUG")

    def log_output(self, output: str, stream: str = "stdout"):
        """
        Log command output

        Always written to the log file, shown in console only if verbose.

        Args:
            output: Command output (single line or multiline)
            stream: Stream name (stdout, stderr)
        """
        if not output:
            return

        clean_output = ANSI_ESCAPE.sub("", output)

        if self.log_file:
            for line in clean_output.splitlines():
                self.log_file.write(f"  [{stream}] {line}\n")
            self.log_file.flush()

        if self.verbose:
            self.console.print(output, markup=False, highlight=False)

    def log_error(self, error: str, context: Optional[str] = None):
        """
        Log an error with context

        Args:
            error: Error message
            context: Additional context (e.g., command that failed)
        """
        self.has_errors = True

        error_block = f"""
{"!" * 80}
ERROR OCCURRED
{"!" * 80}
{error}
"""
        if context:
            error_block += f"\nContext: {context}\n"

        error_block += f"{'!' * 80}\n\n"

        if self.log_file:
            self.log_file.write(error_block)
            self.log_file.flush()

        if not self.verbose:
            self.console.print()

        self.console.print(f"[bold red]✗ {error}[/bold red]")
        if context:
            self.console.print(f"  [color(208)]{context}[/color(208)]")

    def step(self, step_name: str):
        """
        Start a new step

        Args:
            step_name: Name of the step
        """
        self.log(f"Step: {step_name}", "INFO")

        if not self.verbose:
            self.console.print(f"[color(214)]▶[/color(214)] [white]{step_name}[/white]")

    def success(self, message: str):
        """Log a success message"""
        self.log(message, "INFO")

        if not self.verbose:
            self.console.print(f"  [dim]✓ {message}[/dim]")

    def warning(self, message: str):
        """Log a warning message"""
        self.log(message, "WARNING")

        if not self.verbose:
            self.console.print(f"  [yellow]⚠[/yellow] [dim]{message}[/dim]")

    def close(self):
        """Close log file"""
        if self.log_file:
            footer = f"""
{"=" * 80}
Completed: {datetime.now().isoformat()}
Status: {"FAILED" if self.has_errors else "SUCCESS"}
{"=" * 80}
"""
            self.log_file.write(footer)
            self.log_file.close()
            self.log_file = None

    def __enter__(self):
        """Context manager entry"""
        return self

    def __exit__(self, exc_type, exc_val, _exc_tb):
        """Context manager exit"""
        if exc_type is not None and exc_type != SystemExit:
            self.log_error(
                str(exc_val) if exc_val else "Operation failed",
                context=f"{exc_type.__name__}",
            )
        self.close()
        return False  # Don't suppress exceptions
