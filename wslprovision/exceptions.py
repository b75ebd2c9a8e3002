"""
wslprovision Exception Hierarchy

Clean exception hierarchy for consistent error handling across the CLI.
"""

from typing import Optional


class ProvisionError(Exception):
    """Base exception for all wslprovision errors."""

    def __init__(self, message: str, context: Optional[str] = None):
        self.message = message
        self.context = context
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format error message with optional context."""
        if self.context:
            return f"{self.message}\nContext: {self.context}"
        return self.message


class ConfigurationError(ProvisionError):
    """Raised when configuration is invalid or missing."""

    pass


class PrivilegeError(ProvisionError):
    """Raised when the host process is not running elevated."""

    def __init__(self):
        super().__init__(
            "Administrator privileges are required",
            context="Re-run wslprovision from an elevated terminal",
        )


class UserDeclined(ProvisionError):
    """Raised when the operator declines the pre-flight confirmation."""

    def __init__(self):
        super().__init__("Provisioning cancelled by user")


class BoundaryError(ProvisionError):
    """Raised when the WSL boundary cannot be reached (executable missing, OS error)."""

    pass


class CommandError(ProvisionError):
    """Raised when a command exits non-zero and the caller required success."""

    def __init__(self, command: str, returncode: int, output: str = ""):
        self.command = command
        self.returncode = returncode
        self.output = output
        message = f"Command failed with exit code {returncode}: {command}"
        super().__init__(message, context=output.strip() or None)


class RemediationError(ProvisionError):
    """Raised when a dependency-bearing step fails and the run must stop."""

    def __init__(self, step_name: str, reason: str, report=None):
        self.step_name = step_name
        self.report = report
        super().__init__(f"Step '{step_name}' failed", context=reason)


class SecretError(ProvisionError):
    """Raised when credential capture or handoff fails."""

    pass


class TemplateError(ProvisionError):
    """Raised when a template resource cannot be loaded or rendered."""

    pass
