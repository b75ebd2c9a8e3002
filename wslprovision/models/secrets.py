"""
Secret Models

Ephemeral credential held only in process memory.
"""

from dataclasses import dataclass, field


@dataclass
class Credential:
    """Account name and password for the provisioned guest account."""

    username: str
    password: str = field(repr=False)

    @property
    def is_erased(self) -> bool:
        return self.password == ""

    def erase(self) -> None:
        """Drop the plaintext password. Safe to call more than once."""
        self.password = ""

    def as_chpasswd_line(self) -> str:
        """Format for `chpasswd` batch input."""
        return f"{self.username}:{self.password}\n"

    def __repr__(self) -> str:
        state = "erased" if self.is_erased else "set"
        return f"Credential(username={self.username}, password=<{state}>)"
