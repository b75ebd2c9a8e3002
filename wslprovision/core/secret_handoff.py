"""Secret handoff: carry the account password from prompt to chpasswd."""

import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Callable, Iterator, Optional, TypeVar

import click

from wslprovision.exceptions import SecretError
from wslprovision.models.secrets import Credential

T = TypeVar("T")


def capture(username: str, prompt: Optional[Callable[..., str]] = None) -> Credential:
    """
    Interactively capture the account password (masked, confirmed).

    Args:
        username: Account the password belongs to
        prompt: click.prompt compatible callable

    Raises:
        SecretError: If an empty password is entered
    """
    prompt = prompt or click.prompt
    password = prompt(
        f"Password for '{username}'",
        hide_input=True,
        confirmation_prompt=True,
    )
    if not password:
        raise SecretError("Password must not be empty")
    return Credential(username=username, password=password)


@contextmanager
def staged(credential: Credential, directory: Optional[str] = None) -> Iterator[Path]:
    """
    Write the credential to a private temp file for the lifetime of the block.

    The file is created 0600 and removed on every exit path.

    Yields:
        Path of the staged file (chpasswd batch format)
    """
    if credential.is_erased:
        raise SecretError(f"Credential for '{credential.username}' was already consumed")

    fd, name = tempfile.mkstemp(prefix="wslprovision-", suffix=".cred", dir=directory)
    path = Path(name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
            os.chmod(path, 0o600)
            handle.write(credential.as_chpasswd_line())
        yield path
    finally:
        path.unlink(missing_ok=True)


def consume(
    credential: Credential,
    action: Callable[[IO], T],
    directory: Optional[str] = None,
) -> T:
    """
    Hand the credential to a single remediation action, then destroy it.

    Args:
        credential: Captured credential
        action: Receives the open staged file (to pipe as stdin)
        directory: Temp directory override

    Returns:
        Whatever the action returns
    """
    try:
        with staged(credential, directory=directory) as path:
            with open(path, "rb") as handle:
                return action(handle)
    finally:
        credential.erase()
