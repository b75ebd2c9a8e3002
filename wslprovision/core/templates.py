"""Template resources rendered with Jinja2 (bootstrap script, profile, drop-ins)."""

from pathlib import Path
from typing import Any

from jinja2 import StrictUndefined, Template, TemplateError as JinjaTemplateError

from wslprovision import constants
from wslprovision.exceptions import TemplateError

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


def load_template(name: str) -> Template:
    """
    Load a Jinja2 template file from the package templates directory.

    Args:
        name: Template file name (e.g. 'bootstrap.sh.j2')

    Returns:
        Jinja2 Template instance

    Raises:
        TemplateError: If the file is missing or not valid Jinja2
    """
    file_path = TEMPLATES_DIR / name
    try:
        template_content = file_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise TemplateError(f"Template '{name}' not found", context=str(file_path))

    try:
        return Template(
            template_content,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )
    except JinjaTemplateError as e:
        raise TemplateError(f"Template '{name}' is invalid: {e}")


def render(name: str, **context: Any) -> str:
    """Render a template; missing variables are an error, not an empty string."""
    try:
        return load_template(name).render(**context)
    except JinjaTemplateError as e:
        raise TemplateError(f"Failed to render '{name}': {e}")


def render_profile() -> str:
    """Shell profile fragment with pyenv and ~/.local/bin exports."""
    return render(
        constants.PROFILE_TEMPLATE,
        begin_marker=constants.PROFILE_MARKER,
        end_marker=constants.PROFILE_END_MARKER,
    )


def render_wsl_conf() -> str:
    """Boot configuration enabling systemd."""
    return render(constants.WSL_CONF_TEMPLATE, boot={"systemd": "true"})


def render_sudoers(username: str) -> str:
    """Drop-in granting the account unrestricted passwordless sudo."""
    return render(constants.SUDOERS_TEMPLATE, username=username)


def render_bootstrap() -> str:
    """
    Guest bootstrap script.

    Only build-time constants are rendered in; per-run values (Git identity,
    Python version, component toggles) are positional arguments.
    """
    return render(
        constants.BOOTSTRAP_TEMPLATE,
        template_version=constants.BOOTSTRAP_TEMPLATE_VERSION,
        core_packages=constants.CORE_PACKAGES,
        python_build_packages=constants.PYTHON_BUILD_PACKAGES,
        pipx_packages=constants.PIPX_PACKAGES,
        cuda_packages=constants.CUDA_PACKAGES,
        docker_install_url=constants.DOCKER_INSTALL_URL,
        pyenv_install_url=constants.PYENV_INSTALL_URL,
        oh_my_zsh_install_url=constants.OH_MY_ZSH_INSTALL_URL,
        profile=render_profile(),
        profile_marker=constants.PROFILE_MARKER,
    )
