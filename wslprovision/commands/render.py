"""wslprovision CLI - Render command (print generated guest files)"""

import click

from wslprovision.base import BaseCommand
from wslprovision.core import templates

RESOURCES = ("bootstrap", "profile", "wsl.conf", "sudoers")


class RenderCommand(BaseCommand):
    """Print a rendered template resource."""

    def execute(self, resource: str, username: str) -> None:
        if resource == "bootstrap":
            content = templates.render_bootstrap()
        elif resource == "profile":
            content = templates.render_profile()
        elif resource == "wsl.conf":
            content = templates.render_wsl_conf()
        else:
            content = templates.render_sudoers(username)
        click.echo(content, nl=False)


@click.command()
@click.argument("resource", type=click.Choice(RESOURCES), default="bootstrap")
@click.option("--username", "-u", default="user", show_default=True, help="Account name for sudoers")
def render(resource, username):
    """
    Print a generated guest file

    Shows exactly what `up` writes into the distro.
    """
    cmd = RenderCommand()
    cmd.run(resource=resource, username=username)
