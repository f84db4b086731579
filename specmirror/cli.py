"""
Command line entry point.

Usage:
    specmirror setup [--push] [--no-shallow]
    specmirror status
"""

import click

from .config import load_configuration
from .errors import SetupError
from .mirror_setup import MirrorSetupManager
from .server import setup_logging


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Manage the local mirror of the spec repository."""
    ctx.ensure_object(dict)
    try:
        config = load_configuration()
    except ValueError as e:
        raise click.ClickException(str(e))
    setup_logging(config)
    ctx.obj["config"] = config


@cli.command()
@click.option("--push", is_flag=True, help="Use this option to enable push access once granted")
@click.option("--no-shallow", is_flag=True, help="Clone full history so push will work")
@click.pass_context
def setup(ctx: click.Context, push: bool, no_shallow: bool) -> None:
    """
    Set up the spec mirror.

    Creates the spec repos directory and clones the canonical spec repo into
    it. A mirror left in the old directory layout is moved over first. If
    the mirror already exists, it is updated instead.
    """
    config = ctx.obj["config"]
    manager = MirrorSetupManager(config, reporter=lambda line: click.secho(line, bold=True))

    try:
        outcome = manager.run(push=push, no_shallow=no_shallow)
    except SetupError as e:
        click.secho(f"[!] {e.message}", fg="red", err=True)
        ctx.exit(1)
    except OSError as e:
        click.secho(f"[!] {e}", fg="red", err=True)
        ctx.exit(1)

    click.secho(outcome.message, fg="green")


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show the state and access mode of the spec mirror."""
    info = MirrorSetupManager(ctx.obj["config"]).get_status()

    click.echo(f"  Mirror:  {info['mirror_dir']}")
    click.echo(f"  State:   {info['state']}")
    click.echo(f"  Access:  {info['mode']}")
    click.echo(f"  Remote:  {info['remote_url'] or '-'}")


def main():
    cli(obj={})
