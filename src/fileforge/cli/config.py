"""Contains `fileforge config` commands.

For licensing see accompanying LICENSE file.
Copyright (C) 2025 Apple Inc. All Rights Reserved.
"""

import click

from fileforge.client.config_manager import SETTING_KEYS, get_config_manager


@click.group()
def config_cli():
    """Show or change user settings."""
    pass


@config_cli.command("show")
def show_cli():
    """Print the current settings."""
    config = get_config_manager()
    for key in SETTING_KEYS:
        click.echo(f"{key} = {config.config.get(key, '')}")


@config_cli.command("set")
@click.argument("key", type=click.Choice(SETTING_KEYS))
@click.argument("value", type=str)
def set_cli(key: str, value: str):
    """Persist a setting."""
    try:
        get_config_manager().set(key, value)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="VALUE") from exc
    click.echo(f"{key} = {value}")
