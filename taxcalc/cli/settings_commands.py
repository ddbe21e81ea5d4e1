"""Settings CLI commands for Tax Calc.

Manages settings.json - output preferences and the deductions file path.
"""

import click
from pathlib import Path

from taxcalc.sdk import (
    load_settings,
    save_settings,
    set_setting,
    get_settings_path,
    get_deductions_path,
)


KNOWN_SETTINGS = ("default_output_format", "deductions_file")
OUTPUT_FORMATS = ("text", "json")


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - default_output_format: text or json
    - deductions_file: custom path to deductions.yaml
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and their values."""
    settings_path = get_settings_path()
    current = load_settings()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if not current:
        click.echo("No settings configured (using defaults).")
    else:
        click.echo("Current settings:")
        for key, value in current.items():
            click.echo(f"  {key}: {value}")

    click.echo()
    click.echo("Effective paths:")
    click.echo(f"  deductions_file: {get_deductions_path()}")


@settings.command("set")
@click.argument("key", type=click.Choice(KNOWN_SETTINGS))
@click.argument("value")
def settings_set(key, value):
    """Set a setting value.

    Examples:
        tax-calc settings set default_output_format json
        tax-calc settings set deductions_file ~/tax/deductions.yaml
    """
    if key == "default_output_format" and value not in OUTPUT_FORMATS:
        raise click.BadParameter(f"must be one of: {', '.join(OUTPUT_FORMATS)}", param_hint="VALUE")
    if key == "deductions_file":
        value = str(Path(value).expanduser().resolve())

    set_setting(key, value)
    click.echo(f"Set {key}: {value}")
    click.echo(f"Saved to: {get_settings_path()}")


@settings.command("unset")
@click.argument("key", type=click.Choice(KNOWN_SETTINGS))
def settings_unset(key):
    """Clear a setting, reverting to its default."""
    current = load_settings()
    if key not in current:
        click.echo(f"{key} was not set.")
        return
    del current[key]
    save_settings(current)
    click.echo(f"Cleared {key} setting.")
