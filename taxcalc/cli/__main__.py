"""Tax Calc CLI - Command-line interface for income tax calculation."""

import json
from pathlib import Path

import click
from pydantic import ValidationError

from taxcalc import __version__
from taxcalc.sdk import DeductionStoreError, YamlDeductionStore, get_setting
from taxcalc.sdk.taxes import (
    Allowance,
    AllowanceType,
    BatchResult,
    IncomeRecord,
    TaxResult,
    TaxValidationError,
    calculate_batch_csv,
    calculate_tax_from_store,
)

from .deductions_commands import deductions as deductions_group
from .settings_commands import settings as settings_group


@click.group()
@click.version_option(version=__version__, prog_name="tax-calc")
def cli():
    """Tax Calc - Progressive personal income tax calculator.

    Calculates tax due or refund from total income, withholding tax and
    allowances (donation, k-receipt), for one person or a CSV batch.

    Configuration is loaded from (in order):

    \b
    1. TAX_CALC_CONFIG_PATH environment variable
    2. ~/.config/tax-calc/ (XDG default)

    Run 'tax-calc deductions show' to see the active deductions.
    """
    pass


cli.add_command(deductions_group)
cli.add_command(settings_group)


def resolve_output_format(output_format):
    """Use the explicit --format, else the default_output_format setting."""
    return output_format or get_setting("default_output_format", "text")


def render_tax_result(result: TaxResult):
    """Print a single calculation as text."""
    click.echo(f"Net income:  {result.net_income:,}")
    click.echo(f"Total tax:   {result.total_tax:,}")
    click.echo()
    click.echo("Tax by bracket:")
    width = max(len(level.level) for level in result.tax_levels)
    for level in result.tax_levels:
        click.echo(f"  {level.level:<{width}}  {level.tax:,}")
    click.echo()
    if result.refund > 0:
        click.echo(click.style(f"Tax refund:  {result.refund:,}", fg="green"))
    else:
        click.echo(click.style(f"Tax due:     {result.net_tax:,}", fg="yellow"))


def render_batch_result(result: BatchResult):
    """Print a batch calculation as a table."""
    click.echo(f"{'Total income':>16}  {'Tax':>14}  {'Tax refund':>14}")
    for row in result.taxes:
        click.echo(f"{row.total_income:>16,}  {row.net_tax:>14,}  {row.refund:>14,}")
    click.echo()
    click.echo(f"{len(result.taxes)} row(s)")


@cli.command("calc")
@click.option("--income", type=float, help="Total income for the year.")
@click.option("--wht", type=float, default=0.0, show_default=True, help="Withholding tax already paid.")
@click.option("--donation", type=float, multiple=True, help="Donation allowance (repeatable).")
@click.option("--k-receipt", "k_receipt", type=float, multiple=True, help="K-receipt allowance (repeatable).")
@click.option("--json-file", type=click.Path(exists=True, dir_okay=False),
              help="Read the request from a JSON file ({totalIncome, wht, allowances}).")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]),
              default=None, help="Output format (default: settings or text).")
def calc(income, wht, donation, k_receipt, json_file, output_format):
    """Calculate tax for one person.

    Examples:
        tax-calc calc --income 500000 --donation 200000
        tax-calc calc --income 560000 --wht 40000
        tax-calc calc --json-file request.json --format json
    """
    if json_file:
        if income is not None or donation or k_receipt:
            raise click.UsageError("--json-file cannot be combined with --income/--donation/--k-receipt")
        try:
            with open(json_file, "r") as f:
                payload = json.load(f)
        except json.JSONDecodeError as e:
            raise click.ClickException(f"Invalid JSON in {json_file}: {e}")
        try:
            record = IncomeRecord.model_validate(payload)
        except ValidationError as e:
            raise click.ClickException(f"Invalid request in {json_file}:\n{e}")
    else:
        if income is None:
            raise click.UsageError("--income is required (or use --json-file)")
        allowances = [Allowance(allowance_type=AllowanceType.DONATION.value, amount=a) for a in donation]
        allowances += [Allowance(allowance_type=AllowanceType.K_RECEIPT.value, amount=a) for a in k_receipt]
        record = IncomeRecord(total_income=income, wht=wht, allowances=allowances)

    try:
        result = calculate_tax_from_store(record, YamlDeductionStore())
    except TaxValidationError as e:
        raise click.ClickException(e.message)
    except DeductionStoreError as e:
        raise click.ClickException(str(e))

    if resolve_output_format(output_format) == "json":
        output = result.model_dump(by_alias=True, exclude={"total_tax", "net_income"})
        if result.refund == 0:
            output.pop("taxRefund")
        click.echo(json.dumps(output, indent=2, ensure_ascii=False))
        return
    render_tax_result(result)


@cli.command("calc-csv")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--format", "output_format", type=click.Choice(["text", "json"]),
              default=None, help="Output format (default: settings or text).")
def calc_csv(csv_file, output_format):
    """Calculate tax for every row of a CSV file.

    CSV_FILE must have the header 'totalIncome,wht,donation' followed by
    one numeric row per person.
    """
    if Path(csv_file).suffix != ".csv":
        raise click.BadParameter("File extension must be .csv", param_hint="CSV_FILE")

    try:
        with open(csv_file, "r", newline="") as f:
            result = calculate_batch_csv(f, YamlDeductionStore())
    except TaxValidationError as e:
        raise click.ClickException(e.message)
    except DeductionStoreError as e:
        raise click.ClickException(str(e))

    if resolve_output_format(output_format) == "json":
        click.echo(json.dumps(result.model_dump(by_alias=True), indent=2))
        return
    render_batch_result(result)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
