"""Deduction admin CLI commands for Tax Calc.

Manages deductions.yaml - personal deduction and k-receipt ceiling.
"""

import click

from taxcalc.sdk import (
    DeductionStoreError,
    YamlDeductionStore,
    update_k_receipt_deduction,
    update_personal_deduction,
)
from taxcalc.sdk.taxes import TaxValidationError


@click.group()
def deductions():
    """Manage deductions (deductions.yaml).

    \b
    - personal: 10,000 to 100,000 (default 60,000)
    - k-receipt: 0 to 100,000 (default ceiling 50,000)
    """
    pass


@deductions.command("show")
def deductions_show():
    """Show the active deduction values."""
    store = YamlDeductionStore()
    try:
        config = store.snapshot()
    except DeductionStoreError as e:
        raise click.ClickException(str(e))

    click.echo(f"Deductions file: {store.path}")
    click.echo(f"File exists: {store.path.exists()}")
    click.echo()
    click.echo(f"  personal:  {config.personal:,}")
    click.echo(f"  k-receipt: {config.max_k_receipt:,}")


def _update(update, amount, label):
    store = YamlDeductionStore()
    try:
        stored = update(store, amount)
    except TaxValidationError as e:
        raise click.ClickException(e.message)
    except DeductionStoreError as e:
        raise click.ClickException(str(e))
    click.echo(f"Set {label} deduction: {stored:,}")
    click.echo(f"Saved to: {store.path}")


@deductions.command("set-personal")
@click.argument("amount", type=float)
def deductions_set_personal(amount):
    """Set the personal deduction (10,000 - 100,000)."""
    _update(update_personal_deduction, amount, "personal")


@deductions.command("set-k-receipt")
@click.argument("amount", type=float)
def deductions_set_k_receipt(amount):
    """Set the k-receipt ceiling (0 - 100,000)."""
    _update(update_k_receipt_deduction, amount, "k-receipt")
