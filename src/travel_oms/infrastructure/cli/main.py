from __future__ import annotations

import click

from travel_oms.infrastructure.bootstrap import log_level
from travel_oms.infrastructure.cli.order_commands import (
    order_add_ancillary,
    order_add_flight,
    order_cancel,
    order_cancel_item,
    order_confirm,
    order_create,
    order_pay,
    order_show,
)
from travel_oms.infrastructure.logging import configure_logging


@click.group()
@click.option(
    "--log-level",
    "level",
    default=None,
    help="DEBUG, INFO, WARNING or ERROR (default: $TRAVEL_OMS_LOG_LEVEL or WARNING).",
)
def cli(level: str | None) -> None:
    """Travel OMS: flights and ancillaries in one order"""
    try:
        configure_logging(level or log_level())
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--log-level")


@cli.group()
def order() -> None:
    """Manage travel orders."""


# Register subcommands
order.add_command(order_add_ancillary)
order.add_command(order_add_flight)
order.add_command(order_cancel)
order.add_command(order_cancel_item)
order.add_command(order_confirm)
order.add_command(order_create)
order.add_command(order_pay)
order.add_command(order_show)
