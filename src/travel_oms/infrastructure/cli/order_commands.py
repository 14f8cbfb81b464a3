"""CLI commands for the Order aggregate."""

from __future__ import annotations

from datetime import datetime, timezone

import click

from travel_oms.application.add_item import AddAncillaryHandler, AddFlightHandler
from travel_oms.application.cancel_item import CancelItemHandler
from travel_oms.application.cancel_order import CancelOrderHandler
from travel_oms.application.confirm_order import ConfirmOrderHandler
from travel_oms.application.create_order import CreateOrderHandler
from travel_oms.application.dto import AncillaryItemSpec, FlightItemSpec, OrderDTO
from travel_oms.application.initiate_payment import InitiatePaymentHandler
from travel_oms.application.show_order import ShowOrderHandler
from travel_oms.domain.exceptions import DomainException
from travel_oms.infrastructure.bootstrap import order_id_service, order_repository


def _parse_timestamp(raw: str | None, option: str) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if raw is None:
        return None
    try:
        value = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
    except ValueError:
        raise click.BadParameter(
            f"Invalid timestamp '{raw}'. Expected ISO-8601, e.g. 2026-07-15T11:00:00Z.",
            param_hint=option,
        )
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.id}  (status={dto.status})")
    click.echo(f"Customer: {dto.customer_id} <{dto.customer_email}>")
    click.echo(f"Created:  {dto.created_at}")
    click.echo(f"Updated:  {dto.updated_at}")
    click.echo()

    if not dto.items:
        click.echo("  (no items)")
    else:
        click.echo(f"  {'Item ID':<36} {'Kind':<10} {'Status':<21} {'Price':>14}  Description")
        click.echo(f"  {'-'*100}")
        for item in dto.items:
            description = item.description
            if item.linked_flight_item_id:
                description += f"  [flight {item.linked_flight_item_id[:8]}]"
            click.echo(
                f"  {item.id:<36} {item.kind:<10} {item.status:<21} {item.price:>14}  {description}"
            )
        click.echo(f"  {'-'*100}")

    click.echo(f"  {'Order Total (active items)':<70} {dto.total:>14}")


@click.command("create")
@click.option("--customer-id", required=True, help="Customer identifier.")
@click.option("--email", required=True, help="Customer email address.")
def order_create(customer_id: str, email: str) -> None:
    """Create a new, empty travel order."""
    handler = CreateOrderHandler(id_service=order_id_service(order_repository()))

    try:
        dto = handler.handle(customer_id=customer_id, customer_email=email)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.id} created  (status={dto.status})")
    click.echo(f"Customer: {dto.customer_id} <{dto.customer_email}>")


@click.command("add-flight")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--origin", required=True, help="Origin airport (IATA), e.g. LHR.")
@click.option("--destination", required=True, help="Destination airport (IATA), e.g. JFK.")
@click.option("--flight-number", required=True, help="Flight number, e.g. BA178.")
@click.option("--departure", required=True, help="Departure time (ISO-8601).")
@click.option("--arrival", default=None, help="Arrival time (ISO-8601), optional.")
@click.option("--price", required=True, help="Price (e.g. 549.99).")
@click.option("--currency", default="USD", show_default=True, help="ISO currency code.")
def order_add_flight(
    order_id: str,
    origin: str,
    destination: str,
    flight_number: str,
    departure: str,
    arrival: str | None,
    price: str,
    currency: str,
) -> None:
    """Add a flight segment to an order."""
    spec = FlightItemSpec(
        origin=origin,
        destination=destination,
        flight_number=flight_number,
        departure_time=_parse_timestamp(departure, "--departure"),
        arrival_time=_parse_timestamp(arrival, "--arrival"),
        price=price,
        currency=currency,
    )
    handler = AddFlightHandler(order_repo=order_repository())

    try:
        item = handler.handle(order_id, spec)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Flight {item.description} added to order {order_id} at {item.price}")
    click.echo(f"Item ID: {item.id}")


@click.command("add-ancillary")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--name", required=True, help="Product name, e.g. 'Vegetarian Meal'.")
@click.option(
    "--type",
    "type_",
    required=True,
    help="BAGGAGE, MEAL, WIFI, SEAT_UPGRADE or TRAVEL_INSURANCE.",
)
@click.option("--linked-flight", default=None, help="Flight item ID for per-segment products.")
@click.option("--price", required=True, help="Price (e.g. 28.50).")
@click.option("--currency", default="USD", show_default=True, help="ISO currency code.")
def order_add_ancillary(
    order_id: str,
    name: str,
    type_: str,
    linked_flight: str | None,
    price: str,
    currency: str,
) -> None:
    """Add an ancillary product (bag, meal, Wi-Fi ...) to an order."""
    spec = AncillaryItemSpec(
        name=name,
        type=type_,
        price=price,
        currency=currency,
        linked_flight_item_id=linked_flight,
    )
    handler = AddAncillaryHandler(order_repo=order_repository())

    try:
        item = handler.handle(order_id, spec)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    scope = "segment-level" if item.linked_flight_item_id else "order-level"
    click.echo(f"{item.description} added to order {order_id} at {item.price} ({scope})")
    click.echo(f"Item ID: {item.id}")


@click.command("cancel-item")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--item", "item_id", required=True, help="Item ID to cancel.")
def order_cancel_item(order_id: str, item_id: str) -> None:
    """Cancel a single item; the order stays open."""
    handler = CancelItemHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id, item_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Item {item_id} cancelled. New total: {dto.total}")


@click.command("pay")
@click.option("--id", "order_id", required=True, help="Order ID.")
def order_pay(order_id: str) -> None:
    """Initiate payment for an order."""
    handler = InitiatePaymentHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_id} awaiting payment of {dto.total}.")


@click.command("confirm")
@click.option("--id", "order_id", required=True, help="Order ID to confirm.")
def order_confirm(order_id: str) -> None:
    """Confirm an order once payment is through."""
    handler = ConfirmOrderHandler(order_repo=order_repository())

    try:
        handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_id} confirmed.")


@click.command("cancel")
@click.option("--id", "order_id", required=True, help="Order ID to cancel.")
def order_cancel(order_id: str) -> None:
    """Cancel an order and all of its items."""
    handler = CancelOrderHandler(order_repo=order_repository())

    try:
        handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_id} cancelled.")


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order ID to display.")
def order_show(order_id: str) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)
