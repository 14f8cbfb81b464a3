"""Integration tests for the CreateOrder use case.

Uses in-memory fake repositories, no file I/O.
"""

import pytest

from travel_oms.application.create_order import CreateOrderHandler
from travel_oms.domain.exceptions import IdSpaceExhaustedError, ValidationError
from travel_oms.domain.model.status import OrderStatus
from travel_oms.domain.service.order_id_service import OrderIdAllocationService
from tests.fakes import AlwaysCollidingOrderRepository, FakeOrderRepository, scripted_ids


def _setup(
    repo: FakeOrderRepository | None = None,
    ids: list[str] | None = None,
) -> tuple[CreateOrderHandler, FakeOrderRepository]:
    """Build handler with a fake repo and a scripted id source."""
    repo = repo if repo is not None else FakeOrderRepository()
    id_source = scripted_ids(ids or ["AAAA1111", "BBBB2222", "CCCC3333", "DDDD4444", "EEEE5555"])
    service = OrderIdAllocationService(repo, id_source=id_source)
    return CreateOrderHandler(service, id_source=id_source), repo


class TestCreateOrderHappyPath:

    def test_creates_empty_order(self):
        handler, _ = _setup()
        dto = handler.handle("CUST-98234", "jane.doe@email.com")
        assert dto.id == "AAAA1111"
        assert dto.status == "CREATED"
        assert dto.customer_id == "CUST-98234"
        assert dto.customer_email == "jane.doe@email.com"
        assert dto.items == []
        assert dto.total == "0.00 USD"

    def test_persists_order(self):
        handler, repo = _setup()
        dto = handler.handle("CUST-98234", "jane.doe@email.com")
        saved = repo.get_by_id(dto.id)
        assert saved is not None
        assert saved.status is OrderStatus.CREATED

    def test_strips_customer_fields(self):
        handler, _ = _setup()
        dto = handler.handle("  CUST-1 ", " a@b.com ")
        assert (dto.customer_id, dto.customer_email) == ("CUST-1", "a@b.com")


class TestCreateOrderIdCollisions:

    def test_returns_the_id_actually_stored(self):
        handler, repo = _setup(repo=FakeOrderRepository(collisions=2))
        dto = handler.handle("CUST-1", "a@b.com")
        assert dto.id == "CCCC3333"
        assert repo.get_by_id("CCCC3333") is not None

    def test_exhausted_id_space_surfaces(self):
        handler, _ = _setup(
            repo=AlwaysCollidingOrderRepository(),
            ids=["AAAA1111", "BBBB2222", "CCCC3333", "DDDD4444", "EEEE5555", "FFFF6666"],
        )
        with pytest.raises(IdSpaceExhaustedError):
            handler.handle("CUST-1", "a@b.com")


class TestCreateOrderValidation:

    def test_blank_customer_rejected(self):
        handler, repo = _setup()
        with pytest.raises(ValidationError, match="Customer ID"):
            handler.handle("", "a@b.com")
        assert repo.persist_attempts == []

    def test_blank_email_rejected(self):
        handler, _ = _setup()
        with pytest.raises(ValidationError, match="Customer email"):
            handler.handle("CUST-1", "   ")
