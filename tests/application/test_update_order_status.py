"""Integration tests for the UpdateOrderStatus use case."""

import pytest

from ims.application.update_order_status import UpdateOrderStatusHandler
from ims.domain.exceptions import (
    EntityNotFoundError,
    InvalidStateTransitionError,
    ValidationError,
)
from ims.domain.model.order import OrderStatus, PaymentStatus
from tests.builders import make_order
from tests.fakes import FakeUnitOfWork


def _setup():
    uow = FakeUnitOfWork(orders=[make_order(notes="First")])
    return UpdateOrderStatusHandler(uow), uow


class TestUpdateOrderStatus:

    def test_forward_transition(self):
        handler, uow = _setup()
        dto = handler.handle(1, order_status=OrderStatus.CONFIRMED)
        assert dto.order_status == "CONFIRMED"
        assert uow.orders.get_by_id(1).order_status == OrderStatus.CONFIRMED
        assert uow.commits == 1

    def test_payment_status_only(self):
        handler, _ = _setup()
        dto = handler.handle(1, payment_status=PaymentStatus.PAID)
        assert dto.order_status == "PENDING"
        assert dto.payment_status == "PAID"

    def test_notes_only(self):
        handler, _ = _setup()
        dto = handler.handle(1, notes="Call before delivery")
        assert dto.notes == "First\nCall before delivery"

    def test_shipped_date_set(self):
        handler, _ = _setup()
        for status in (OrderStatus.CONFIRMED, OrderStatus.PROCESSING, OrderStatus.SHIPPED):
            dto = handler.handle(1, order_status=status)
        assert dto.shipped_date is not None
        assert dto.delivered_date is None

    def test_invalid_transition_leaves_order(self):
        handler, uow = _setup()
        with pytest.raises(InvalidStateTransitionError):
            handler.handle(1, order_status=OrderStatus.DELIVERED, payment_status=PaymentStatus.PAID)
        order = uow.orders.get_by_id(1)
        assert order.order_status == OrderStatus.PENDING
        assert order.payment_status == PaymentStatus.PENDING

    def test_cancelled_not_reachable(self):
        handler, _ = _setup()
        with pytest.raises(InvalidStateTransitionError):
            handler.handle(1, order_status=OrderStatus.CANCELLED)

    def test_nothing_to_update(self):
        handler, _ = _setup()
        with pytest.raises(ValidationError, match="Nothing to update"):
            handler.handle(1)

    def test_unknown_order(self):
        handler, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            handler.handle(42, order_status=OrderStatus.CONFIRMED)

    def test_order_read_under_its_lock(self):
        handler, uow = _setup()
        handler.handle(1, order_status=OrderStatus.CONFIRMED)
        assert uow.orders.locked == [1]

    def test_cancelled_order_stays_cancelled(self):
        handler, uow = _setup()
        uow.orders.get_by_id(1).cancel("Out of budget")
        with pytest.raises(InvalidStateTransitionError, match="CANCELLED is final"):
            handler.handle(1, order_status=OrderStatus.CONFIRMED)
        assert uow.orders.get_by_id(1).order_status == OrderStatus.CANCELLED
