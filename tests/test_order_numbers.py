from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from tenacity import wait_none

from kushalwear.data.models.order import OrderModel
from kushalwear.domain.errors import ConflictError
from kushalwear.domain.order_numbers import (
    FALLBACK_NUMBER_RE,
    ORDER_NUMBER_RE,
    fallback_order_number,
    format_order_number,
    local_day_bounds,
)
from kushalwear.domain.order_status import OrderStatus, can_transition, check_transition
from kushalwear.repos.order_repo import OrderNumberTaken, OrderRepo
from kushalwear.services.order_number_service import OrderNumberGenerator

NOW = datetime(2024, 3, 7, 12, 30, tzinfo=timezone.utc)


def clock():
    return NOW


class FakeOrder:
    def __init__(self, order_number):
        self.order_number = order_number


class FakeRepo:
    """Udaje OrderRepo: count dzisiejszych + zbior zajetych numerow."""

    def __init__(self, today_count=0, taken=(), count_fails=False):
        self.today_count = today_count
        self.taken = set(taken)
        self.count_fails = count_fails
        self.rolled_back = False

    def count_created_between(self, start, end):
        if self.count_fails:
            from sqlalchemy.exc import OperationalError

            raise OperationalError("SELECT count", {}, Exception("db down"))
        return self.today_count

    def create_order(self, order):
        if order.order_number in self.taken:
            raise OrderNumberTaken(order.order_number)
        self.taken.add(order.order_number)
        self.today_count += 1
        return order

    def order_number_exists(self, number):
        return number in self.taken

    def rollback(self):
        self.rolled_back = True


def _generator(repo, **kwargs):
    return OrderNumberGenerator(repo, clock=clock, wait=wait_none(), **kwargs)


def _expected(n):
    return format_order_number(NOW.astimezone(), n)


def test_format_order_number():
    assert format_order_number(datetime(2024, 3, 7), 12) == "KW2403070012"
    assert ORDER_NUMBER_RE.match(format_order_number(datetime(2024, 3, 7), 12345))


def test_fallback_number_shape():
    number = fallback_order_number(NOW)
    assert FALLBACK_NUMBER_RE.match(number)
    assert fallback_order_number(NOW, 1) != number


def test_day_bounds_span_one_day():
    start, end = local_day_bounds(NOW)
    assert (end - start).total_seconds() == 24 * 3600
    assert start <= NOW < end


def test_first_order_of_day_gets_sequence_one():
    order = _generator(FakeRepo()).create(FakeOrder)
    assert order.order_number == _expected(1)


def test_same_day_orders_get_distinct_suffixes():
    gen = _generator(FakeRepo())
    first = gen.create(FakeOrder)
    second = gen.create(FakeOrder)

    assert first.order_number == _expected(1)
    assert second.order_number == _expected(2)


def test_collision_retries_with_next_sequence():
    repo = FakeRepo(today_count=0, taken={_expected(1), _expected(2)})
    order = _generator(repo).create(FakeOrder)
    assert order.order_number == _expected(3)


def test_exhausted_attempts_fall_back_to_timestamp():
    repo = FakeRepo(taken={_expected(n) for n in range(1, 10)})
    order = _generator(repo, max_attempts=3).create(FakeOrder)
    assert FALLBACK_NUMBER_RE.match(order.order_number)


def test_count_failure_falls_back_to_timestamp():
    repo = FakeRepo(count_fails=True)
    order = _generator(repo).create(FakeOrder)

    assert FALLBACK_NUMBER_RE.match(order.order_number)
    assert repo.rolled_back


def test_fallback_skips_existing_numbers():
    repo = FakeRepo(count_fails=True, taken={fallback_order_number(NOW)})
    order = _generator(repo).create(FakeOrder)
    assert order.order_number == fallback_order_number(NOW, 1)


@pytest.mark.parametrize(
    "current,new",
    [
        ("pending", "processing"),
        ("pending", "cancelled"),
        ("processing", "shipped"),
        ("shipped", "delivered"),
        ("shipped", "shipped"),
    ],
)
def test_allowed_transitions(current, new):
    assert check_transition(current, new) == OrderStatus(new)


@pytest.mark.parametrize(
    "current,new",
    [
        ("delivered", "pending"),
        ("cancelled", "processing"),
        ("shipped", "pending"),
        ("pending", "delivered"),
    ],
)
def test_rejected_transitions(current, new):
    assert not can_transition(OrderStatus(current), OrderStatus(new))
    with pytest.raises(ConflictError):
        check_transition(current, new)


def _order(number, **overrides):
    data = dict(
        user_id="u1",
        order_number=number,
        items=[{"product": "P1", "name": "Classic Tee", "price": 19.99, "quantity": 1}],
        subtotal=Decimal("19.99"),
        tax=Decimal("0"),
        shipping_cost=Decimal("0"),
        total=Decimal("19.99"),
    )
    data.update(overrides)
    return OrderModel(**data)


def test_unique_index_collision_moves_to_next_sequence(session):
    # numer z dzisiaj zajety przez zamowienie, ktore count dzisiejszych nie widzi
    today = datetime.now().astimezone()
    session.add(_order(format_order_number(today, 1), created_at=datetime.now(timezone.utc) - timedelta(days=2)))
    session.commit()

    generator = OrderNumberGenerator(OrderRepo(session), wait=wait_none())
    order = generator.create(_order)

    assert order.order_number == format_order_number(today, 2)
    assert OrderRepo(session).count_all() == 2
