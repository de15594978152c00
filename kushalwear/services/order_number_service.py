# kushalwear/services/order_number_service.py
from datetime import datetime
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from kushalwear.data.models.order import OrderModel
from kushalwear.domain.errors import ConflictError, InternalError
from kushalwear.domain.order_numbers import fallback_order_number, format_order_number, local_day_bounds
from kushalwear.repos.order_repo import OrderNumberTaken, OrderRepo
from kushalwear.utils.settings import ORDER_NUMBER_MAX_ATTEMPTS
from kushalwear.utils.logging import get_logger

logger = get_logger(__name__)

FALLBACK_BUMPS = 1000


class CountUnavailable(Exception):
    pass


def _local_now() -> datetime:
    return datetime.now().astimezone()


class OrderNumberGenerator:
    """
    Nadaje numer KWrrmmddNNNN przy pierwszym zapisie zamowienia.

    NNNN = liczba dzisiejszych zamowien + 1. count-then-insert moze
    przegrac wyscig - wtedy unique na order_number odrzuca insert, liczymy
    jeszcze raz i probujemy ponownie (backoff, max_attempts prob).
    Po wyczerpaniu prob albo gdy count sie wywali: KW + znacznik czasu,
    sprawdzony czy nie istnieje.
    """

    def __init__(
        self,
        repo: OrderRepo,
        clock: Callable[[], datetime] = _local_now,
        max_attempts: int = ORDER_NUMBER_MAX_ATTEMPTS,
        wait=None,
    ):
        self.repo = repo
        self.clock = clock
        self.max_attempts = max_attempts
        self.wait = wait if wait is not None else wait_exponential(multiplier=0.05, min=0.05, max=1)

    def next_sequential(self, last_tried: int = 0) -> str:
        now = self.clock()
        start, end = local_day_bounds(now)
        count = self.repo.count_created_between(start, end)
        # nigdy nie powtarzamy numeru juz probowanego w tym wywolaniu
        sequence = max(count + 1, last_tried + 1)
        return format_order_number(now.astimezone(), sequence)

    def next_fallback(self) -> str:
        now = self.clock()
        for bump in range(FALLBACK_BUMPS):
            candidate = fallback_order_number(now, bump)
            if not self.repo.order_number_exists(candidate):
                return candidate
        raise InternalError("Could not allocate an order number")

    def create(self, build_order: Callable[[str], OrderModel]) -> OrderModel:
        """build_order(numer) -> nowy OrderModel; kazda proba dostaje swiezy obiekt."""
        last_tried = 0
        try:
            for attempt in Retrying(
                reraise=True,
                stop=stop_after_attempt(self.max_attempts),
                wait=self.wait,
                retry=retry_if_exception_type(OrderNumberTaken),
            ):
                with attempt:
                    try:
                        number = self.next_sequential(last_tried)
                    except SQLAlchemyError as e:
                        raise CountUnavailable(e)
                    last_tried = int(number[8:])
                    return self.repo.create_order(build_order(number))
        except OrderNumberTaken as e:
            logger.warning(
                f"Order number {e} still taken after {self.max_attempts} attempts, using fallback"
            )
        except CountUnavailable as e:
            # count nie zadzialal - zamowienie i tak ma powstac
            self.repo.rollback()
            logger.error(f"Error generating order number: {e}")

        number = self.next_fallback()
        try:
            return self.repo.create_order(build_order(number))
        except OrderNumberTaken:
            raise ConflictError("Order number collision, please retry")
