import pytest
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError

from counter_orders.errors import (
    ConcurrencyError,
    ReferentialError,
    StorageError,
    translate_db_error,
)
from counter_orders.models import ORDER_TRANSITIONS, OrderStatusEnum, can_transition


class TestOrderStatusTransitions:
    @pytest.mark.parametrize(
        "current, target",
        [
            (OrderStatusEnum.received, OrderStatusEnum.ready),
            (OrderStatusEnum.ready, OrderStatusEnum.completed),
        ],
    )
    def test_allowed(self, current, target):
        assert can_transition(current, target)

    @pytest.mark.parametrize(
        "current, target",
        [
            (OrderStatusEnum.received, OrderStatusEnum.received),
            (OrderStatusEnum.received, OrderStatusEnum.completed),
            (OrderStatusEnum.ready, OrderStatusEnum.received),
            (OrderStatusEnum.ready, OrderStatusEnum.ready),
            (OrderStatusEnum.completed, OrderStatusEnum.received),
            (OrderStatusEnum.completed, OrderStatusEnum.ready),
            (OrderStatusEnum.completed, OrderStatusEnum.completed),
        ],
    )
    def test_rejected(self, current, target):
        assert not can_transition(current, target)

    def test_every_status_has_an_entry(self):
        assert set(ORDER_TRANSITIONS) == set(OrderStatusEnum)

    def test_status_values(self):
        assert [s.value for s in OrderStatusEnum] == ["received", "ready", "completed"]


class _PgError(Exception):
    def __init__(self, sqlstate):
        super().__init__(f"sqlstate {sqlstate}")
        self.sqlstate = sqlstate


class TestTranslateDbError:
    def test_integrity_error_is_referential(self):
        exc = IntegrityError("INSERT ...", {}, Exception("FOREIGN KEY constraint failed"))

        assert isinstance(translate_db_error(exc), ReferentialError)

    @pytest.mark.parametrize("sqlstate", ["40001", "40P01", "55P03"])
    def test_serialization_failures_are_retryable(self, sqlstate):
        error = translate_db_error(DBAPIError("UPDATE ...", {}, _PgError(sqlstate)))

        assert isinstance(error, ConcurrencyError)
        assert isinstance(error, StorageError)
        assert error.retryable

    def test_other_failures_are_storage_errors(self):
        error = translate_db_error(OperationalError("SELECT ...", {}, _PgError("08006")))

        assert type(error) is StorageError
        assert not error.retryable
