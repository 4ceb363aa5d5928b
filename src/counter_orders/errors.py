"""
Ошибки ядра заказов.
Транспортный слой (HTTP, CLI) сопоставляет их со своими кодами ответа.
"""
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

# SQLSTATE: serialization_failure, deadlock_detected, lock_not_available
RETRYABLE_SQLSTATES = {"40001", "40P01", "55P03"}


class OrderLedgerError(Exception):
    """Базовая ошибка ядра заказов."""


class ValidationError(OrderLedgerError):
    """Входные данные нарушают предусловие. Запись не выполнялась."""


class ReferentialError(OrderLedgerError):
    """Ссылка на несуществующую позицию меню."""


class InvalidTransitionError(OrderLedgerError):
    """Переход статуса запрещён машиной состояний."""


class NotFoundError(OrderLedgerError):
    """Заказ или позиция меню не найдены."""


class StorageError(OrderLedgerError):
    """Сбой хранилища. Исходное исключение доступно в __cause__."""

    retryable = False


class ConcurrencyError(StorageError):
    """Конфликт параллельных транзакций, операцию можно повторить."""

    retryable = True


def _sqlstate(exc: SQLAlchemyError):
    orig = getattr(exc, "orig", None)
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def translate_db_error(exc: SQLAlchemyError) -> OrderLedgerError:
    """Переводит исключение SQLAlchemy в ошибку ядра."""
    if isinstance(exc, IntegrityError):
        return ReferentialError(f"Integrity violation: {exc.orig}")
    if _sqlstate(exc) in RETRYABLE_SQLSTATES:
        return ConcurrencyError(f"Concurrent update conflict: {exc.orig}")
    return StorageError(f"Storage failure: {exc}")
