import threading
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import Mock

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlmodel import Session

from ..core.errors import (
    InsufficientFundsError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from ..core.validation import MAX_BALANCE
from ..services import SqlAccountStore, TransferEngine


class CreditFailsStore(SqlAccountStore):
    """Store whose credits blow up after the debit has been applied."""

    def adjust_balance(self, account_id: int, delta: int) -> int:
        if delta > 0:
            raise OperationalError("UPDATE accounts", {}, Exception("disk I/O error"))
        return super().adjust_balance(account_id, delta)


def test_transfer_withdraw_self_transfer_scenario(
    open_account, ledger: TransferEngine, balance_of
) -> None:
    a = open_account(111, balance=500)
    open_account(222, balance=50)

    result = ledger.transfer(111, 222, 100)
    assert (result.source.balance, result.dest.balance) == (400, 150)

    with pytest.raises(InsufficientFundsError):
        ledger.withdraw(a.id, 1000)
    assert balance_of(111) == 400

    with pytest.raises(ValidationError):
        ledger.transfer(111, 111, 50)
    assert (balance_of(111), balance_of(222)) == (400, 150)

@pytest.mark.parametrize("amount", [1, 37, 499, 500])
def test_transfer_is_zero_sum(open_account, ledger: TransferEngine, balance_of, amount) -> None:
    open_account(1, balance=500)
    open_account(2, balance=20)

    ledger.transfer(1, 2, amount)

    assert balance_of(1) + balance_of(2) == 520
    assert balance_of(1) == 500 - amount

def test_transfer_debit_checks_funds(open_account, ledger: TransferEngine, balance_of) -> None:
    open_account(1, balance=99)
    open_account(2)

    with pytest.raises(InsufficientFundsError):
        ledger.transfer(1, 2, 100)
    assert (balance_of(1), balance_of(2)) == (99, 0)

def test_transfer_unknown_account(open_account, ledger: TransferEngine, balance_of) -> None:
    open_account(1, balance=99)

    with pytest.raises(NotFoundError):
        ledger.transfer(1, 2, 10)
    with pytest.raises(NotFoundError):
        ledger.transfer(2, 1, 10)
    assert balance_of(1) == 99

def test_storage_failure_after_debit_rolls_back(
    open_account, session: Session, balance_of
) -> None:
    open_account(1, balance=300)
    open_account(2, balance=10)
    failing = TransferEngine(CreditFailsStore(session))

    with pytest.raises(StorageError):
        failing.transfer(1, 2, 120)

    assert (balance_of(1), balance_of(2)) == (300, 10)

@pytest.mark.parametrize("amount", [0, -5, True, 1.5, "10", 2**63, 2**70])
def test_invalid_amounts_never_touch_storage(amount) -> None:
    accounts = Mock(spec=SqlAccountStore)
    ledger = TransferEngine(accounts)

    for call in (
        lambda: ledger.deposit(1, amount),
        lambda: ledger.withdraw(1, amount),
        lambda: ledger.transfer(1, 2, amount),
    ):
        with pytest.raises(ValidationError):
            call()
    assert accounts.method_calls == []

def test_self_transfer_never_touches_storage() -> None:
    accounts = Mock(spec=SqlAccountStore)

    with pytest.raises(ValidationError, match="same account"):
        TransferEngine(accounts).transfer(5, 5, 10)
    assert accounts.method_calls == []

def test_concurrent_withdrawals_never_overdraw(
    open_account, engine: Engine, balance_of
) -> None:
    account = open_account(1, balance=500)
    attempts = 12
    barrier = threading.Barrier(attempts)

    def _withdraw() -> bool:
        barrier.wait()
        with Session(engine) as session:
            try:
                TransferEngine(SqlAccountStore(session)).withdraw(account.id, 100)
            except InsufficientFundsError:
                return False
            return True

    with ThreadPoolExecutor(max_workers=attempts) as pool:
        outcomes = list(pool.map(lambda _: _withdraw(), range(attempts)))

    assert outcomes.count(True) == 5
    assert balance_of(1) == 0

def test_concurrent_transfers_from_one_account(
    open_account, engine: Engine, balance_of
) -> None:
    open_account(1, balance=100)
    open_account(2)
    open_account(3)
    barrier = threading.Barrier(2)

    def _transfer(dest: int) -> bool:
        barrier.wait()
        with Session(engine) as session:
            try:
                TransferEngine(SqlAccountStore(session)).transfer(1, dest, 80)
            except InsufficientFundsError:
                return False
            return True

    with ThreadPoolExecutor(max_workers=2) as pool:
        outcomes = list(pool.map(_transfer, [2, 3]))

    assert outcomes.count(True) == 1
    assert balance_of(1) == 20
    assert balance_of(1) + balance_of(2) + balance_of(3) == 100

def test_transfer_credit_past_max_balance_rolls_back(
    open_account, ledger: TransferEngine, balance_of
) -> None:
    open_account(1, balance=10)
    open_account(2, balance=MAX_BALANCE - 5)

    with pytest.raises(ValidationError):
        ledger.transfer(1, 2, 10)

    assert (balance_of(1), balance_of(2)) == (10, MAX_BALANCE - 5)

def test_deposit_past_max_balance_is_rejected(
    open_account, ledger: TransferEngine, balance_of
) -> None:
    account = open_account(1, balance=MAX_BALANCE)

    with pytest.raises(ValidationError):
        ledger.deposit(account.id, 1)
    assert balance_of(1) == MAX_BALANCE
