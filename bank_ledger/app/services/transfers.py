from __future__ import annotations

import logging

from ..core.errors import LedgerError
from ..core.validation import (
    require_account_number,
    require_distinct_accounts,
    require_positive_amount,
)
from ..models import AccountResponse, TransferResponse
from .interfaces import AccountService


logger = logging.getLogger(__name__)


class TransferEngine:
    """Deposit, withdraw and transfer built on :meth:`AccountService.adjust_balance`.

    A transfer moves through ``validated -> debited -> credited -> committed``
    inside a single unit of work. Every failure after validation rolls the
    unit back, so neither balance changes.
    """

    def __init__(self, accounts: AccountService) -> None:
        self.accounts = accounts

    def deposit(self, account_id: int, amount: int) -> AccountResponse:
        require_positive_amount(amount)
        with self.accounts.transaction():
            balance = self.accounts.adjust_balance(account_id, amount)
            account = self.accounts.get_by_id(account_id)
        logger.info(
            "account.deposit",
            extra={"account_id": account_id, "amount": amount, "balance": balance},
        )
        return account

    def withdraw(self, account_id: int, amount: int) -> AccountResponse:
        require_positive_amount(amount)
        with self.accounts.transaction():
            balance = self.accounts.adjust_balance(account_id, -amount)
            account = self.accounts.get_by_id(account_id)
        logger.info(
            "account.withdraw",
            extra={"account_id": account_id, "amount": amount, "balance": balance},
        )
        return account

    def transfer(
        self,
        from_account_number: int,
        to_account_number: int,
        amount: int,
    ) -> TransferResponse:
        require_positive_amount(amount)
        require_account_number(from_account_number)
        require_account_number(to_account_number)
        require_distinct_accounts(from_account_number, to_account_number)

        try:
            with self.accounts.transaction():
                source = self.accounts.get_by_account_number(from_account_number)
                dest = self.accounts.get_by_account_number(to_account_number)
                self.accounts.lock_accounts([source.id, dest.id])

                # Debit first: the funds check must pass before any credit.
                self.accounts.adjust_balance(source.id, -amount)
                self.accounts.adjust_balance(dest.id, amount)

                source = self.accounts.get_by_id(source.id)
                dest = self.accounts.get_by_id(dest.id)
        except LedgerError as exc:
            logger.info(
                "transfer.rolled_back",
                extra={
                    "from_account_number": from_account_number,
                    "to_account_number": to_account_number,
                    "amount": amount,
                    "reason": type(exc).__name__,
                },
            )
            raise

        logger.info(
            "account.transfer",
            extra={
                "source_account_id": source.id,
                "dest_account_id": dest.id,
                "amount": amount,
            },
        )
        return TransferResponse(source=source, dest=dest, amount=amount)
