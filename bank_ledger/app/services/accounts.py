from __future__ import annotations

import logging
from contextlib import AbstractContextManager
from typing import Optional, Sequence

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..core.db import unit_of_work
from ..core.errors import (
    ConflictError,
    InsufficientFundsError,
    NotFoundError,
    ValidationError,
)
from ..core.validation import MAX_BALANCE, require_account_number, require_delta
from ..models import AccountModel, AccountResponse, UserModel


logger = logging.getLogger(__name__)


class SqlAccountStore:
    """Account rows and atomic balance arithmetic on top of a SQLModel session.

    Every public method runs inside :func:`unit_of_work`, so called on its own
    it commits (or rolls back) immediately, and called inside
    :meth:`transaction` it joins the caller's unit.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def transaction(self) -> AbstractContextManager[Session]:
        return unit_of_work(self.session)

    # ------------------------------------------------------------------
    # Helper utilities
    # ------------------------------------------------------------------
    def _find_by_number(self, account_number: int) -> Optional[AccountModel]:
        stmt = (
            select(AccountModel)
            .where(AccountModel.account_number == account_number)
            .execution_options(populate_existing=True)
        )
        return self.session.exec(stmt).first()

    def _find_by_id(self, account_id: int) -> Optional[AccountModel]:
        stmt = (
            select(AccountModel)
            .where(AccountModel.id == account_id)
            .execution_options(populate_existing=True)
        )
        return self.session.exec(stmt).first()

    def _account_to_response(self, account: AccountModel) -> AccountResponse:
        return AccountResponse.model_validate(account)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def create(self, user_id: int, account_number: int, name: str) -> AccountResponse:
        require_account_number(account_number)
        with unit_of_work(self.session):
            if self.session.get(UserModel, user_id) is None:
                raise NotFoundError(f"User {user_id} not found")
            if self._find_by_number(account_number) is not None:
                raise ConflictError(f"Account number {account_number} already exists")

            account = AccountModel(
                user_id=user_id,
                account_number=account_number,
                name=name,
                balance=0,
            )
            self.session.add(account)
            try:
                self.session.flush()
            except IntegrityError as exc:
                raise ConflictError(
                    f"Account number {account_number} already exists"
                ) from exc
            response = self._account_to_response(account)

        logger.info(
            "account.created",
            extra={
                "account_id": response.id,
                "user_id": user_id,
                "account_number": account_number,
            },
        )
        return response

    def list_by_user(self, user_id: int) -> list[AccountResponse]:
        stmt = (
            select(AccountModel)
            .where(AccountModel.user_id == user_id)
            .order_by(AccountModel.id)
            .execution_options(populate_existing=True)
        )
        with unit_of_work(self.session):
            return [self._account_to_response(row) for row in self.session.exec(stmt)]

    def get_by_id(self, account_id: int) -> AccountResponse:
        with unit_of_work(self.session):
            account = self._find_by_id(account_id)
            if account is None:
                raise NotFoundError(f"Account {account_id} not found")
            return self._account_to_response(account)

    def get_by_account_number(self, account_number: int) -> AccountResponse:
        require_account_number(account_number)
        with unit_of_work(self.session):
            account = self._find_by_number(account_number)
            if account is None:
                raise NotFoundError(f"Account number {account_number} not found")
            return self._account_to_response(account)

    def delete_by_id(self, account_id: int, *, missing_ok: bool = False) -> None:
        with unit_of_work(self.session):
            account = self._find_by_id(account_id)
            if account is None:
                if not missing_ok:
                    raise NotFoundError(f"Account {account_id} not found")
            else:
                self.session.delete(account)

        if account is None:
            logger.info("account.delete_missing", extra={"account_id": account_id})
        else:
            logger.info("account.deleted", extra={"account_id": account_id})

    def delete_all_by_user(self, user_id: int) -> int:
        stmt = delete(AccountModel).where(AccountModel.user_id == user_id)
        with unit_of_work(self.session):
            removed = self.session.connection().execute(stmt).rowcount
        logger.info(
            "account.deleted_for_user",
            extra={"user_id": user_id, "removed": removed},
        )
        return removed

    # ------------------------------------------------------------------
    # Balance arithmetic
    # ------------------------------------------------------------------
    def lock_accounts(self, account_ids: Sequence[int]) -> None:
        """Take row locks on ``account_ids`` in id order.

        Rendered as ``SELECT ... FOR UPDATE`` where the dialect supports it;
        SQLite serializes writers on the database lock instead.
        """
        stmt = (
            select(AccountModel.id)
            .where(AccountModel.id.in_(sorted(set(account_ids))))
            .order_by(AccountModel.id)
            .with_for_update()
        )
        with unit_of_work(self.session):
            self.session.exec(stmt).all()

    def adjust_balance(self, account_id: int, delta: int) -> int:
        """Apply ``balance + delta`` atomically and return the new balance.

        The funds check (and, for credits, the ceiling of the 64-bit balance
        column) lives in the UPDATE's WHERE clause, so the read-modify-write
        is a single statement and a concurrent writer on the same row is
        serialized behind it. When no row matches, nothing has been written.
        """
        require_delta(delta)
        stmt = (
            update(AccountModel)
            .where(AccountModel.id == account_id)
            .where(
                AccountModel.balance <= MAX_BALANCE - delta
                if delta > 0
                else AccountModel.balance >= -delta
            )
            .values(balance=AccountModel.balance + delta)
        )
        balance_stmt = select(AccountModel.balance).where(AccountModel.id == account_id)

        with unit_of_work(self.session):
            updated = self.session.connection().execute(stmt).rowcount
            current = self.session.exec(balance_stmt).first()
            if current is None:
                raise NotFoundError(f"Account {account_id} not found")
            if updated == 0 and delta > 0:
                logger.info(
                    "account.balance_ceiling",
                    extra={"account_id": account_id, "delta": delta, "balance": current},
                )
                raise ValidationError(
                    f"Deposit would exceed the maximum balance of account {account_id}"
                )
            if updated == 0:
                logger.info(
                    "account.insufficient_funds",
                    extra={"account_id": account_id, "delta": delta, "balance": current},
                )
                raise InsufficientFundsError(
                    f"Insufficient funds in account {account_id}"
                )

        return current
