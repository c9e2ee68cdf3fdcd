"""Capability interfaces for the storage-backed services.

Callers depend on these protocols rather than on the SQL implementations so
that stores can be swapped or replaced with test doubles.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Any, Protocol, Sequence

from ..models import AccountResponse, UserResponse


class AccountService(Protocol):
    def transaction(self) -> AbstractContextManager[Any]:
        ...

    def create(self, user_id: int, account_number: int, name: str) -> AccountResponse:
        ...

    def list_by_user(self, user_id: int) -> Sequence[AccountResponse]:
        ...

    def get_by_id(self, account_id: int) -> AccountResponse:
        ...

    def get_by_account_number(self, account_number: int) -> AccountResponse:
        ...

    def delete_by_id(self, account_id: int, *, missing_ok: bool = False) -> None:
        ...

    def delete_all_by_user(self, user_id: int) -> int:
        ...

    def lock_accounts(self, account_ids: Sequence[int]) -> None:
        ...

    def adjust_balance(self, account_id: int, delta: int) -> int:
        ...


class UserService(Protocol):
    def all(self) -> Sequence[UserResponse]:
        ...

    def get_by_id(self, user_id: int) -> UserResponse:
        ...

    def create(self, first_name: str, last_name: str) -> UserResponse:
        ...

    def update_by_id(self, user_id: int, first_name: str, last_name: str) -> UserResponse:
        ...

    def delete_by_id(self, user_id: int) -> None:
        ...
