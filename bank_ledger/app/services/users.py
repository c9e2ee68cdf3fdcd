from __future__ import annotations

import logging

from sqlmodel import Session, select

from ..core.db import unit_of_work
from ..core.errors import NotFoundError
from ..models import UserModel, UserResponse
from .interfaces import AccountService


logger = logging.getLogger(__name__)


class SqlUserDirectory:
    """User records plus the cascade of their accounts on delete."""

    def __init__(self, session: Session, accounts: AccountService) -> None:
        self.session = session
        self.accounts = accounts

    def _get_user(self, user_id: int) -> UserModel:
        user = self.session.get(UserModel, user_id, populate_existing=True)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    def all(self) -> list[UserResponse]:
        stmt = select(UserModel).order_by(UserModel.id)
        with unit_of_work(self.session):
            return [UserResponse.model_validate(user) for user in self.session.exec(stmt)]

    def get_by_id(self, user_id: int) -> UserResponse:
        with unit_of_work(self.session):
            return UserResponse.model_validate(self._get_user(user_id))

    def create(self, first_name: str, last_name: str) -> UserResponse:
        with unit_of_work(self.session):
            user = UserModel(first_name=first_name, last_name=last_name)
            self.session.add(user)
            self.session.flush()
            response = UserResponse.model_validate(user)
        logger.info("user.created", extra={"user_id": response.id})
        return response

    def update_by_id(self, user_id: int, first_name: str, last_name: str) -> UserResponse:
        with unit_of_work(self.session):
            user = self._get_user(user_id)
            user.first_name = first_name
            user.last_name = last_name
            self.session.add(user)
            self.session.flush()
            response = UserResponse.model_validate(user)
        logger.info("user.updated", extra={"user_id": user_id})
        return response

    def delete_by_id(self, user_id: int) -> None:
        with unit_of_work(self.session):
            user = self._get_user(user_id)
            removed = self.accounts.delete_all_by_user(user_id)
            self.session.delete(user)
        logger.info(
            "user.deleted",
            extra={"user_id": user_id, "accounts_removed": removed},
        )
