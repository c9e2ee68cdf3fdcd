from .db import Account as AccountModel
from .db import User as UserModel
from .schemas import (
    AccountCreate,
    AccountNumber,
    AccountResponse,
    Amount,
    MoneyMovementRequest,
    TransferRequest,
    TransferResponse,
    UserCreate,
    UserResponse,
    UserUpdate,
)

__all__ = [
    "AccountCreate",
    "AccountNumber",
    "Amount",
    "AccountResponse",
    "MoneyMovementRequest",
    "TransferRequest",
    "TransferResponse",
    "UserCreate",
    "UserResponse",
    "UserUpdate",
    "AccountModel",
    "UserModel",
]
