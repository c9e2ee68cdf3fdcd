from .accounts import SqlAccountStore
from .interfaces import AccountService, UserService
from .transfers import TransferEngine
from .users import SqlUserDirectory

__all__ = [
    "AccountService",
    "SqlAccountStore",
    "SqlUserDirectory",
    "TransferEngine",
    "UserService",
]
