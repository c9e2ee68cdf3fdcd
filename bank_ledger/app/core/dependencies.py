from fastapi import Depends
from sqlmodel import Session

from ..services import SqlAccountStore, SqlUserDirectory, TransferEngine
from .db import get_session

def get_account_store(session: Session = Depends(get_session)) -> SqlAccountStore:
    return SqlAccountStore(session)

def get_user_directory(
    session: Session = Depends(get_session),
    accounts: SqlAccountStore = Depends(get_account_store),
) -> SqlUserDirectory:
    return SqlUserDirectory(session, accounts)

def get_transfer_engine(
    accounts: SqlAccountStore = Depends(get_account_store),
) -> TransferEngine:
    return TransferEngine(accounts)
