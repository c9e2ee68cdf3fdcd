from fastapi import APIRouter, Depends, Path, Response, status

from ..core.dependencies import (
    get_account_store,
    get_transfer_engine,
    get_user_directory,
)
from ..core.validation import MAX_ACCOUNT_NUMBER
from ..models import (
    AccountCreate,
    AccountResponse,
    MoneyMovementRequest,
    TransferRequest,
    TransferResponse,
    UserCreate,
    UserResponse,
    UserUpdate,
)
from ..services import AccountService, TransferEngine, UserService


users_router = APIRouter(prefix="/users", tags=["users"])

@users_router.get("", response_model=list[UserResponse])
def list_users(
    users: UserService = Depends(get_user_directory),
) -> list[UserResponse]:
    return users.all()

@users_router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    users: UserService = Depends(get_user_directory),
) -> UserResponse:
    return users.create(payload.first_name, payload.last_name)

@users_router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    users: UserService = Depends(get_user_directory),
) -> UserResponse:
    return users.get_by_id(user_id)

@users_router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    payload: UserUpdate,
    users: UserService = Depends(get_user_directory),
) -> UserResponse:
    return users.update_by_id(user_id, payload.first_name, payload.last_name)

@users_router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    users: UserService = Depends(get_user_directory),
) -> Response:
    users.delete_by_id(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@users_router.get("/{user_id}/accounts", response_model=list[AccountResponse])
def list_user_accounts(
    user_id: int,
    users: UserService = Depends(get_user_directory),
    accounts: AccountService = Depends(get_account_store),
) -> list[AccountResponse]:
    users.get_by_id(user_id)
    return accounts.list_by_user(user_id)

@users_router.post(
    "/{user_id}/accounts",
    response_model=AccountResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_account(
    user_id: int,
    payload: AccountCreate,
    accounts: AccountService = Depends(get_account_store),
) -> AccountResponse:
    return accounts.create(user_id, payload.account_number, payload.name)

accounts_router = APIRouter(prefix="/accounts", tags=["accounts"])

@accounts_router.get("/{account_number}", response_model=AccountResponse)
def get_account(
    account_number: int = Path(..., ge=1, le=MAX_ACCOUNT_NUMBER),
    accounts: AccountService = Depends(get_account_store),
) -> AccountResponse:
    return accounts.get_by_account_number(account_number)

@accounts_router.delete("/id/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_account(
    account_id: int,
    accounts: AccountService = Depends(get_account_store),
) -> Response:
    accounts.delete_by_id(account_id, missing_ok=True)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@accounts_router.post("/id/{account_id}/deposit", response_model=AccountResponse)
def deposit(
    account_id: int,
    payload: MoneyMovementRequest,
    engine: TransferEngine = Depends(get_transfer_engine),
) -> AccountResponse:
    return engine.deposit(account_id, payload.amount)

@accounts_router.post("/id/{account_id}/withdraw", response_model=AccountResponse)
def withdraw(
    account_id: int,
    payload: MoneyMovementRequest,
    engine: TransferEngine = Depends(get_transfer_engine),
) -> AccountResponse:
    return engine.withdraw(account_id, payload.amount)

transfer_router = APIRouter(prefix="/transfers", tags=["transfers"])

@transfer_router.post("", response_model=TransferResponse)
def create_transfer(
    payload: TransferRequest,
    engine: TransferEngine = Depends(get_transfer_engine),
) -> TransferResponse:
    return engine.transfer(
        payload.from_account_number,
        payload.to_account_number,
        payload.amount,
    )

__all__ = ["accounts_router", "transfer_router", "users_router"]
