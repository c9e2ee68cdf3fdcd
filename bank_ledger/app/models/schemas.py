from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from ..core.validation import MAX_ACCOUNT_NUMBER, MAX_BALANCE

AccountNumber = Annotated[
    int,
    Field(ge=1, le=MAX_ACCOUNT_NUMBER, description="Externally visible account number"),
]

Amount = Annotated[
    int,
    Field(ge=1, le=MAX_BALANCE, description="Amount in minor units (e.g. cents)"),
]

class UserCreate(BaseModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)

class UserUpdate(UserCreate):
    pass

class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str

class AccountCreate(BaseModel):
    account_number: AccountNumber
    name: str = Field(..., min_length=1, description="Display name of the account")

class AccountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    account_number: int
    name: str
    balance: int = Field(..., ge=0, description="Balance in minor units (e.g. cents)")

class MoneyMovementRequest(BaseModel):
    amount: Amount

class TransferRequest(BaseModel):
    from_account_number: AccountNumber
    to_account_number: AccountNumber
    amount: Amount

class TransferResponse(BaseModel):
    source: AccountResponse
    dest: AccountResponse
    amount: int
