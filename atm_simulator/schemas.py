"""
Pydantic schemas for API requests and responses
"""

from typing import List, Union
from pydantic import BaseModel, Field

from .currency import Money
from .ledger import AccountLedger


class MoneyModel(BaseModel):
    amount: str = Field(..., description="Decimal amount as string")
    currency: str = Field(..., description="Currency code (INR, USD, etc.)")
    display: str = Field(..., description="Formatted amount with currency symbol")

    @classmethod
    def from_money(cls, money: Money) -> 'MoneyModel':
        return cls(amount=str(money.amount), currency=money.currency.code, display=money.to_string())


class RegisterRequest(BaseModel):
    name: str
    pin: Union[int, str] = Field(..., description="Four digit PIN")
    initial_deposit: Union[str, int, float] = Field(..., description="Opening balance")


class LoginRequest(BaseModel):
    pin: Union[int, str] = Field(..., description="Four digit PIN")


class AmountRequest(BaseModel):
    amount: Union[str, int, float] = Field(..., description="Amount to deposit or withdraw")


class AccountResponse(BaseModel):
    name: str
    balance: MoneyModel

    @classmethod
    def from_ledger(cls, ledger: AccountLedger) -> 'AccountResponse':
        return cls(name=ledger.name, balance=MoneyModel.from_money(ledger.check_balance()))


class OperationResponse(BaseModel):
    message: str
    balance: MoneyModel


class HistoryResponse(BaseModel):
    name: str
    entries: List[str]
    text: str
