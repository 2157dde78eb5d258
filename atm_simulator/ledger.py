"""
Account Ledger Module

One account holder's balance and bounded transaction history. The ledger
owns both invariants: the balance never goes negative and at most
HISTORY_CAPACITY history lines are retained, oldest evicted first. Every
operation validates first and mutates only once validation has passed.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Union

from .currency import Money, Currency, to_decimal, format_amount
from .results import Result, ErrorKind
from .logging_config import get_logger, log_action


HISTORY_CAPACITY = 5
NO_TRANSACTIONS = "No transactions yet."

PIN_MIN = 1000
PIN_MAX = 9999

AmountLike = Union[Money, Decimal, int, float]

logger = get_logger("atm.ledger")


def is_valid_pin(pin: Any) -> bool:
    """A PIN is an int with exactly four digits (1000-9999)"""
    return isinstance(pin, int) and not isinstance(pin, bool) and PIN_MIN <= pin <= PIN_MAX


@dataclass(frozen=True)
class User:
    """Account holder, immutable once registered"""
    name: str
    pin: int

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("User name must not be empty")
        if not is_valid_pin(self.pin):
            raise ValueError(f"PIN must be exactly 4 digits, got {self.pin!r}")

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "pin": self.pin}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'User':
        if not isinstance(data, dict):
            raise ValueError("Stored owner must be an object")
        return cls(name=data["name"], pin=int(data["pin"]))


@dataclass
class AccountLedger:
    """
    Balance plus the most recent transaction lines for one user
    """
    owner: User
    balance: Money
    history: List[str] = field(default_factory=list)

    def __post_init__(self):
        if self.balance.is_negative():
            raise ValueError("Ledger balance cannot be negative")
        if len(self.history) > HISTORY_CAPACITY:
            self.history = self.history[-HISTORY_CAPACITY:]

    @classmethod
    def open(cls, owner: User, initial_deposit: AmountLike,
             currency: Currency = Currency.INR) -> 'AccountLedger':
        """Create a ledger holding the initial deposit with an empty history"""
        if isinstance(initial_deposit, Money):
            return cls(owner=owner, balance=Money(initial_deposit.amount, currency))
        value = to_decimal(initial_deposit, currency.precision)
        if value is None:
            raise ValueError(f"Invalid initial deposit: {initial_deposit!r}")
        return cls(owner=owner, balance=Money(value, currency))

    @property
    def currency(self) -> Currency:
        return self.balance.currency

    @property
    def name(self) -> str:
        return self.owner.name

    @property
    def pin(self) -> int:
        return self.owner.pin

    def _coerce_amount(self, amount: AmountLike, action: str) -> Result[Money]:
        """Turn an amount into Money in the ledger currency, rejecting non-positive values"""
        if isinstance(amount, Money):
            if amount.currency != self.currency:
                return Result.failure(
                    ErrorKind.INVALID_AMOUNT,
                    f"Invalid {action} amount! Expected {self.currency.code}, got {amount.currency.code}"
                )
            money = amount
        else:
            value = to_decimal(amount, self.currency.precision)
            if value is None:
                return Result.failure(ErrorKind.INVALID_AMOUNT, f"Invalid {action} amount!")
            money = Money(value, self.currency)
            if money.amount != value:
                return Result.failure(
                    ErrorKind.INVALID_AMOUNT,
                    f"Invalid {action} amount! At most {self.currency.precision} decimal places allowed"
                )

        if not money.is_positive():
            return Result.failure(ErrorKind.INVALID_AMOUNT, f"Invalid {action} amount!")
        return Result.success(money)

    def _record(self, entry: str) -> None:
        self.history.append(entry)
        if len(self.history) > HISTORY_CAPACITY:
            del self.history[:len(self.history) - HISTORY_CAPACITY]

    def deposit(self, amount: AmountLike) -> Result[Money]:
        """Add a positive amount; returns the new balance"""
        checked = self._coerce_amount(amount, "deposit")
        if not checked.ok:
            return checked
        money = checked.value

        try:
            new_balance = self.balance + money
        except ArithmeticError:
            return Result.failure(ErrorKind.INVALID_AMOUNT, "Invalid deposit amount! Balance limit exceeded")

        self.balance = new_balance
        self._record(f"Deposited {format_amount(money.amount, self.currency)}")

        log_action(logger, "info", "Deposit posted",
                   pin=self.pin, operation="deposit",
                   details={"amount": str(money.amount), "balance": str(self.balance.amount)})
        return Result.success(self.balance, "Deposit Successful!")

    def withdraw(self, amount: AmountLike) -> Result[Money]:
        """Remove a positive amount no larger than the balance; returns the new balance"""
        checked = self._coerce_amount(amount, "withdrawal")
        if not checked.ok:
            return checked
        money = checked.value

        if money > self.balance:
            log_action(logger, "info", "Withdrawal rejected: insufficient balance",
                       pin=self.pin, operation="withdraw",
                       details={"amount": str(money.amount), "balance": str(self.balance.amount)})
            return Result.failure(ErrorKind.INSUFFICIENT_FUNDS, "Insufficient balance!")

        self.balance = self.balance - money
        self._record(f"Withdrew {format_amount(money.amount, self.currency)}")

        log_action(logger, "info", "Withdrawal posted",
                   pin=self.pin, operation="withdraw",
                   details={"amount": str(money.amount), "balance": str(self.balance.amount)})
        return Result.success(self.balance, "Withdrawal Successful!")

    def check_balance(self) -> Money:
        return self.balance

    def history_entries(self) -> List[str]:
        return list(self.history)

    def get_history(self) -> str:
        """Human readable rendering of the retained history lines"""
        if not self.history:
            return NO_TRANSACTIONS
        lines = [f"Last Transactions for {self.owner.name}:"]
        lines.extend(f"- {entry}" for entry in self.history)
        return "\n".join(lines) + "\n"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for storage"""
        return {
            "owner": self.owner.to_dict(),
            "balance": str(self.balance.amount),
            "currency": self.currency.code,
            "history": list(self.history),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AccountLedger':
        """Create instance from dictionary"""
        if not isinstance(data, dict):
            raise ValueError("Stored account record must be an object")
        currency = Currency.from_code(data.get("currency", Currency.INR.code))
        balance = to_decimal(data["balance"], currency.precision)
        if balance is None:
            raise ValueError(f"Invalid stored balance: {data['balance']!r}")
        history = data.get("history", [])
        if not isinstance(history, list) or not all(isinstance(h, str) for h in history):
            raise ValueError("Stored history must be a list of strings")
        return cls(
            owner=User.from_dict(data["owner"]),
            balance=Money(balance, currency),
            history=list(history),
        )
