"""
Account Directory Module

The set of registered accounts keyed by PIN. Registration is the only
mutation; accounts are never removed. A directory can be attached to a
persistence gateway, in which case every successful registration (and every
explicit commit after a ledger change) saves the whole directory.
"""

from typing import Dict, Iterator, List, Optional, Tuple, TYPE_CHECKING

from .currency import Money, Currency, to_decimal
from .ledger import AccountLedger, User, AmountLike, is_valid_pin
from .results import Result, ErrorKind
from .logging_config import get_logger, log_action

if TYPE_CHECKING:
    from .persistence import PersistenceGateway


# Demo accounts inserted into an empty directory at startup (name, pin, opening balance)
DEFAULT_ACCOUNTS: Tuple[Tuple[str, int, str], ...] = (
    ("Shivang Chauhan", 1234, "10000"),
    ("Utkarsh Sharma", 5678, "6000"),
    ("Tushar Singh", 2468, "8000"),
)


class AccountDirectory:
    """
    Manages registration and PIN lookup for all accounts
    """

    def __init__(
        self,
        accounts: Optional[Dict[int, AccountLedger]] = None,
        persistence: Optional['PersistenceGateway'] = None,
        currency: Currency = Currency.INR
    ):
        self._accounts: Dict[int, AccountLedger] = dict(accounts or {})
        self.persistence = persistence
        self.currency = currency
        self.logger = get_logger("atm.directory")

    def __len__(self) -> int:
        return len(self._accounts)

    def __contains__(self, pin) -> bool:
        return pin in self._accounts

    def __iter__(self) -> Iterator[AccountLedger]:
        return iter(self._accounts.values())

    def __eq__(self, other) -> bool:
        if not isinstance(other, AccountDirectory):
            return NotImplemented
        return self._accounts == other._accounts

    def __repr__(self) -> str:
        return f"AccountDirectory(pins={self.pins()})"

    def is_empty(self) -> bool:
        return not self._accounts

    def pins(self) -> List[int]:
        return sorted(self._accounts)

    def accounts(self) -> Dict[int, AccountLedger]:
        """Shallow copy of the PIN to ledger mapping"""
        return dict(self._accounts)

    def attach(self, persistence: 'PersistenceGateway') -> None:
        """Attach the gateway used by commit()"""
        self.persistence = persistence

    def register(self, name: str, pin: int, initial_deposit: AmountLike) -> Result[AccountLedger]:
        """
        Register a new account.

        Args:
            name: Account holder name (surrounding whitespace is stripped)
            pin: Four digit PIN, also the lookup key
            initial_deposit: Opening balance, must be positive

        Returns:
            Result holding the new ledger, or INVALID_INPUT / DUPLICATE_PIN
        """
        clean_name = name.strip() if isinstance(name, str) else ""
        if not clean_name:
            return Result.failure(ErrorKind.INVALID_INPUT, "Please enter valid details: name is required.")
        if not is_valid_pin(pin):
            return Result.failure(ErrorKind.INVALID_INPUT, "Please enter valid details: PIN must be exactly 4 digits.")

        if isinstance(initial_deposit, Money):
            deposit = initial_deposit.amount
        else:
            deposit = to_decimal(initial_deposit, self.currency.precision)
        if deposit is None or Money(deposit, self.currency).amount != deposit:
            return Result.failure(ErrorKind.INVALID_INPUT, "Please enter valid details: initial deposit is not a valid amount.")
        if not Money(deposit, self.currency).is_positive():
            return Result.failure(ErrorKind.INVALID_INPUT, "Please enter valid details: initial deposit must be positive.")

        if pin in self._accounts:
            log_action(self.logger, "info", "Registration rejected: PIN already exists",
                       pin=pin, operation="register")
            return Result.failure(ErrorKind.DUPLICATE_PIN, "PIN already exists. Choose another.")

        ledger = AccountLedger.open(User(clean_name, pin), deposit, self.currency)
        self._accounts[pin] = ledger

        log_action(self.logger, "info", "Account registered",
                   pin=pin, operation="register",
                   details={"opening_balance": str(ledger.balance.amount)})

        self.commit()
        return Result.success(ledger, "Account created successfully!")

    def lookup(self, pin: int) -> Result[AccountLedger]:
        ledger = self._accounts.get(pin)
        if ledger is None:
            return Result.failure(ErrorKind.NOT_FOUND, "No account registered for this PIN.")
        return Result.success(ledger)

    def seed_defaults(self) -> int:
        """Insert the demo accounts into an empty directory; returns how many were added"""
        if not self.is_empty():
            return 0

        for name, pin, opening in DEFAULT_ACCOUNTS:
            self._accounts[pin] = AccountLedger.open(User(name, pin), opening, self.currency)

        self.logger.info(f"Seeded {len(DEFAULT_ACCOUNTS)} default accounts")
        self.commit()
        return len(DEFAULT_ACCOUNTS)

    def commit(self) -> Result[None]:
        """Persist the whole directory through the attached gateway, if any"""
        if self.persistence is None:
            return Result.success()
        return self.persistence.save(self)
