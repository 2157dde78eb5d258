"""
ATM System Module

Wires configuration, persistence, the account directory and the session
controller into one object the presentation layer talks to. Inputs arrive
as primitives (text for names and amounts, int or text for PINs) and every
method answers with a Result.
"""

from typing import Optional, Union

from .config import ATMConfig, get_config
from .currency import Currency, Money, to_decimal
from .directory import AccountDirectory
from .ledger import AccountLedger
from .persistence import PersistenceGateway, JSONFilePersistence, InMemoryPersistence
from .results import Result, ErrorKind
from .session import SessionController
from .logging_config import get_logger


PinInput = Union[int, str]
AmountInput = Union[str, int, float]


def parse_pin(pin: PinInput) -> Result[int]:
    """Read a PIN typed as text or passed as an int"""
    if isinstance(pin, bool):
        return Result.failure(ErrorKind.INVALID_INPUT, "Please enter numeric PIN only.")
    if isinstance(pin, int):
        return Result.success(pin)
    if isinstance(pin, str):
        text = pin.strip()
        if text.isascii() and text.isdigit():
            return Result.success(int(text))
    return Result.failure(ErrorKind.INVALID_INPUT, "Please enter numeric PIN only.")


def create_gateway(config: ATMConfig) -> PersistenceGateway:
    """Build the persistence backend selected by configuration"""
    currency = Currency.from_code(config.currency)
    backend = config.storage_backend.lower()
    if backend == "json":
        return JSONFilePersistence(config.data_file, currency)
    if backend == "memory":
        return InMemoryPersistence(currency)
    raise ValueError(f"Unknown storage backend: {config.storage_backend}")


class ATMSystem:
    """ATM simulator with all components initialized"""

    def __init__(self, persistence: PersistenceGateway, seed_defaults: bool = True):
        self.persistence = persistence
        self.seed_defaults = seed_defaults
        self.directory = AccountDirectory(persistence=persistence, currency=persistence.currency)
        self.session = SessionController(self.directory)
        self.logger = get_logger("atm.system")

    @classmethod
    def from_config(cls, config: Optional[ATMConfig] = None) -> 'ATMSystem':
        config = config or get_config()
        return cls(create_gateway(config), seed_defaults=config.seed_defaults)

    @property
    def currency(self) -> Currency:
        return self.persistence.currency

    def start(self) -> AccountDirectory:
        """Load saved accounts, seeding the demo accounts when nothing was loaded"""
        self.directory = self.persistence.load()
        self.session = SessionController(self.directory)

        if self.directory.is_empty() and self.seed_defaults:
            self.directory.seed_defaults()

        self.logger.info(f"ATM system started with {len(self.directory)} accounts")
        return self.directory

    def register(self, name: str, pin: PinInput, initial_deposit: AmountInput) -> Result[AccountLedger]:
        parsed_pin = parse_pin(pin)
        if not parsed_pin.ok:
            return parsed_pin

        amount = to_decimal(initial_deposit, self.currency.precision)
        if amount is None:
            return Result.failure(ErrorKind.INVALID_INPUT, "Please enter valid numeric values.")

        return self.directory.register(name, parsed_pin.value, amount)

    def login(self, pin: PinInput) -> Result[AccountLedger]:
        parsed_pin = parse_pin(pin)
        if not parsed_pin.ok:
            return parsed_pin
        return self.session.login(parsed_pin.value)

    def logout(self) -> Optional[AccountLedger]:
        return self.session.logout()

    def current(self) -> Optional[AccountLedger]:
        return self.session.current()

    def deposit(self, amount: AmountInput) -> Result[Money]:
        return self._post("deposit", amount)

    def withdraw(self, amount: AmountInput) -> Result[Money]:
        return self._post("withdraw", amount)

    def _post(self, operation: str, amount: AmountInput) -> Result[Money]:
        active = self.session.require_current()
        if not active.ok:
            return active

        value = to_decimal(amount, self.currency.precision)
        if value is None:
            return Result.failure(ErrorKind.INVALID_AMOUNT, "Please enter a valid amount.")

        ledger = active.value
        result = ledger.deposit(value) if operation == "deposit" else ledger.withdraw(value)
        if result.ok:
            # A failed save is already logged by the gateway; in-memory state stays authoritative
            self.directory.commit()
        return result

    def balance(self) -> Result[Money]:
        active = self.session.require_current()
        if not active.ok:
            return active
        return Result.success(active.value.check_balance())

    def history(self) -> Result[str]:
        active = self.session.require_current()
        if not active.ok:
            return active
        return Result.success(active.value.get_history())
