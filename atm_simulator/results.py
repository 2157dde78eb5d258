"""
Operation Results Module

Every ledger, directory and session operation returns a Result instead of
raising for expected validation failures. Callers branch on ``ok`` and read
``error``/``message`` to render user facing feedback.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar('T')


class ErrorKind(Enum):
    """Recoverable, user facing failure kinds"""
    INVALID_AMOUNT = "invalid_amount"            # Non-positive or unreadable amount
    INSUFFICIENT_FUNDS = "insufficient_funds"    # Withdrawal exceeds balance
    INVALID_INPUT = "invalid_input"              # Malformed registration fields
    DUPLICATE_PIN = "duplicate_pin"              # Registration PIN collision
    INVALID_PIN = "invalid_pin"                  # Login with unknown PIN
    NOT_FOUND = "not_found"                      # Directory lookup miss
    PERSISTENCE_FAILURE = "persistence_failure"  # Save/load I/O or decoding failure
    SESSION_ACTIVE = "session_active"            # Login while already logged in
    NO_SESSION = "no_session"                    # Account operation while logged out


class OperationError(Exception):
    """Raised by Result.unwrap() for callers that prefer exceptions"""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a core operation: either a value or an error kind"""
    ok: bool
    value: Optional[T] = None
    error: Optional[ErrorKind] = None
    message: str = ""

    @classmethod
    def success(cls, value: Optional[T] = None, message: str = "") -> 'Result[T]':
        return cls(ok=True, value=value, message=message)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> 'Result[T]':
        return cls(ok=False, error=kind, message=message)

    def unwrap(self) -> T:
        """Return the value or raise OperationError for a failed result"""
        if not self.ok:
            raise OperationError(self.error, self.message)
        return self.value

    def __bool__(self) -> bool:
        return self.ok
