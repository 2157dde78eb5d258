"""
Session Controller Module

Tracks which account, if any, is currently authenticated. Only one session
exists at a time; logging in while a session is active is rejected, the
caller has to log out first.
"""

from enum import Enum
from typing import Optional

from .directory import AccountDirectory
from .ledger import AccountLedger
from .results import Result, ErrorKind
from .logging_config import get_logger, log_action


class SessionState(Enum):
    """Session lifecycle states"""
    LOGGED_OUT = "logged_out"
    LOGGED_IN = "logged_in"


class SessionController:
    """
    Login/logout state machine over an account directory
    """

    def __init__(self, directory: AccountDirectory):
        self.directory = directory
        self._current: Optional[AccountLedger] = None
        self.logger = get_logger("atm.session")

    @property
    def state(self) -> SessionState:
        return SessionState.LOGGED_IN if self._current is not None else SessionState.LOGGED_OUT

    @property
    def is_logged_in(self) -> bool:
        return self._current is not None

    def login(self, pin: int) -> Result[AccountLedger]:
        if self._current is not None:
            return Result.failure(ErrorKind.SESSION_ACTIVE, "Already logged in. Logout first.")

        found = self.directory.lookup(pin)
        if not found.ok:
            log_action(self.logger, "info", "Login rejected: unknown PIN",
                       pin=pin, operation="login")
            return Result.failure(ErrorKind.INVALID_PIN, "Invalid PIN! Try again.")

        self._current = found.value
        log_action(self.logger, "info", "Logged in",
                   pin=pin, operation="login")
        return Result.success(self._current, f"Welcome, {self._current.name}!")

    def logout(self) -> Optional[AccountLedger]:
        """End the session unconditionally; returns the account that was active"""
        previous, self._current = self._current, None
        if previous is not None:
            log_action(self.logger, "info", "Logged out",
                       pin=previous.pin, operation="logout")
        return previous

    def current(self) -> Optional[AccountLedger]:
        return self._current

    def require_current(self) -> Result[AccountLedger]:
        if self._current is None:
            return Result.failure(ErrorKind.NO_SESSION, "Please login first.")
        return Result.success(self._current)
