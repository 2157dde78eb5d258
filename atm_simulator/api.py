"""
FastAPI REST API Module

HTTP presentation surface for the ATM simulator: registration, login and
logout, deposits, withdrawals, balance and history. Handlers only translate
between JSON and the ATMSystem; failed Results become HTTP errors.
"""

from typing import Optional
from fastapi import FastAPI, HTTPException, Depends, Request, status
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from . import __version__
from .results import Result, ErrorKind
from .schemas import (
    RegisterRequest, LoginRequest, AmountRequest,
    AccountResponse, OperationResponse, HistoryResponse, MoneyModel
)
from .system import ATMSystem
from .logging_config import get_logger


ERROR_STATUS = {
    ErrorKind.INVALID_AMOUNT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_PIN: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.NO_SESSION: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.DUPLICATE_PIN: status.HTTP_409_CONFLICT,
    ErrorKind.SESSION_ACTIVE: status.HTTP_409_CONFLICT,
    ErrorKind.INSUFFICIENT_FUNDS: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.PERSISTENCE_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

logger = get_logger("atm.api")


def raise_for_result(result: Result):
    """Return the value of a successful result or raise the matching HTTPException"""
    if result.ok:
        return result.value
    raise HTTPException(
        status_code=ERROR_STATUS.get(result.error, status.HTTP_400_BAD_REQUEST),
        detail={"error": result.error.value, "message": result.message}
    )


def get_system(request: Request) -> ATMSystem:
    return request.app.state.system


def create_app(system: Optional[ATMSystem] = None) -> FastAPI:
    """Create and configure the FastAPI application"""
    if system is None:
        system = ATMSystem.from_config()
        system.start()

    app = FastAPI(
        title="ATM Simulator",
        description="Single-user ATM simulator with PIN login and file persistence",
        version=__version__
    )
    app.state.system = system

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health(system: ATMSystem = Depends(get_system)):
        """Health check"""
        return {
            "status": "healthy",
            "accounts": len(system.directory),
            "logged_in": system.session.is_logged_in
        }

    @app.post("/accounts", status_code=status.HTTP_201_CREATED)
    async def register(request: RegisterRequest, system: ATMSystem = Depends(get_system)):
        """Create a new account"""
        ledger = raise_for_result(
            system.register(request.name, request.pin, request.initial_deposit)
        )
        return {
            "message": "Account created successfully!",
            "account": AccountResponse.from_ledger(ledger).model_dump()
        }

    @app.post("/session")
    async def login(request: LoginRequest, system: ATMSystem = Depends(get_system)):
        """Log in with a PIN"""
        ledger = raise_for_result(system.login(request.pin))
        return {
            "message": f"Welcome, {ledger.name}!",
            "account": AccountResponse.from_ledger(ledger).model_dump()
        }

    @app.get("/session")
    async def current_session(system: ATMSystem = Depends(get_system)):
        """Describe the active session"""
        ledger = raise_for_result(system.session.require_current())
        return {"account": AccountResponse.from_ledger(ledger).model_dump()}

    @app.delete("/session")
    async def logout(system: ATMSystem = Depends(get_system)):
        """Log out of the active session (no-op when logged out)"""
        previous = system.logout()
        return {"message": "Logged out", "was_logged_in": previous is not None}

    @app.post("/session/deposit", response_model=OperationResponse)
    async def deposit(request: AmountRequest, system: ATMSystem = Depends(get_system)):
        """Deposit into the logged in account"""
        result = system.deposit(request.amount)
        balance = raise_for_result(result)
        return OperationResponse(message=result.message, balance=MoneyModel.from_money(balance))

    @app.post("/session/withdraw", response_model=OperationResponse)
    async def withdraw(request: AmountRequest, system: ATMSystem = Depends(get_system)):
        """Withdraw from the logged in account"""
        result = system.withdraw(request.amount)
        balance = raise_for_result(result)
        return OperationResponse(message=result.message, balance=MoneyModel.from_money(balance))

    @app.get("/session/balance", response_model=MoneyModel)
    async def balance(system: ATMSystem = Depends(get_system)):
        """Current balance of the logged in account"""
        return MoneyModel.from_money(raise_for_result(system.balance()))

    @app.get("/session/history", response_model=HistoryResponse)
    async def history(system: ATMSystem = Depends(get_system)):
        """Retained transaction history of the logged in account"""
        text = raise_for_result(system.history())
        ledger = system.current()
        return HistoryResponse(name=ledger.name, entries=ledger.history_entries(), text=text)

    logger.info("API application created")
    return app


def run_server(host: str = "127.0.0.1", port: int = 8090, system: Optional[ATMSystem] = None):
    """Run the API server with uvicorn"""
    uvicorn.run(create_app(system), host=host, port=port, access_log=False)
