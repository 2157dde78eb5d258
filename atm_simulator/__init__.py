"""
ATM Simulator

A single-user banking simulator: PIN based registration and login, deposits,
withdrawals, balance checks and a bounded transaction history, persisted to a
local JSON file after every change.
"""

__version__ = "1.0.0"
