#!/usr/bin/env python3
"""
ATM Simulator Entry Point

Loads (or seeds) the account file and starts the FastAPI server.
"""

import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from atm_simulator.api import run_server
from atm_simulator.config import get_config
from atm_simulator.logging_config import setup_logging
from atm_simulator.system import ATMSystem


if __name__ == "__main__":
    config = get_config()
    setup_logging(config.log_level, fmt=config.log_format)

    print("🏦 Starting ATM Simulator...")
    print(f"💾 Accounts file: {config.data_file}")
    print(f"🌐 API available at: http://{config.api_host}:{config.api_port}")
    print(f"📚 Documentation at: http://{config.api_host}:{config.api_port}/docs")
    print()

    try:
        system = ATMSystem.from_config(config)
        system.start()
        run_server(host=config.api_host, port=config.api_port, system=system)
    except KeyboardInterrupt:
        print("\n👋 Shutting down ATM Simulator...")
    except Exception as e:
        print(f"❌ Error starting server: {e}")
        sys.exit(1)
