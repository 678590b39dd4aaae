#!/usr/bin/env python3
"""
Greeter Ledger Entry Point

Starts the FastAPI server with the greeter contract.
"""

import sys

from greeter_ledger.api import run_server


if __name__ == "__main__":
    print("Starting Greeter Ledger API...")
    print("Documentation at /docs")
    print()

    try:
        run_server(debug=False)
    except KeyboardInterrupt:
        print("\nShutting down Greeter Ledger API...")
    except Exception as e:
        print(f"Error starting server: {e}")
        sys.exit(1)
