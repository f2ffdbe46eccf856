"""
Convenience launcher for the receipt-settle FastAPI backend.

Falls back to ports 8081-8084 when 8000 is taken.

Usage:
    python run_backend.py
"""
import socket
import sys
from pathlib import Path

import uvicorn

BACKEND_DIR = Path(__file__).resolve().parent
PORTS_TO_TRY = [8000, 8081, 8082, 8083, 8084]


def is_port_in_use(port: int) -> bool:
    """Check whether a local port is already bound."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        try:
            s.bind(('127.0.0.1', port))
            return False
        except OSError:
            return True


def pick_port() -> int:
    for port in PORTS_TO_TRY:
        if not is_port_in_use(port):
            if port != PORTS_TO_TRY[0]:
                print(f"Port {PORTS_TO_TRY[0]} is in use, switching to {port}")
            return port
    print(f"Error: ports {PORTS_TO_TRY[0]}-{PORTS_TO_TRY[-1]} are all in use")
    sys.exit(1)


def main():
    """Start the FastAPI server."""
    port = pick_port()
    print(f"Starting server: http://127.0.0.1:{port}")
    print(f"API docs: http://127.0.0.1:{port}/docs")

    uvicorn.run(
        "receipt_settle.main:app",
        host="127.0.0.1",
        port=port,
        reload=True,
        app_dir=str(BACKEND_DIR),
        log_level="info"
    )


if __name__ == "__main__":
    main()
