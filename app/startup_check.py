# app/startup_check.py
"""
Startup diagnostic: prints environment, runtime and port status before the
server is launched.

    python -m app.startup_check
"""

import os
import platform
import socket
import sys
from typing import Mapping, Optional

import psutil

REQUIRED_ENV_VARS = ["APP_ENV", "PORT"]
# Values may hold credentials, so only presence is reported
OPTIONAL_ENV_VARS = ["DATABASE_URL", "REDIS_HOST", "UPSTASH_REDIS_REST_URL"]
DEFAULT_PORT = 3000


def port_available(port: int, host: str = "0.0.0.0") -> Optional[str]:
    """Try to bind host:port; returns None when free, else the error message."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        try:
            sock.bind((host, port))
        except OSError as ex:
            return ex.strerror or str(ex)
    return None


def rss_mb() -> float:
    """Current resident set size of this process."""
    return psutil.Process().memory_info().rss / 1024 / 1024


def main(environ: Optional[Mapping[str, str]] = None) -> int:
    env = os.environ if environ is None else environ

    print("Voice Service Startup Validation")
    print("================================")

    print("\nEnvironment Variables:")
    for name in REQUIRED_ENV_VARS:
        value = env.get(name)
        if value:
            print(f"  OK   {name}: {value}")
        else:
            print(f"  MISS {name}: NOT SET (will use default)")
    for name in OPTIONAL_ENV_VARS:
        if env.get(name):
            print(f"  OK   {name}: SET")
        else:
            print(f"  WARN {name}: NOT SET (optional)")

    print(f"\nPython Version: {platform.python_version()}")
    print(f"\nMemory Usage:\n  RSS: {round(rss_mb())} MB")

    try:
        port = int(env.get("PORT") or DEFAULT_PORT)
    except ValueError:
        print(f"\nPort {env.get('PORT')!r} is not a number")
        return 1

    error = port_available(port)
    if error is None:
        print(f"\nPort {port} is available")
    else:
        print(f"\nPort {port} is not available: {error}")

    print("\nStarting application...")
    print("================================")
    return 0 if error is None else 1


if __name__ == "__main__":
    sys.exit(main())
