#!/usr/bin/env python3
"""Run the Contractor Toolkit API with uvicorn.

PORT and HOST come from the environment; pass --reload for local development.
"""

import argparse
import os
import sys
from pathlib import Path

import uvicorn

SRC_DIR = Path(__file__).resolve().parent / "src"


def _port(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        print(f"Ignoring invalid PORT {value!r}; using 8000", file=sys.stderr)
        return 8000


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--host", default=os.environ.get("HOST", "127.0.0.1"))
    parser.add_argument("--port", type=int, default=_port(os.environ.get("PORT", "8000")))
    parser.add_argument("--reload", action="store_true", help="Restart on source changes.")
    args = parser.parse_args()

    sys.path.insert(0, str(SRC_DIR))
    uvicorn.run(
        "contractor_kit.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        app_dir=str(SRC_DIR),
    )


if __name__ == "__main__":
    main()
