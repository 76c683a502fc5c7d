"""Command-line entry point: ``python -m mowerdash``."""

from __future__ import annotations

import argparse
import logging
import os
from typing import List, Optional

_ENV_FLAGS = {
    "client_id": "CLIENT_ID",
    "client_secret": "CLIENT_SECRET",
    "redirect_uri": "REDIRECT_URI",
    "host": "HOST",
    "port": "PORT",
}


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Automower Connect dashboard server")
    p.add_argument("--client-id", help="OAuth client id (also the API key)")
    p.add_argument("--client-secret", help="OAuth client secret")
    p.add_argument("--redirect-uri", help="Registered OAuth redirect URI")
    p.add_argument("--host", help="Interface to listen on")
    p.add_argument("--port", type=int, help="Port to listen on")
    p.add_argument("--reload", action="store_true", help="Reload on code changes")
    return p.parse_args(argv)


def apply_overrides(args: argparse.Namespace) -> None:
    """Flags win over the environment and .env; config reads env on import."""

    for attr, env_name in _ENV_FLAGS.items():
        value = getattr(args, attr)
        if value is not None:
            os.environ[env_name] = str(value)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    apply_overrides(args)

    import uvicorn

    from .core import HOST, LOG_LEVEL, PORT

    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run("mowerdash.app:app", host=HOST, port=PORT, reload=args.reload)


if __name__ == "__main__":
    main()
