from __future__ import annotations

import argparse
from typing import Optional, Sequence

import uvicorn

from .app.core.config import get_settings
from .app.main import create_app


def run_server(argv: Optional[Sequence[str]] = None) -> None:
    """Serve the ledger API; flags override the ``LEDGER_*`` settings."""
    settings = get_settings()
    parser = argparse.ArgumentParser(prog="bank-ledger", description="Bank ledger API server")
    parser.add_argument("--host", default=settings.host, help="Host")
    parser.add_argument("--port", type=int, default=settings.port, help="Port")
    parser.add_argument("--database-url", default=settings.database_url, help="DB connection")
    args = parser.parse_args(argv)

    settings = settings.model_copy(
        update={"host": args.host, "port": args.port, "database_url": args.database_url}
    )
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run_server()
