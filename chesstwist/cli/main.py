from __future__ import annotations

import argparse
from typing import Mapping, Optional, Sequence

import uvicorn

from ..config import LOG_LEVELS, ServerConfig
from ..protocol.http.app import create_app


def parse_config(
    argv: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ServerConfig:
    """Resolve the server config: command-line flags override ``CHESSTWIST_*`` variables."""
    parser = argparse.ArgumentParser(description="Run the chesstwist HTTP session service")
    try:
        base = ServerConfig.from_env(environ)
    except ValueError as e:
        parser.error(str(e))
    parser.add_argument("--host", type=str, default=base.host, help=f"bind address (default: {base.host})")
    parser.add_argument("--port", type=int, default=base.port, help=f"TCP port (default: {base.port})")
    parser.add_argument(
        "--log-level",
        type=str.lower,
        choices=LOG_LEVELS,
        default=base.log_level,
        help=f"logging level (default: {base.log_level})",
    )
    args = parser.parse_args(argv)
    try:
        return ServerConfig(host=args.host, port=args.port, log_level=args.log_level)
    except ValueError as e:
        parser.error(str(e))


def main(argv: Optional[Sequence[str]] = None) -> None:
    config = parse_config(argv)
    uvicorn.run(create_app(config), host=config.host, port=config.port, log_level=config.log_level)


if __name__ == "__main__":
    main()
