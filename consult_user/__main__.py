#!/usr/bin/env python3
"""Run the consult-user MCP server on stdio."""

from __future__ import annotations

import asyncio
import logging
import sys

from consult_user.config import get_server_config
from consult_user.providers import create_provider
from consult_user.server import ConsultServer, StdoutWriter, open_stdin_reader
from consult_user.session import ConsultSession

log = logging.getLogger("consult")


async def run() -> None:
    config = get_server_config()
    provider = create_provider(executable=config.dialog_cli)
    session = ConsultSession(
        provider,
        timeout_s=config.dialog_timeout_s,
        heartbeat_interval_s=config.heartbeat_interval_s,
    )
    server = ConsultServer(session, write=StdoutWriter(), config=config)

    reader = await open_stdin_reader()
    log.info("Consult User MCP Server running on stdio")
    await server.serve(reader)


def main() -> int:
    config = get_server_config()
    # stdout carries the protocol; logs go to stderr.
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        pass
    except Exception:
        log.exception("Server error")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
