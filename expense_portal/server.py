"""
Run the file upload server.

Usage:
  expense-upload-server            # HOST/PORT from the environment, default 0.0.0.0:3002
"""
import socket
import sys

import structlog
import uvicorn

from .config import settings
from .logging import setup_logging

logger = structlog.get_logger(__name__)


def port_in_use(host: str, port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        try:
            sock.bind((host, port))
        except OSError:
            return True
    return False


def run() -> None:
    setup_logging(settings.log_level)
    if port_in_use(settings.host, settings.port):
        logger.error(
            "port_in_use",
            port=settings.port,
            hint="Please kill the process or use a different port.",
        )
        sys.exit(1)
    logger.info("file_upload_server_starting", host=settings.host, port=settings.port)
    uvicorn.run("expense_portal.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
