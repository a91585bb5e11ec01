"""
Run the service: `python -m shortlink_service -a :8080 -b http://localhost:8080/ -f /tmp/links.json`
"""

import sys

import uvicorn

from .app import create_app
from .config import load_settings
from .logging_config import configure_logging

UVICORN_LEVELS = ("critical", "error", "warning", "info", "debug", "trace")


def main(argv=None) -> int:
    settings = load_settings(sys.argv[1:] if argv is None else argv)
    log = configure_logging(settings.log_level)
    host, port = settings.listen_host_port()
    log.info("Running server on %s", settings.address)
    level = settings.log_level.lower()
    if level not in UVICORN_LEVELS:
        level = "info"
    uvicorn.run(create_app(settings), host=host, port=port, log_level=level)
    return 0


if __name__ == "__main__":
    sys.exit(main())
