import argparse

import uvicorn

from salesdash.config import get_settings
from salesdash.core.logging import setup_logging


def parse_args():
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Run the sales dashboard API.")
    parser.add_argument("--host", default=settings.HOST, help="Interface to bind.")
    parser.add_argument("--port", type=int, default=settings.PORT, help="Port to listen on.")
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Restart the server when source files change.",
    )
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()
    uvicorn.run(
        "salesdash.main:build_default_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_config=None,
    )


if __name__ == "__main__":
    main()
