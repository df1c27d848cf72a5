"""
GitHub Explorer server

Runs github_explorer.app with uvicorn. Configuration comes from
GITHUB_EXPLORER_* environment variables (see github_explorer.config).
"""

import logging

import uvicorn

from github_explorer.app import app
from github_explorer.config import Settings


def main() -> None:
    settings = Settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
