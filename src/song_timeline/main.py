#!/usr/bin/env python3
"""Main entry point for the song-timeline session engine."""

from __future__ import annotations

import asyncio
import json
import logging
import logging.config
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from song_timeline.domain.shared.exceptions import DomainError
from song_timeline.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from song_timeline.config.container import Container

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"


def setup_logging(log_level: str = "INFO") -> None:
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)

    try:
        with open(_LOGGING_CONFIG_PATH) as f:
            config = json.load(f)
        logging.config.dictConfig(config)
    except (FileNotFoundError, json.JSONDecodeError, ValueError):
        logging.basicConfig(
            level=resolved_level,
            stream=sys.stderr,
            format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.warning("Could not load %s, falling back to basic config", _LOGGING_CONFIG_PATH)

    logging.getLogger().setLevel(resolved_level)


async def run_session(container: Container) -> None:
    """Load the catalog, then serve the console session until input ends."""
    from song_timeline.infrastructure.console.jsonl_transport import JsonLinesSession

    await container.initialize()
    try:
        session = JsonLinesSession(container.dispatcher, container.event_bus)
        await session.run()
    finally:
        await container.shutdown()


def main() -> int:
    from song_timeline.config.settings import get_settings

    settings = get_settings()
    setup_logging(settings.log_level)

    logger = logging.getLogger(__name__)
    logger.info(LogTemplates.APP_STARTING, settings.environment)

    from song_timeline.config.container import create_container

    container = create_container(settings)

    try:
        asyncio.run(run_session(container))
        logger.info(LogTemplates.APP_STOPPED)
        return 0
    except KeyboardInterrupt:
        logger.info(LogTemplates.APP_KEYBOARD_INTERRUPT)
        return 0
    except DomainError as e:
        logger.error(LogTemplates.APP_FATAL_ERROR, e.message)
        return 1
    except Exception as e:
        logger.exception(LogTemplates.APP_FATAL_ERROR, e)
        return 1


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
