"""Command-line interface for the video feed collector."""

import asyncio
import json
import logging
import logging.config
from pathlib import Path
from typing import List, Optional

import typer
from typing_extensions import Annotated

from video_feed.categories import CategoryRegistry
from video_feed.collector.collector import VideoCollector
from video_feed.collector.rate_limiter import RateLimiter
from video_feed.config import Config
from video_feed.models.video import VideoRecord
from video_feed.monitoring.metrics import PrometheusExporter
from video_feed.reddit_client import RedditClient
from video_feed.session import FeedSession

app = typer.Typer(help="Video Feed - Pull audible short videos from curated subreddit categories")

logger = logging.getLogger(__name__)


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Set up logging configuration.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path of a rotating log file
    """
    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": log_level,
            "formatter": "standard",
            "stream": "ext://sys.stderr",
        },
    }
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": log_level,
            "formatter": "standard",
            "filename": log_file,
            "maxBytes": 10485760,  # 10 MB
            "backupCount": 5,
            "encoding": "utf8",
        }

    log_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
            },
        },
        "handlers": handlers,
        "loggers": {
            "": {
                "handlers": list(handlers),
                "level": log_level,
                "propagate": True
            },
            "asyncio": {
                "level": "WARNING",
            },
            "aiohttp": {
                "level": "WARNING",
            },
        }
    }

    logging.config.dictConfig(log_config)


def load_config(config_path: Optional[str], env_path: Optional[str]) -> Config:
    """Load and validate configuration, exiting with status 1 on errors."""
    config = Config.from_files(config_path, env_path)
    errors = config.validate()
    if errors:
        for error in errors:
            typer.echo(f"Configuration error: {error}", err=True)
        raise typer.Exit(code=1)
    return config


def format_record(record: VideoRecord) -> str:
    audio = "audio" if record.has_audio else "silent"
    return f"[r/{record.subreddit}] {record.title} ({record.ups} ups, {audio}) {record.url}"


async def run_feed(config: Config, category: str, pages: int) -> List[VideoRecord]:
    """
    Drive a feed session for a number of pages.

    Args:
        config: Validated configuration
        category: Category to load
        pages: Number of batches to request

    Returns:
        All videos loaded, in feed order
    """
    exporter = None
    if config.monitoring.enable_prometheus:
        exporter = PrometheusExporter(config.monitoring.prometheus_port)
        exporter.start_server()

    rate_limiter = RateLimiter(config.rate_limit)
    async with RedditClient(config, rate_limiter=rate_limiter) as client:
        collector = VideoCollector(client, config=config, prometheus_exporter=exporter)
        session = FeedSession(collector)
        if category != session.category:
            await session.change_category(category)
        else:
            await session.load_more(initial=True)

        for page in range(1, pages):
            batch = await session.load_more()
            logger.info(f"Page {page + 1}: {len(batch)} videos (feed size {len(session.videos)})")

        return session.videos


@app.command()
def fetch(
    category: Annotated[Optional[str], typer.Option("--category", "-c", help="Category to load (defaults to default_category)")] = None,
    pages: Annotated[int, typer.Option("--pages", "-p", min=1, help="Number of batches to load")] = 1,
    config: Annotated[Optional[str], typer.Option("--config", help="Path to YAML configuration file")] = None,
    env: Annotated[Optional[str], typer.Option("--env", help="Path to .env file")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print records as JSON")] = False,
    loglevel: Annotated[Optional[str], typer.Option("--loglevel", "-l", help="Logging level")] = None,
    log_file: Annotated[Optional[str], typer.Option("--log-file", help="Also log to this rotating file")] = None,
) -> None:
    """
    Load one or more batches of a category's feed and print them.
    """
    config_obj = load_config(config, env)
    setup_logging((loglevel or config_obj.log_level).upper(), log_file)
    category = category or config_obj.default_category

    logger.info(f"Loading {pages} page(s) of '{category}'")
    try:
        videos = asyncio.run(run_feed(config_obj, category, pages))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        raise typer.Exit(code=130)

    if as_json:
        typer.echo(json.dumps([video.model_dump(by_alias=True) for video in videos], indent=2))
    else:
        for video in videos:
            typer.echo(format_record(video))

    if not videos:
        typer.echo("No videos found right now. Try again later.", err=True)


@app.command()
def categories(
    config: Annotated[Optional[str], typer.Option("--config", help="Path to YAML configuration file")] = None,
    env: Annotated[Optional[str], typer.Option("--env", help="Path to .env file")] = None,
) -> None:
    """
    List the configured categories and how many subreddits back each one.
    """
    config_obj = load_config(config, env)
    registry = CategoryRegistry(config_obj.categories, config_obj.default_category)
    for name in registry.names():
        marker = " (default)" if name == registry.default else ""
        typer.echo(f"{name}: {len(registry.sources_for(name))} subreddits{marker}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
