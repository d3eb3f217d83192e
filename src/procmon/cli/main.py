"""
Command-line interface for the procmon process monitor.

This module provides the main CLI entry point: it loads and validates the
configuration, applies command-line overrides, starts the collector loop and
serves the metrics API and dashboard until interrupted.
"""

import argparse
import dataclasses
import logging
import sys
import tomllib
from pathlib import Path
from typing import List, Optional

import uvicorn

from ..catalog import metric_names
from ..collectors import ProcfsCounterReader, PsutilProcessResolver
from ..config import get_config, set_config_path
from ..config.validators import LOG_LEVELS
from ..models.config import MonitorConfig
from ..monitoring import start_collecting
from ..server import create_app
from ..validation import (
    ValidationError,
    handle_cli_error,
    validate_enum_choice,
    validate_name_list,
    validate_positive_float,
    validate_positive_integer,
    validate_process_names,
)

# --- Logging Setup ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser. Unset options fall back to the config file."""
    parser = argparse.ArgumentParser(
        description="Sample per-process resource usage and serve it over HTTP."
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to a config.toml file (default: conf/config.toml if present).",
    )
    parser.add_argument(
        "-p",
        "--processes",
        type=str,
        help="Comma-separated list of process names to monitor.",
    )
    parser.add_argument(
        "-m",
        "--metrics",
        type=str,
        help=f"Comma-separated metrics to sample. Available: {', '.join(metric_names())}",
    )
    parser.add_argument("--host", type=str, help="Address to bind the HTTP server to.")
    parser.add_argument("--port", type=str, help="Port for the HTTP server.")
    parser.add_argument(
        "-i", "--interval", type=str, help="Seconds between collection ticks."
    )
    parser.add_argument(
        "--log-level", type=str, help=f"Logging level, one of {LOG_LEVELS}."
    )
    return parser


def apply_overrides(config: MonitorConfig, args: argparse.Namespace) -> MonitorConfig:
    """
    Return a copy of `config` with command-line values applied.

    Raises:
        ValidationError: If an override is invalid
    """
    collection = config.collection
    server = config.server
    log_level = config.log_level

    if args.processes is not None:
        collection = dataclasses.replace(
            collection,
            processes=validate_process_names(args.processes, field_name="--processes"),
        )
    if args.metrics is not None:
        collection = dataclasses.replace(
            collection,
            metrics=validate_name_list(args.metrics, field_name="--metrics"),
        )
    if args.interval is not None:
        collection = dataclasses.replace(
            collection,
            interval_seconds=validate_positive_float(
                args.interval, min_value=0.05, max_value=60.0, field_name="--interval"
            ),
        )
    if args.host is not None:
        if not args.host.strip():
            raise ValidationError("--host cannot be empty", field_name="--host")
        server = dataclasses.replace(server, host=args.host.strip())
    if args.port is not None:
        server = dataclasses.replace(
            server,
            port=validate_positive_integer(
                args.port, min_value=1, max_value=65535, field_name="--port"
            ),
        )
    if args.log_level is not None:
        log_level = validate_enum_choice(
            args.log_level, choices=LOG_LEVELS, field_name="--log-level",
            case_sensitive=False,
        )

    return MonitorConfig(collection=collection, server=server, log_level=log_level)


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main command-line interface for procmon.

    Raises:
        SystemExit: On configuration or argument validation errors.
    """
    args = build_parser().parse_args(argv)

    if args.config is not None:
        set_config_path(args.config)

    try:
        config = apply_overrides(get_config(), args)
    except (FileNotFoundError, KeyError, ValidationError, tomllib.TOMLDecodeError) as e:
        handle_cli_error(
            error=e,
            context="configuration loading",
            exit_code=1,
            include_traceback=False,
            logger=logger,
        )

    logging.getLogger().setLevel(config.log_level)

    collection = config.collection
    collector = start_collecting(
        collection.processes,
        collection.metrics,
        reader=ProcfsCounterReader(collection.proc_root),
        resolver=PsutilProcessResolver(),
        interval_seconds=collection.interval_seconds,
        max_samples=collection.max_samples,
        max_workers=collection.max_workers,
    )
    app = create_app(collector.context, collector)

    logger.info(f"Monitoring: {collection.processes}")
    logger.info(f"Listening on http://{config.server.host}:{config.server.port}")
    try:
        uvicorn.run(
            app,
            host=config.server.host,
            port=config.server.port,
            log_level=config.log_level.lower(),
        )
    finally:
        collector.stop()
        logger.info("procmon stopped.")


if __name__ == "__main__":
    main_cli()
