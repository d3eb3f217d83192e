"""
Configuration validation utilities.

Turns the raw `[monitor]` table into validated configuration dataclasses.
Metric names are only normalized here; names missing from the catalog are
dropped later when the collector starts, so a typo never blocks startup.
"""

import logging
from typing import Any, Dict

from ..catalog import DEFAULT_METRICS
from ..models.config import CollectionConfig, MonitorConfig, ServerConfig
from ..validation import (
    ValidationError,
    validate_enum_choice,
    validate_name_list,
    validate_positive_float,
    validate_positive_integer,
    validate_process_names,
)

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def validate_collection_config(collection_settings: Dict[str, Any]) -> CollectionConfig:
    """
    Validate `[monitor.collection]`.

    Raises:
        ValidationError: If any value is out of range or of the wrong type
    """
    processes = validate_process_names(
        collection_settings.get("processes", ["python3"]),
        field_name="monitor.collection.processes",
    )

    metrics = validate_name_list(
        collection_settings.get("metrics", list(DEFAULT_METRICS)),
        field_name="monitor.collection.metrics",
        allow_empty=True,
    )

    interval_seconds = validate_positive_float(
        collection_settings.get("interval_seconds", 1.0),
        min_value=0.05,
        max_value=60.0,
        field_name="monitor.collection.interval_seconds",
    )

    max_samples = validate_positive_integer(
        collection_settings.get("max_samples", 300),
        min_value=1,
        max_value=100000,
        field_name="monitor.collection.max_samples",
    )

    max_workers = validate_positive_integer(
        collection_settings.get("max_workers", 8),
        min_value=1,
        max_value=128,
        field_name="monitor.collection.max_workers",
    )

    proc_root = collection_settings.get("proc_root", "/proc")
    if not isinstance(proc_root, str) or not proc_root.strip():
        raise ValidationError(
            "monitor.collection.proc_root must be a non-empty string",
            field_name="monitor.collection.proc_root",
            value=proc_root,
        )

    return CollectionConfig(
        processes=processes,
        metrics=metrics,
        interval_seconds=interval_seconds,
        max_samples=max_samples,
        proc_root=proc_root.rstrip("/") or "/",
        max_workers=max_workers,
    )


def validate_server_config(server_settings: Dict[str, Any]) -> ServerConfig:
    """
    Validate `[monitor.server]`.

    Raises:
        ValidationError: If the host is empty or the port is out of range
    """
    host = server_settings.get("host", "0.0.0.0")
    if not isinstance(host, str) or not host.strip():
        raise ValidationError(
            "monitor.server.host must be a non-empty string",
            field_name="monitor.server.host",
            value=host,
        )

    port = validate_positive_integer(
        server_settings.get("port", 8090),
        min_value=1,
        max_value=65535,
        field_name="monitor.server.port",
    )

    return ServerConfig(host=host.strip(), port=port)


def validate_monitor_config(monitor_data: Dict[str, Any]) -> MonitorConfig:
    """
    Validate and create a MonitorConfig from raw configuration data.

    Args:
        monitor_data: Raw `[monitor]` table from TOML

    Returns:
        Validated MonitorConfig instance

    Raises:
        ValidationError: If validation fails
    """
    collection_settings = monitor_data.get("collection", {})
    server_settings = monitor_data.get("server", {})
    logging_settings = monitor_data.get("logging", {})

    for section_name, section in (
        ("collection", collection_settings),
        ("server", server_settings),
        ("logging", logging_settings),
    ):
        if not isinstance(section, dict):
            raise ValidationError(
                f"monitor.{section_name} must be a table",
                field_name=f"monitor.{section_name}",
                value=section,
            )

    collection = validate_collection_config(collection_settings)
    server = validate_server_config(server_settings)
    log_level = validate_enum_choice(
        logging_settings.get("level", "INFO"),
        choices=LOG_LEVELS,
        field_name="monitor.logging.level",
        case_sensitive=False,
    )

    logger.debug(
        f"Validated monitor config: {len(collection.processes)} processes, "
        f"{len(collection.metrics)} metrics, interval {collection.interval_seconds}s"
    )
    return MonitorConfig(collection=collection, server=server, log_level=log_level)
