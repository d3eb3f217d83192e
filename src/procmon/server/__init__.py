"""
HTTP server and live dashboard for procmon.
"""

from .app import create_app
from .dashboard import build_metric_figure, snapshot_to_frame

__all__ = [
    "build_metric_figure",
    "create_app",
    "snapshot_to_frame",
]
