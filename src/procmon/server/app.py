"""
HTTP surface: metrics JSON, catalog, Plotly figures and the dashboard page.
"""

import logging
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse, Response

from ..catalog import get_metric
from ..monitoring import CollectorLoop, MonitorContext, SnapshotExporter, now_ms
from .dashboard import DASHBOARD_HTML, build_metric_figure, snapshot_to_frame

logger = logging.getLogger(__name__)


def create_app(context: MonitorContext, collector: Optional[CollectorLoop] = None) -> FastAPI:
    """
    Build the FastAPI application around an existing monitoring context.

    Args:
        context: The context the collector loop writes to.
        collector: The running loop, used only for health reporting.
    """
    app = FastAPI(title="procmon")
    exporter = SnapshotExporter(context)
    app.state.context = context
    app.state.exporter = exporter
    app.state.collector = collector

    @app.get("/", response_class=HTMLResponse)
    def dashboard():
        return DASHBOARD_HTML

    @app.get("/metrics")
    def metrics():
        return exporter.export()

    @app.get("/catalog")
    def catalog():
        return {
            "processes": context.names(),
            "metrics": [
                {
                    "name": metric.metric_name,
                    "label": metric.label,
                    "unit": metric.unit,
                    "kind": metric.kind.value,
                    "source": metric.source.value,
                }
                for metric in context.metrics
            ],
            "ignored_metrics": context.unknown_metrics,
        }

    @app.get("/figures/{metric_name}")
    def figure(metric_name: str):
        try:
            metric = get_metric(metric_name)
        except KeyError:
            raise HTTPException(status_code=404, detail=f"Unknown metric: {metric_name}")
        if metric not in context.metrics:
            raise HTTPException(status_code=404, detail=f"Metric not collected: {metric_name}")

        snapshot = exporter.snapshot()
        frame = snapshot_to_frame(snapshot, context.metrics)
        fig = build_metric_figure(frame, metric, sorted(snapshot), now_ms())
        return Response(content=fig.to_json(), media_type="application/json")

    @app.get("/healthz")
    def healthz():
        return {
            "status": "ok",
            "processes": context.names(),
            "collector_running": bool(collector and collector.is_running),
            "ticks": collector.tick_count if collector else 0,
        }

    return app
