"""
Builds the live dashboard: the HTML page and the per-metric Plotly figures.

Snapshots are flattened into a Polars frame (one row per process and tick,
one nullable column per selected metric) and turned into one line chart per
metric with one trace per process. Missing values stay null so the lines
break at gaps instead of dropping to zero.
"""

import logging
from typing import Dict, List

import plotly.graph_objects as go
import polars as pl

from ..catalog import Metric
from ..models.samples import Sample

logger = logging.getLogger(__name__)

PALETTE = ["#4dc9f6", "#f67019", "#f53794", "#acc236", "#166a8f", "#00a950", "#58595b"]

CARD_BACKGROUND = "#16213e"
GRID_COLOR = "#2a2a4a"


def snapshot_to_frame(snapshot: Dict[str, List[Sample]], metrics: List[Metric]) -> pl.DataFrame:
    """
    Flatten a snapshot into a wide frame.

    Columns: process, timestamp, then one Int64 column per metric name.
    """
    schema = {"process": pl.Utf8, "timestamp": pl.Int64}
    schema.update({metric.metric_name: pl.Int64 for metric in metrics})

    rows = []
    for process_name, samples in snapshot.items():
        for sample in samples:
            row = {"process": process_name, "timestamp": sample.timestamp}
            for metric in metrics:
                row[metric.metric_name] = sample.values.get(metric.metric_name)
            rows.append(row)

    return pl.DataFrame(rows, schema=schema)


def build_metric_figure(
    frame: pl.DataFrame,
    metric: Metric,
    process_names: List[str],
    now_ms: int,
) -> go.Figure:
    """
    Build the line chart for one metric.

    Args:
        frame: Output of `snapshot_to_frame`.
        metric: Metric to plot; its column must be present in `frame`.
        process_names: Processes to draw, in legend order. Colors follow
            this order so they stay stable between refreshes.
        now_ms: Reference time; the x axis is seconds before it.
    """
    fig = go.Figure()
    for i, process_name in enumerate(process_names):
        process_df = frame.filter(pl.col("process") == process_name).sort("timestamp")
        seconds_ago = ((process_df["timestamp"] - now_ms) / 1000).to_list()
        color = PALETTE[i % len(PALETTE)]
        fig.add_trace(
            go.Scatter(
                x=seconds_ago,
                y=process_df[metric.metric_name].to_list(),
                name=process_name,
                mode="lines+markers",
                connectgaps=False,
                line=dict(color=color, width=2),
                marker=dict(size=4),
            )
        )

    fig.update_layout(
        title=f"{metric.label} ({metric.unit})",
        template="plotly_dark",
        paper_bgcolor=CARD_BACKGROUND,
        plot_bgcolor=CARD_BACKGROUND,
        margin=dict(l=50, r=20, t=50, b=40),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
        # Keeps zoom and legend toggles across Plotly.react refreshes.
        uirevision=metric.metric_name,
    )
    fig.update_xaxes(title_text="seconds ago", gridcolor=GRID_COLOR)
    fig.update_yaxes(title_text=metric.unit, gridcolor=GRID_COLOR, rangemode="tozero")
    return fig


DASHBOARD_HTML = """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>Process Monitor</title>
  <script src="https://cdn.plot.ly/plotly-2.35.2.min.js"></script>
  <style>
    * { box-sizing: border-box; margin: 0; padding: 0; }
    body { font-family: sans-serif; background: #1a1a2e; color: #eee; padding: 24px; }
    h1 { color: #4dc9f6; margin-bottom: 8px; }
    #subtitle { color: #aaa; margin-bottom: 24px; }
    .charts { display: grid; grid-template-columns: 1fr 1fr; gap: 24px; }
    .card { background: #16213e; border-radius: 8px; padding: 12px; height: 340px; }
  </style>
</head>
<body>
  <h1>Process Monitor</h1>
  <div id="subtitle"></div>
  <div class="charts" id="charts"></div>
  <script>
    const POLL_MS = 2000;
    let metrics = [];

    async function init() {
      const resp = await fetch('catalog');
      const catalog = await resp.json();
      metrics = catalog.metrics.map(m => m.name);
      document.getElementById('subtitle').textContent =
        'Monitoring: ' + catalog.processes.join(', ');
      const charts = document.getElementById('charts');
      metrics.forEach(name => {
        const card = document.createElement('div');
        card.className = 'card';
        card.id = 'chart-' + name;
        charts.appendChild(card);
      });
      poll();
      setInterval(poll, POLL_MS);
    }

    async function poll() {
      for (const name of metrics) {
        try {
          const resp = await fetch('figures/' + encodeURIComponent(name));
          const fig = await resp.json();
          Plotly.react('chart-' + name, fig.data, fig.layout, {responsive: true});
        } catch (e) {
          console.error('poll error:', e);
        }
      }
    }

    init();
  </script>
</body>
</html>
"""
