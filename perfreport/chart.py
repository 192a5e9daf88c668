"""Plotly chart configuration for the performance report."""

from collections import Counter
from typing import List, Sequence

import plotly.graph_objects as go

from .config import (
    CHART_HEIGHT,
    CHART_TEMPLATE,
    ERROR_COLOR,
    ERROR_RATE_AXIS_LABEL,
    LATENCY_AXIS_LABEL,
    LATENCY_COLORS,
    QPS_AXIS_LABEL,
    QPS_COLOR,
    QPS_LABEL,
    TOKENS_AXIS_LABEL,
    TOKENS_COLOR,
    TOKENS_LABEL,
    TOOLTIP_DECIMALS,
    X_AXIS_LABEL,
)
from .models import BenchmarkResult
from .series import ChartSeries, build_series

# Shared tooltip value format, independent of the label precision
TOOLTIP_VALUE = f"%{{y:.{TOOLTIP_DECIMALS}f}}"

LEGEND_TOP = dict(orientation="h", yanchor="bottom", y=1.02, xanchor="left", x=0)


def category_labels(categories: Sequence[int]) -> List[str]:
    """
    Turn concurrency values into category axis labels.

    Repeated values get trailing zero-width spaces so plotly keeps each one
    as its own position on the axis instead of stacking them.
    """
    seen = Counter()
    labels = []
    for value in categories:
        label = str(value)
        labels.append(label + "\u200b" * seen[label])
        seen[label] += 1
    return labels


def _category_xaxis(labels: List[str]) -> dict:
    return dict(
        title=dict(text=X_AXIS_LABEL),
        type="category",
        categoryorder="array",
        categoryarray=labels,
    )


def configure_chart(series: ChartSeries) -> go.Figure:
    """
    Configure the dual-axis throughput chart.

    QPS is bound to the left axis and tokens/sec to the right one. The right
    axis draws no gridlines. Hovering an x position shows both values.

    Args:
        series: Series produced by build_series

    Returns:
        Plotly figure ready to be rendered
    """
    labels = category_labels(series.categories)
    fig = go.Figure()

    fig.add_trace(go.Scatter(
        x=labels,
        y=list(series.primary_series),
        mode='lines+markers',
        name=QPS_LABEL,
        yaxis='y',
        line=dict(color=QPS_COLOR, width=2),
        marker=dict(color=QPS_COLOR),
        hovertemplate=f'{QPS_LABEL}: {TOOLTIP_VALUE}<extra></extra>',
    ))

    fig.add_trace(go.Scatter(
        x=labels,
        y=list(series.secondary_series),
        mode='lines+markers',
        name=TOKENS_LABEL,
        yaxis='y2',
        line=dict(color=TOKENS_COLOR, width=2),
        marker=dict(color=TOKENS_COLOR),
        hovertemplate=f'{TOKENS_LABEL}: {TOOLTIP_VALUE}<extra></extra>',
    ))

    fig.update_layout(
        xaxis=_category_xaxis(labels),
        yaxis=dict(
            title=dict(text=QPS_AXIS_LABEL),
            type='linear',
            side='left',
        ),
        yaxis2=dict(
            title=dict(text=TOKENS_AXIS_LABEL),
            type='linear',
            side='right',
            overlaying='y',
            showgrid=False,
        ),
        hovermode='x unified',
        legend=LEGEND_TOP,
        template=CHART_TEMPLATE,
        height=CHART_HEIGHT,
    )

    return fig


def build_chart(results: Sequence[BenchmarkResult]) -> go.Figure:
    """Build series from results and configure the throughput chart."""
    return configure_chart(build_series(results))


def _latency_chart(labels: List[str], traces: dict) -> go.Figure:
    fig = go.Figure()
    for name, (values, color) in traces.items():
        fig.add_trace(go.Scatter(
            x=labels,
            y=values,
            mode='lines+markers',
            name=name,
            line=dict(color=color),
            marker=dict(color=color),
            hovertemplate=f'{name}: {TOOLTIP_VALUE} ms<extra></extra>',
        ))

    fig.update_layout(
        xaxis=_category_xaxis(labels),
        yaxis=dict(title=dict(text=LATENCY_AXIS_LABEL)),
        hovermode='x unified',
        legend=LEGEND_TOP,
        template=CHART_TEMPLATE,
        height=CHART_HEIGHT,
    )
    return fig


def configure_latency_chart(results: Sequence[BenchmarkResult]) -> go.Figure:
    """End-to-end latency distribution (average, P50, P90, P99) per concurrency level."""
    labels = category_labels([r.concurrency for r in results])
    return _latency_chart(labels, {
        "Average": ([r.metrics.average_latency_ms for r in results], LATENCY_COLORS["average"]),
        "P50": ([r.metrics.latency_p50_ms for r in results], LATENCY_COLORS["p50"]),
        "P90": ([r.metrics.latency_p90_ms for r in results], LATENCY_COLORS["p90"]),
        "P99": ([r.metrics.latency_p99_ms for r in results], LATENCY_COLORS["p99"]),
    })


def configure_first_token_chart(results: Sequence[BenchmarkResult]) -> go.Figure:
    """First token latency distribution per concurrency level."""
    labels = category_labels([r.concurrency for r in results])
    return _latency_chart(labels, {
        "Average": ([r.metrics.average_first_token_latency_ms for r in results], LATENCY_COLORS["average"]),
        "P50": ([r.metrics.first_token_latency_p50_ms for r in results], LATENCY_COLORS["p50"]),
        "P90": ([r.metrics.first_token_latency_p90_ms for r in results], LATENCY_COLORS["p90"]),
        "P99": ([r.metrics.first_token_latency_p99_ms for r in results], LATENCY_COLORS["p99"]),
    })


def configure_error_chart(results: Sequence[BenchmarkResult]) -> go.Figure:
    """Error rate (%) per concurrency level."""
    labels = category_labels([r.concurrency for r in results])
    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=labels,
        y=[r.metrics.error_rate for r in results],
        name=ERROR_RATE_AXIS_LABEL,
        marker=dict(color=ERROR_COLOR),
        hovertemplate=f'{ERROR_RATE_AXIS_LABEL}: {TOOLTIP_VALUE}<extra></extra>',
    ))
    fig.update_layout(
        xaxis=_category_xaxis(labels),
        yaxis=dict(title=dict(text=ERROR_RATE_AXIS_LABEL), rangemode='tozero'),
        hovermode='x unified',
        template=CHART_TEMPLATE,
        height=CHART_HEIGHT,
    )
    return fig
