"""Tests for chart configuration."""

from perfreport.chart import (
    build_chart,
    category_labels,
    configure_chart,
    configure_error_chart,
    configure_first_token_chart,
    configure_latency_chart,
)
from perfreport.config import QPS_LABEL, TOKENS_LABEL, X_AXIS_LABEL
from perfreport.models import BenchmarkResult, Metrics
from perfreport.series import build_series


def two_point_series():
    return build_series([
        BenchmarkResult(1, Metrics(qps=10.456, tokens_per_second=100.25)),
        BenchmarkResult(5, Metrics(qps=40.1, tokens_per_second=390.0)),
    ])


class TestConfigureChart:
    """Tests for the dual-axis throughput chart."""

    def test_two_traces_bound_to_separate_axes(self):
        fig = configure_chart(two_point_series())
        assert len(fig.data) == 2
        qps, tokens = fig.data
        assert qps.name == QPS_LABEL
        assert qps.yaxis == "y"
        assert tokens.name == TOKENS_LABEL
        assert tokens.yaxis == "y2"

    def test_series_values(self):
        fig = configure_chart(two_point_series())
        assert list(fig.data[0].x) == ["1", "5"]
        assert list(fig.data[0].y) == [10.456, 40.1]
        assert list(fig.data[1].y) == [100.25, 390.0]

    def test_axes(self):
        fig = configure_chart(two_point_series())
        layout = fig.layout
        assert layout.xaxis.type == "category"
        assert layout.xaxis.title.text == X_AXIS_LABEL
        assert layout.yaxis.side == "left"
        assert layout.yaxis2.side == "right"
        assert layout.yaxis2.overlaying == "y"
        assert layout.yaxis2.showgrid is False

    def test_shared_tooltip_with_two_decimals(self):
        fig = configure_chart(two_point_series())
        assert fig.layout.hovermode == "x unified"
        for trace in fig.data:
            assert "%{y:.2f}" in trace.hovertemplate

    def test_legend_on_top(self):
        fig = configure_chart(two_point_series())
        assert fig.layout.legend.y > 1

    def test_empty_series(self):
        fig = configure_chart(build_series([]))
        assert len(fig.data) == 2
        assert list(fig.data[0].x) == []
        assert list(fig.data[1].y) == []

    def test_build_chart_from_results(self, sample_results):
        fig = build_chart(sample_results)
        assert list(fig.data[0].x) == ["1", "2", "4", "8", "16"]


class TestCategoryLabels:
    """Tests for category axis labels."""

    def test_unique_values(self):
        assert category_labels([1, 2, 4]) == ["1", "2", "4"]

    def test_duplicates_stay_distinct(self):
        labels = category_labels([4, 4, 4])
        assert len(set(labels)) == 3
        assert [label.rstrip("\u200b") for label in labels] == ["4", "4", "4"]


class TestSecondaryCharts:
    """Tests for latency and error charts."""

    def test_latency_chart_has_distribution_traces(self, sample_results):
        fig = configure_latency_chart(sample_results)
        assert [trace.name for trace in fig.data] == ["Average", "P50", "P90", "P99"]
        assert list(fig.data[0].y) == [r.metrics.average_latency_ms for r in sample_results]

    def test_first_token_chart(self, sample_results):
        fig = configure_first_token_chart(sample_results)
        assert list(fig.data[0].y) == [20.0, 21.0, 22.0, 25.0, 60.0]

    def test_error_chart(self, sample_results):
        fig = configure_error_chart(sample_results)
        rates = list(fig.data[0].y)
        assert rates[0] == 0.0
        assert rates[3] == 2.0
        assert rates[4] == 5.0
