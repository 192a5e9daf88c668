"""Shared fixtures: sample results and an in-memory report document."""

import pytest

from perfreport.models import BenchmarkResult, Metrics


def make_result(concurrency, qps, tokens, latency=100.0, first_token=0.0,
                total=100, failed=0, **extra):
    return BenchmarkResult(
        concurrency=concurrency,
        metrics=Metrics(
            qps=qps,
            tokens_per_second=tokens,
            total_requests=total,
            successful_requests=total - failed,
            failed_requests=failed,
            success_rate=(total - failed) / total * 100 if total else 0.0,
            total_duration_ms=10000.0,
            average_latency_ms=latency,
            latency_p50_ms=latency * 0.9,
            latency_p90_ms=latency * 1.5,
            latency_p99_ms=latency * 2,
            average_first_token_latency_ms=first_token,
            average_request_tokens=512.0,
            average_response_tokens=128.0,
            **extra,
        ),
    )


@pytest.fixture
def sample_results():
    """Five levels where QPS flattens out after concurrency 8."""
    return [
        make_result(1, 10.0, 100.0, latency=100.0, first_token=20.0),
        make_result(2, 19.5, 195.0, latency=102.0, first_token=21.0),
        make_result(4, 38.0, 380.0, latency=105.0, first_token=22.0),
        make_result(8, 70.0, 700.0, latency=115.0, first_token=25.0,
                    failed=2, error_type_counts={"timeout": 2}),
        make_result(16, 70.2, 702.0, latency=230.0, first_token=60.0,
                    failed=5, error_type_counts={"timeout": 3, "rate_limited": 2}),
    ]


class FakeElement:
    """Element of an in-memory document, recording how it was last written."""

    def __init__(self, tag_name, text="", attributes=None, classes=None, element_id=None):
        self.tag_name = tag_name
        self.text = text
        self.attributes = dict(attributes or {})
        self.classes = set(classes or [])
        self.id = element_id
        self.last_write = None

    def get_attribute(self, name):
        return self.attributes.get(name)

    def set_text(self, text):
        self.text = text
        self.last_write = "text"

    def set_markup(self, markup):
        self.text = markup
        self.last_write = "markup"

    def toggle_class(self, name, force):
        if force:
            self.classes.add(name)
        else:
            self.classes.discard(name)


class FakeDocument:

    def __init__(self, elements):
        self.elements = elements

    def get_element_by_id(self, element_id):
        for element in self.elements:
            if element.id == element_id:
                return element
        return None

    def query_by_attribute(self, name):
        return [e for e in self.elements if name in e.attributes]

    def by_key(self, key):
        return next(e for e in self.elements if e.attributes.get("data-i18n") == key)

    def snapshot(self):
        return [(e.text, frozenset(e.classes)) for e in self.elements]


@pytest.fixture
def report_document():
    """A report page authored in mixed languages, as it looks before any switch."""
    return FakeDocument([
        FakeElement("h1", "LLMPerf 性能报告", element_id="report-title"),
        FakeElement("button", "English", classes=["lang-btn"], element_id="lang-en"),
        FakeElement("button", "中文", classes=["lang-btn", "active"], element_id="lang-zh"),
        FakeElement("H2", "并发测试比较", {"data-i18n": "concurrentTestComparison"}),
        FakeElement("h3", "Best Performance", {"data-i18n": "bestPerformance"}),
        FakeElement("span", "Highest QPS", {"data-i18n": "highestQPS"}),
        FakeElement("div", "Note", {"data-i18n": "recommendationNote"}),
        FakeElement("p", "Keep me", {"data-i18n": "unknownKey"}),
        FakeElement("td", "42"),
    ])
