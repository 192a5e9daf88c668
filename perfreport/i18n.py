"""Bilingual report text and the language switcher.

The switcher rewrites every element tagged with a ``data-i18n`` key from a
static phrase dictionary. It works against any object implementing the
``Document`` protocol, so the same logic drives the Dash web UI and can be
exercised in tests without a browser.
"""

import logging
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Protocol

from .errors import UnsupportedLocaleError

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"
SUPPORTED_LANGUAGES = ("en", "zh")

I18N_ATTRIBUTE = "data-i18n"
REPORT_TITLE_ID = "report-title"
ACTIVE_CLASS = "active"
LANGUAGE_CONTROLS = {
    "en": "lang-en",
    "zh": "lang-zh",
}

# Headings only ever receive plain text
HEADING_TAGS = frozenset({"h1", "h2", "h3"})

# The title carries branding, so it is not part of the phrase dictionary
REPORT_TITLES = {
    "en": "LLMPerf Performance Report",
    "zh": "LLMPerf 性能报告",
}

TRANSLATIONS = {
    "en": {
        "concurrentTestComparison": "Concurrent Test Comparison",
        "bestPerformance": "Best Performance",
        "highestQPS": "Highest QPS",
        "noDataAvailable": "No data available",
        "bestThroughput": "Best Throughput",
        "highestTokensPerSecond": "Highest Tokens per Second",
        "e2eLatencyBottleneck": "E2E Latency Bottleneck",
        "bottleneckDetected": "Bottleneck Detected",
        "noBottleneck": "No bottleneck detected",
        "recommended": "Recommended",
        "optimalConcurrency": "Optimal Concurrency",
        "recommendationNote": "<strong>Note:</strong> the recommendation is derived from QPS and latency trends across the tested levels.",
        "reasonNoData": "No results to analyze.",
        "reasonSingleLevel": "Only one concurrency level was tested.",
        "reasonQpsBottleneck": "QPS stops scaling beyond this level. Stay at or below it for optimal throughput.",
        "reasonQpsBottleneckShortRun": "QPS stops scaling beyond this level, but only a few requests were processed. Run longer tests to confirm.",
        "reasonLatencyBottleneck": "Latency grows faster than load beyond this level. Stay at or below it to keep latency low.",
        "reasonBestOverall": "This level maximizes both QPS and token throughput.",
        "reasonBalanced": "This level balances QPS and latency.",
        "reasonMaxQps": "This level gives the highest QPS.",
        "detailedComparison": "Detailed Comparison",
        "concurrency": "Concurrency",
        "requests": "Requests",
        "duration": "Duration",
        "qps": "QPS",
        "tokensPerSec": "Tokens/sec",
        "e2eLatency": "E2E Latency",
        "firstTokenLatency": "First Token Latency",
        "tokenMetrics": "Token Metrics",
        "average": "Average",
        "p50": "P50",
        "p90": "P90",
        "p99": "P99",
        "request": "Request",
        "response": "Response",
        "successRate": "Success Rate",
        "performanceMetricsChart": "Performance Metrics Chart",
        "latencyDistributionChart": "Latency Distribution Chart",
        "firstTokenLatencyChart": "First Token Latency Chart",
        "errorStatistics": "Error Statistics",
        "errorRate": "Error Rate",
        "errorTypeDistribution": "Error Type Distribution",
        "errorType": "Error Type",
        "count": "Count",
        "noErrors": "No errors recorded",
    },
    "zh": {
        "concurrentTestComparison": "并发测试比较",
        "bestPerformance": "最佳性能",
        "highestQPS": "最高 QPS",
        "noDataAvailable": "无可用数据",
        "bestThroughput": "最佳吞吐量",
        "highestTokensPerSecond": "最高每秒令牌数",
        "e2eLatencyBottleneck": "端到端延迟瓶颈",
        "bottleneckDetected": "检测到瓶颈",
        "noBottleneck": "未检测到瓶颈",
        "recommended": "推荐",
        "optimalConcurrency": "最优并发数",
        "recommendationNote": "<strong>注意：</strong>推荐结果基于各并发级别下的 QPS 与延迟变化趋势。",
        "reasonNoData": "没有可分析的结果。",
        "reasonSingleLevel": "仅测试了一个并发级别。",
        "reasonQpsBottleneck": "超过该并发后 QPS 不再提升，建议不超过该并发以获得最佳吞吐量。",
        "reasonQpsBottleneckShortRun": "超过该并发后 QPS 不再提升，但处理的请求较少，建议延长测试时间进行确认。",
        "reasonLatencyBottleneck": "超过该并发后延迟增长快于负载增长，建议不超过该并发以保持低延迟。",
        "reasonBestOverall": "该并发同时获得最高的 QPS 和 Token 吞吐量。",
        "reasonBalanced": "该并发在 QPS 与延迟之间取得平衡。",
        "reasonMaxQps": "该并发获得最高的 QPS。",
        "detailedComparison": "详细比较",
        "concurrency": "并发数",
        "requests": "请求数",
        "duration": "持续时间",
        "qps": "QPS",
        "tokensPerSec": "Tokens/秒",
        "e2eLatency": "端到端延迟",
        "firstTokenLatency": "首Token延迟",
        "tokenMetrics": "Token指标",
        "average": "平均",
        "p50": "P50",
        "p90": "P90",
        "p99": "P99",
        "request": "请求",
        "response": "响应",
        "successRate": "成功率",
        "performanceMetricsChart": "性能指标图表",
        "latencyDistributionChart": "延迟分布图表",
        "firstTokenLatencyChart": "首Token延迟图表",
        "errorStatistics": "错误统计",
        "errorRate": "错误率",
        "errorTypeDistribution": "错误类型分布",
        "errorType": "错误类型",
        "count": "次数",
        "noErrors": "无错误记录",
    },
}


class DocumentElement(Protocol):
    """An element of the rendered report the switcher can rewrite."""

    @property
    def tag_name(self) -> str: ...

    def get_attribute(self, name: str) -> Optional[str]: ...

    def set_text(self, text: str) -> None: ...

    def set_markup(self, markup: str) -> None: ...

    def toggle_class(self, name: str, force: bool) -> None: ...


class Document(Protocol):
    """Element lookup over the rendered report."""

    def get_element_by_id(self, element_id: str) -> Optional[DocumentElement]: ...

    def query_by_attribute(self, name: str) -> Iterable[DocumentElement]: ...


class LocaleState:
    """Active language plus the read-only phrase dictionary."""

    def __init__(
        self,
        dictionary: Mapping[str, Mapping[str, str]] = TRANSLATIONS,
        active_language: str = DEFAULT_LANGUAGE,
    ):
        if active_language not in SUPPORTED_LANGUAGES:
            raise UnsupportedLocaleError(active_language)
        self._dictionary = MappingProxyType({
            lang: MappingProxyType(dict(dictionary.get(lang, {})))
            for lang in SUPPORTED_LANGUAGES
        })
        self.active_language = active_language

    @property
    def dictionary(self) -> Mapping[str, Mapping[str, str]]:
        return self._dictionary

    def lookup(self, lang: str, key: Optional[str]) -> Optional[str]:
        """Localized phrase for key, or None if the locale lacks it."""
        if key is None:
            return None
        return self._dictionary.get(lang, {}).get(key)


class LocalizationSwitcher:
    """Rewrites the text of a report document for the requested language."""

    def __init__(self, document: Document, state: Optional[LocaleState] = None):
        self.document = document
        self.state = state or LocaleState()

    @property
    def active_language(self) -> str:
        return self.state.active_language

    def initialize(self) -> None:
        """Normalize the authored document to the default language."""
        self.switch_language(DEFAULT_LANGUAGE)

    def switch_language(self, lang: str) -> None:
        """
        Switch the document to another language.

        Args:
            lang: Locale code, one of SUPPORTED_LANGUAGES

        Raises:
            UnsupportedLocaleError: if lang is unknown; nothing is changed
        """
        if lang not in SUPPORTED_LANGUAGES:
            raise UnsupportedLocaleError(lang)

        self.state.active_language = lang
        self._update_controls(lang)

        updated = 0
        missing = 0
        for element in self.document.query_by_attribute(I18N_ATTRIBUTE):
            key = element.get_attribute(I18N_ATTRIBUTE)
            text = self.state.lookup(lang, key)
            if text is None:
                missing += 1
                continue
            if element.tag_name.lower() in HEADING_TAGS:
                element.set_text(text)
            else:
                element.set_markup(text)
            updated += 1

        title = self.document.get_element_by_id(REPORT_TITLE_ID)
        if title is not None:
            title.set_text(REPORT_TITLES[lang])

        logger.debug("Switched report to %s: %d elements updated, %d keys missing",
                     lang, updated, missing)

    def _update_controls(self, lang: str) -> None:
        for code, control_id in LANGUAGE_CONTROLS.items():
            control = self.document.get_element_by_id(control_id)
            if control is not None:
                control.toggle_class(ACTIVE_CLASS, code == lang)
