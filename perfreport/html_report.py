"""Static HTML report with embedded charts and a client-side language toggle."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Sequence, Union

from jinja2 import Environment, PackageLoader, select_autoescape

from .chart import (
    configure_chart,
    configure_error_chart,
    configure_first_token_chart,
    configure_latency_chart,
)
from .i18n import (
    DEFAULT_LANGUAGE,
    I18N_ATTRIBUTE,
    REPORT_TITLE_ID,
    REPORT_TITLES,
    SUPPORTED_LANGUAGES,
    TRANSLATIONS,
)
from .errors import UnsupportedLocaleError
from .models import BenchmarkResult
from .series import build_series
from .summary import build_summary

logger = logging.getLogger(__name__)

_env = Environment(
    loader=PackageLoader("perfreport", "templates"),
    autoescape=select_autoescape(["html"]),
)


def _figure_html(fig, div_id: str, include_plotlyjs) -> str:
    return fig.to_html(
        full_html=False,
        include_plotlyjs=include_plotlyjs,
        div_id=div_id,
        config={"responsive": True},
    )


def render_switcher_script(initial_language: str = DEFAULT_LANGUAGE) -> str:
    """
    Render the browser-side language switcher.

    The script embeds the phrase dictionary, wires the two language buttons
    and switches the page to initial_language once it loads.
    """
    if initial_language not in SUPPORTED_LANGUAGES:
        raise UnsupportedLocaleError(initial_language)
    return _env.get_template("i18n.js").render(
        translations=TRANSLATIONS,
        report_titles=REPORT_TITLES,
        attribute=I18N_ATTRIBUTE,
        title_id=REPORT_TITLE_ID,
        initial_language=initial_language,
    )


def render_html_report(
    results: Sequence[BenchmarkResult],
    lang: str = DEFAULT_LANGUAGE,
    offline: bool = False,
) -> str:
    """
    Render the HTML report.

    Args:
        results: Benchmark results ordered by concurrency
        lang: Language the page opens in
        offline: Embed plotly.js instead of loading it from the CDN

    Returns:
        Complete HTML document

    Raises:
        MalformedInputError: if a result lacks a charted metric
        UnsupportedLocaleError: if lang is not supported
    """
    if lang not in SUPPORTED_LANGUAGES:
        raise UnsupportedLocaleError(lang)

    # Validates the results before anything else is rendered
    series = build_series(results)
    summary = build_summary(results)

    plotlyjs = True if offline else "cdn"
    charts = {
        "performance": _figure_html(configure_chart(series), "performanceChart", plotlyjs),
        "latency": _figure_html(configure_latency_chart(results), "latencyChart", False),
        "errors": _figure_html(configure_error_chart(results), "errorChart", False),
        "first_token": None,
    }
    if any(r.metrics.average_first_token_latency_ms > 0 for r in results):
        charts["first_token"] = _figure_html(configure_first_token_chart(results), "firstTokenChart", False)

    phrases = TRANSLATIONS[lang]
    fallback = TRANSLATIONS[DEFAULT_LANGUAGE]

    def t(key: str) -> str:
        return phrases.get(key, fallback.get(key, key))

    template = _env.get_template("report.html")
    return template.render(
        summary=summary,
        charts=charts,
        t=t,
        report_titles=REPORT_TITLES,
        title_id=REPORT_TITLE_ID,
        initial_language=lang,
        switcher_script=render_switcher_script(lang),
        generated_at=datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
    )


def generate_html_report(
    results: Sequence[BenchmarkResult],
    filename: Union[str, Path],
    lang: str = DEFAULT_LANGUAGE,
    offline: bool = False,
) -> Path:
    """Render the HTML report and write it to filename."""
    html = render_html_report(results, lang=lang, offline=offline)

    path = Path(filename)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(html, encoding="utf-8")
    logger.debug("Wrote HTML report to %s", path)
    return path
