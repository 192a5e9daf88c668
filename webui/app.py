"""Dash web application for browsing a performance report."""

import logging
from typing import List, Optional

import dash
from dash import ctx, dcc, html, Input, Output, State
from dash.exceptions import PreventUpdate

from perfreport.chart import (
    configure_chart,
    configure_error_chart,
    configure_first_token_chart,
    configure_latency_chart,
)
from perfreport.data_loader import load_results
from perfreport.errors import UnsupportedLocaleError
from perfreport.i18n import (
    DEFAULT_LANGUAGE,
    I18N_ATTRIBUTE,
    LANGUAGE_CONTROLS,
    REPORT_TITLE_ID,
    REPORT_TITLES,
    LocaleState,
    LocalizationSwitcher,
)
from perfreport.models import BenchmarkResult
from perfreport.series import build_series
from perfreport.summary import ReportSummary, build_summary, default_text

from .layout_document import DashLayoutDocument

logger = logging.getLogger(__name__)

LANGUAGE_BY_CONTROL = {control_id: lang for lang, control_id in LANGUAGE_CONTROLS.items()}

SECTION_STYLE = {
    'margin': '20px',
    'padding': '15px',
    'backgroundColor': '#ffffff',
    'borderRadius': '5px',
    'border': '1px solid #dee2e6',
}
CARD_STYLE = {
    'width': '23%',
    'display': 'inline-block',
    'verticalAlign': 'top',
    'marginRight': '2%',
    'padding': '15px',
    'boxSizing': 'border-box',
    'backgroundColor': '#f8f9fa',
    'borderRadius': '5px',
    'border': '1px solid #dee2e6',
}
CELL_STYLE = {'border': '1px solid #dee2e6', 'padding': '4px 8px', 'textAlign': 'center'}


def i18n(component, key, **kwargs):
    """Create a component whose text is looked up by key."""
    return component(default_text(key), **{I18N_ATTRIBUTE: key}, **kwargs)


def _card(card):
    children = [
        i18n(html.H3, card.title_key, style={'marginTop': 0, 'color': '#2196f3'}),
        i18n(html.Div, card.subtitle_key, style={'color': '#666'}),
    ]
    if card.value is not None:
        children.append(html.Div(card.value, style={'fontSize': '28px', 'fontWeight': 'bold'}))
    if card.concurrency is not None and card.title_key != "recommended":
        children.append(html.Div([i18n(html.Span, "concurrency"), f": {card.concurrency}"]))
    if card.status_key:
        children.append(i18n(html.Div, card.status_key, style={'color': '#666'}))
    if card.reason_key:
        children.append(i18n(html.Div, card.reason_key, style={'color': '#666', 'marginTop': '8px'}))
    return html.Div(children, style=CARD_STYLE)


def _comparison_table(summary: ReportSummary):
    if not summary.rows:
        return i18n(html.P, "noDataAvailable")

    header_keys = ["concurrency", "requests", "duration", "qps", "tokensPerSec",
                   "average", "p50", "p90", "p99", "successRate", "errorRate"]
    header = html.Tr([i18n(html.Th, key, style=CELL_STYLE) for key in header_keys])

    rows = []
    for row in summary.rows:
        cells = [row.concurrency, row.requests, f"{row.duration}s", row.qps, row.tokens_per_sec,
                 *row.latency, f"{row.success_rate}%", f"{row.error_rate}%"]
        style = {'backgroundColor': '#e8f5e9'} if row.concurrency == summary.recommendation.concurrency else {}
        rows.append(html.Tr([html.Td(str(c), style=CELL_STYLE) for c in cells], style=style))

    return html.Table([html.Thead(header), html.Tbody(rows)],
                      style={'borderCollapse': 'collapse', 'width': '100%'})


def _error_types_table(summary: ReportSummary):
    if not summary.has_errors:
        return i18n(html.P, "noErrors")
    header = html.Tr([i18n(html.Th, "errorType", style=CELL_STYLE), i18n(html.Th, "count", style=CELL_STYLE)])
    rows = [html.Tr([html.Td(name, style=CELL_STYLE), html.Td(str(count), style=CELL_STYLE)])
            for name, count in summary.error_types]
    return html.Table([html.Thead(header), html.Tbody(rows)],
                      style={'borderCollapse': 'collapse', 'width': '50%'})


def build_report_body(summary: ReportSummary, figures: dict) -> list:
    """
    Build the report sections below the header.

    Args:
        summary: Report summary
        figures: Plotly figures keyed by performance, latency, first_token, errors

    Returns:
        List of Dash components
    """
    body = [
        i18n(html.H2, "concurrentTestComparison", style={'marginLeft': '20px'}),
        html.Div([_card(card) for card in summary.cards], style={'margin': '20px'}),
        i18n(html.Div, "recommendationNote", style={'margin': '0 20px', 'color': '#666'}),
        html.Div([
            i18n(html.H2, "performanceMetricsChart"),
            dcc.Graph(id='performance-chart', figure=figures["performance"]),
        ], style=SECTION_STYLE),
        html.Div([
            i18n(html.H2, "latencyDistributionChart"),
            dcc.Graph(id='latency-chart', figure=figures["latency"]),
        ], style=SECTION_STYLE),
    ]

    if figures.get("first_token") is not None:
        body.append(html.Div([
            i18n(html.H2, "firstTokenLatencyChart"),
            dcc.Graph(id='first-token-chart', figure=figures["first_token"]),
        ], style=SECTION_STYLE))

    body.extend([
        html.Div([
            i18n(html.H2, "detailedComparison"),
            _comparison_table(summary),
        ], style=SECTION_STYLE),
        html.Div([
            i18n(html.H2, "errorStatistics"),
            i18n(html.H3, "errorRate"),
            dcc.Graph(id='error-chart', figure=figures["errors"]),
            i18n(html.H3, "errorTypeDistribution"),
            _error_types_table(summary),
        ], style=SECTION_STYLE),
    ])
    return body


def build_header():
    """Report title and the two language selector buttons."""
    return html.Div([
        html.H1(REPORT_TITLES[DEFAULT_LANGUAGE], id=REPORT_TITLE_ID,
                style={'display': 'inline-block', 'color': '#333'}),
        html.Div([
            html.Button('English', id=LANGUAGE_CONTROLS["en"], n_clicks=0,
                        className='lang-btn active', style={'marginRight': '5px', 'padding': '5px 15px'}),
            html.Button('中文', id=LANGUAGE_CONTROLS["zh"], n_clicks=0,
                        className='lang-btn', style={'padding': '5px 15px'}),
        ], style={'float': 'right', 'marginTop': '25px'}),
    ], style={'margin': '0 20px'})


def create_app(results_path: str, results: Optional[List[BenchmarkResult]] = None) -> dash.Dash:
    """
    Create and configure the Dash application.

    Args:
        results_path: JSON results file or directory of per-run JSON files
        results: Already loaded results; results_path is not read when given

    Returns:
        Configured Dash application

    Raises:
        MalformedInputError: if the results cannot be charted
    """
    if results is None:
        results = load_results(results_path)
    series = build_series(results)
    summary = build_summary(results)

    # Figures are built once and shared by every re-render of the page
    figures = {
        "performance": configure_chart(series),
        "latency": configure_latency_chart(results),
        "errors": configure_error_chart(results),
        "first_token": None,
    }
    if any(r.metrics.average_first_token_latency_ms > 0 for r in results):
        figures["first_token"] = configure_first_token_chart(results)

    app = dash.Dash(__name__)
    app.title = REPORT_TITLES[DEFAULT_LANGUAGE]

    app.layout = html.Div([
        dcc.Store(id='lang-store', data=DEFAULT_LANGUAGE),
        build_header(),
        html.Div(id='report-body', children=build_report_body(summary, figures)),
        html.Div([
            html.Hr(),
            html.P(
                "LLMPerf - Performance Report Viewer",
                style={'textAlign': 'center', 'color': '#666', 'fontSize': '14px'}
            )
        ], style={'margin': '20px'}),
    ], style={'backgroundColor': '#f5f7fa'})

    # Runs once on page load with no trigger, which selects the default language
    @app.callback(
        Output(REPORT_TITLE_ID, 'children'),
        Output('report-body', 'children'),
        Output(LANGUAGE_CONTROLS["en"], 'className'),
        Output(LANGUAGE_CONTROLS["zh"], 'className'),
        Output('lang-store', 'data'),
        Input(LANGUAGE_CONTROLS["en"], 'n_clicks'),
        Input(LANGUAGE_CONTROLS["zh"], 'n_clicks'),
        State('lang-store', 'data'),
    )
    def switch_language(en_clicks, zh_clicks, current_lang):
        lang = LANGUAGE_BY_CONTROL.get(ctx.triggered_id, DEFAULT_LANGUAGE)

        header = build_header()
        body = html.Div(build_report_body(summary, figures))
        document = DashLayoutDocument(html.Div([header, body]))

        try:
            state = LocaleState(active_language=current_lang or DEFAULT_LANGUAGE)
            LocalizationSwitcher(document, state).switch_language(lang)
        except UnsupportedLocaleError as e:
            logger.warning("Ignoring language switch: %s", e)
            raise PreventUpdate

        title = document.get_element_by_id(REPORT_TITLE_ID).component
        en_button = document.get_element_by_id(LANGUAGE_CONTROLS["en"]).component
        zh_button = document.get_element_by_id(LANGUAGE_CONTROLS["zh"]).component
        return title.children, body.children, en_button.className, zh_button.className, state.active_language

    return app


def run_app(results_path: str, host: str = "0.0.0.0", port: int = 8050, debug: bool = False,
            results: Optional[List[BenchmarkResult]] = None):
    """
    Run the Dash application.

    Args:
        results_path: JSON results file or directory of per-run JSON files
        host: Host address to bind
        port: Port number
        debug: Enable debug mode
        results: Already loaded results
    """
    app = create_app(results_path, results)

    logger.info("Starting web UI at http://%s:%s", host, port)
    logger.info("Local access: http://localhost:%s", port)

    app.run(host=host, port=port, debug=debug)
