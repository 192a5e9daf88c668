#!/usr/bin/env python3
"""LLMPerf Report - CLI for rendering concurrency benchmark reports."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from perfreport.analysis import (
    best_first_token_latency,
    best_qps,
    best_success_rate,
    best_tokens_throughput,
    detect_first_token_latency_bottleneck,
    detect_latency_bottleneck,
    detect_qps_bottleneck,
    recommend_concurrency,
)
from perfreport.config import DEFAULT_REPORT_NAME, OUTPUT_DIR, REPORT_FORMATS
from perfreport.data_loader import load_results
from perfreport.errors import ReportError
from perfreport.exporters import generate_file_report, print_console_table
from perfreport.i18n import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES
from perfreport.series import build_series, format_fixed, format_qps, format_tokens

PROJECT_ROOT = Path(__file__).parent

console = Console()


def setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def load_or_exit(results_path):
    """Load and validate results, exiting with an error message on failure."""
    try:
        results = load_results(results_path)
        build_series(results)
    except ReportError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)
    except (OSError, ValueError) as e:
        console.print(f"[red]Error: failed to read {results_path}: {e}[/red]")
        sys.exit(1)
    return results


@click.group()
@click.version_option(version="1.0.0", prog_name="llmperf-report")
@click.option('--verbose', '-v', is_flag=True, help='Show debug logging')
def cli(verbose):
    """LLMPerf Report - performance reports for concurrency benchmarks."""
    setup_logging(verbose)


# =============================================================================
# REPORT COMMANDS
# =============================================================================

@cli.command()
@click.argument('results_path', type=click.Path(exists=True))
@click.option('--output', '-o', default=None,
              help='Report file path (format extension is added when missing)')
@click.option('--format', '-f', 'formats', type=click.Choice(REPORT_FORMATS), multiple=True,
              default=("html",), show_default=True, help='Report format, may be repeated')
@click.option('--lang', type=click.Choice(SUPPORTED_LANGUAGES), default=DEFAULT_LANGUAGE,
              show_default=True, help='Initial language of the HTML report')
@click.option('--offline', is_flag=True, help='Embed plotly.js instead of loading it from the CDN')
def report(results_path, output, formats, lang, offline):
    """Generate report files from a JSON results file or directory."""
    results = load_or_exit(results_path)

    if output is None:
        output = str(PROJECT_ROOT / OUTPUT_DIR / DEFAULT_REPORT_NAME)

    console.print(Panel.fit(
        "[bold blue]LLMPerf - Report Generation[/bold blue]",
        border_style="blue"
    ))
    console.print(f"Results: {results_path} ({len(results)} concurrency levels)")

    written = []
    for report_format in formats:
        try:
            path = generate_file_report(results, output, report_format, lang=lang, offline=offline)
        except ReportError as e:
            console.print(f"[red]Failed to generate {report_format.upper()} report: {e}[/red]")
            sys.exit(1)
        written.append(path)

    for path in written:
        console.print(f"[green]✓ {path}[/green]")


@cli.command()
@click.argument('results_path', type=click.Path(exists=True))
def table(results_path):
    """Print a comparison table of all concurrency levels."""
    results = load_or_exit(results_path)
    print_console_table(results, console=console)


@cli.command()
@click.argument('results_path', type=click.Path(exists=True))
def recommend(results_path):
    """Show best results, bottlenecks and the recommended concurrency."""
    results = load_or_exit(results_path)

    if not results:
        console.print("[yellow]No test results available.[/yellow]")
        return

    top_qps = best_qps(results)
    top_tokens = best_tokens_throughput(results)
    console.print(f"[bold]Highest QPS:[/bold] {format_qps(top_qps.metrics.qps)} "
                  f"(concurrency {top_qps.concurrency})")
    console.print(f"[bold]Highest Tokens/sec:[/bold] {format_tokens(top_tokens.metrics.tokens_per_second)} "
                  f"(concurrency {top_tokens.concurrency})")

    top_first_token = best_first_token_latency(results)
    if top_first_token is not None:
        console.print(f"[bold]Lowest First Token Latency:[/bold] "
                      f"{format_fixed(top_first_token.metrics.average_first_token_latency_ms, 0)} ms "
                      f"(concurrency {top_first_token.concurrency})")
    top_success = best_success_rate(results)
    console.print(f"[bold]Highest Success Rate:[/bold] {format_fixed(top_success.metrics.success_rate, 2)}% "
                  f"(concurrency {top_success.concurrency})")

    checks = [
        ("QPS", detect_qps_bottleneck(results)),
        ("E2E Latency", detect_latency_bottleneck(results)),
        ("First Token Latency", detect_first_token_latency_bottleneck(results)),
    ]
    for name, bottleneck in checks:
        if bottleneck.is_bottleneck:
            console.print(f"[bold]{name} bottleneck:[/bold] [yellow]concurrency {bottleneck.concurrency}[/yellow]")
        else:
            console.print(f"[bold]{name} bottleneck:[/bold] [green]none detected[/green]")

    recommendation = recommend_concurrency(results)
    console.print()
    console.print(Panel.fit(
        f"[bold]Recommended concurrency: {recommendation.concurrency}[/bold]\n\n"
        f"{recommendation.reason}",
        border_style="green"
    ))


# =============================================================================
# WEB UI COMMAND
# =============================================================================

@cli.command()
@click.argument('results_path', type=click.Path(exists=True))
@click.option('--host', default="0.0.0.0", help='Host address to bind')
@click.option('--port', default=8050, help='Port number')
@click.option('--debug', is_flag=True, help='Enable debug mode')
def webui(results_path, host, port, debug):
    """Launch web UI for the report."""
    from webui.app import run_app

    results = load_or_exit(results_path)

    console.print(Panel.fit(
        "[bold blue]LLMPerf - Web UI[/bold blue]",
        border_style="blue"
    ))

    console.print(f"Results: {results_path} ({len(results)} concurrency levels)")
    console.print(f"Starting web UI at http://{host}:{port}")
    console.print("Press Ctrl+C to stop\n")

    try:
        run_app(results_path, host=host, port=port, debug=debug, results=results)
    except ReportError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

if __name__ == '__main__':
    cli()
