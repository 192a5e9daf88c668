"""Tests for report files and the console table."""

import csv
import json
import tempfile
from pathlib import Path

import pytest
from rich.console import Console

from perfreport.data_loader import CSV_COLUMNS, load_results_file
from perfreport.errors import MalformedInputError, UnsupportedFormatError, UnsupportedLocaleError
from perfreport.exporters import generate_file_report, print_console_table
from perfreport.html_report import render_html_report, render_switcher_script
from perfreport.models import BenchmarkResult, Metrics


class TestGenerateFileReport:
    """Tests for format dispatch."""

    def test_json_reloads_to_same_results(self, sample_results):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = generate_file_report(sample_results, Path(tmpdir, "report"), "json")
            assert path.name == "report.json"
            assert load_results_file(path) == sample_results

            data = json.loads(path.read_text(encoding="utf-8"))
            assert "test_results" in data

    def test_csv_columns(self, sample_results):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = generate_file_report(sample_results, Path(tmpdir, "report"), "csv")
            with open(path, newline="", encoding="utf-8") as f:
                rows = list(csv.reader(f))

            assert rows[0] == CSV_COLUMNS
            assert len(rows) == 6
            assert rows[1][0] == "1"
            assert rows[1][CSV_COLUMNS.index("qps")] == "10.00"

    def test_keeps_existing_extension(self, sample_results):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = generate_file_report(sample_results, Path(tmpdir, "out.HTML"), "html")
            assert path.name == "out.HTML"
            assert path.exists()

    def test_format_is_case_insensitive(self, sample_results):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = generate_file_report(sample_results, Path(tmpdir, "report"), "JSON")
            assert path.name == "report.json"

    def test_unsupported_format(self, sample_results):
        with tempfile.TemporaryDirectory() as tmpdir:
            with pytest.raises(UnsupportedFormatError):
                generate_file_report(sample_results, Path(tmpdir, "report"), "xml")
            assert list(Path(tmpdir).iterdir()) == []


class TestHtmlReport:
    """Tests for the rendered HTML page."""

    def test_page_structure(self, sample_results):
        html = render_html_report(sample_results)

        assert 'id="report-title"' in html
        assert 'id="lang-en"' in html
        assert 'id="lang-zh"' in html
        assert 'data-i18n="bestPerformance"' in html
        assert "performanceChart" in html
        assert "latencyChart" in html
        assert "firstTokenChart" in html
        assert "<strong>Note:</strong>" in html
        assert 'switchLanguage("en");' in html

    def test_opens_in_chinese(self, sample_results):
        html = render_html_report(sample_results, lang="zh")

        assert "并发测试比较" in html
        assert 'switchLanguage("zh");' in html
        assert '<html lang="zh">' in html

    def test_error_types_listed(self, sample_results):
        html = render_html_report(sample_results)
        assert "<td>timeout</td><td>5</td>" in html
        assert "rate_limited" in html

    def test_error_rate_column(self, sample_results):
        html = render_html_report(sample_results)
        assert 'data-i18n="errorRate"' in html
        assert "<td>98.00%</td>" in html
        assert "<td>2.00%</td>" in html
        assert "<td>5.00%</td>" in html

    def test_empty_results(self):
        html = render_html_report([])
        assert 'data-i18n="noDataAvailable"' in html
        assert 'data-i18n="noErrors"' in html
        assert "firstTokenChart" not in html

    def test_unsupported_locale(self, sample_results):
        with pytest.raises(UnsupportedLocaleError):
            render_html_report(sample_results, lang="fr")
        with pytest.raises(UnsupportedLocaleError):
            render_switcher_script("fr")

    def test_malformed_input(self):
        results = [BenchmarkResult(1, Metrics(qps=1.0))]
        with pytest.raises(MalformedInputError) as exc_info:
            render_html_report(results)
        assert exc_info.value.field == "metrics.tokens_per_second"


class TestConsoleTable:
    """Tests for the console comparison table."""

    def test_prints_all_levels(self, sample_results):
        console = Console(record=True, width=200)
        print_console_table(sample_results, console=console)
        output = console.export_text()

        assert "Concurrent Test Comparison" in output
        assert "70.20" in output
        assert "95/100" in output

    def test_no_results(self):
        console = Console(record=True, width=200)
        print_console_table([], console=console)
        assert "No test results available." in console.export_text()
