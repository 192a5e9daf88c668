"""Tests for the command line interface."""

import json
from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

from main import cli


def write_results(directory, results):
    path = Path(directory, "results.json")
    path.write_text(json.dumps({"test_results": [r.to_dict() for r in results]}))
    return path


class TestReportCommand:
    """Tests for report generation."""

    def test_writes_every_requested_format(self, sample_results):
        runner = CliRunner()
        with runner.isolated_filesystem() as fs:
            results_file = write_results(fs, sample_results)
            result = runner.invoke(cli, [
                'report', str(results_file),
                '-o', str(Path(fs, 'out', 'report')),
                '-f', 'html', '-f', 'csv',
            ])
            assert result.exit_code == 0, result.output
            assert Path(fs, 'out', 'report.html').exists()
            assert Path(fs, 'out', 'report.csv').exists()
            assert not Path(fs, 'out', 'report.json').exists()

    def test_chinese_report(self, sample_results):
        runner = CliRunner()
        with runner.isolated_filesystem() as fs:
            results_file = write_results(fs, sample_results)
            result = runner.invoke(cli, [
                'report', str(results_file), '-o', str(Path(fs, 'report')), '--lang', 'zh',
            ])
            assert result.exit_code == 0, result.output
            html = Path(fs, 'report.html').read_text(encoding='utf-8')
            assert 'switchLanguage("zh");' in html

    def test_malformed_input(self):
        runner = CliRunner()
        with runner.isolated_filesystem() as fs:
            path = Path(fs, 'results.json')
            path.write_text(json.dumps([{"concurrency": 1, "metrics": {"tokens_per_second": 10.0}}]))
            result = runner.invoke(cli, ['report', str(path), '-o', str(Path(fs, 'report'))])
            assert result.exit_code == 1
            assert "metrics.qps" in result.output
            assert not Path(fs, 'report.html').exists()

    def test_record_not_an_object(self):
        runner = CliRunner()
        with runner.isolated_filesystem() as fs:
            path = Path(fs, 'results.json')
            path.write_text(json.dumps([1, 2]))
            result = runner.invoke(cli, ['report', str(path), '-o', str(Path(fs, 'report'))])
            assert result.exit_code == 1
            assert not isinstance(result.exception, AttributeError)
            assert "Result #0" in result.output

    def test_metrics_not_an_object(self):
        runner = CliRunner()
        with runner.isolated_filesystem() as fs:
            path = Path(fs, 'results.json')
            path.write_text(json.dumps([{"concurrency": 1, "metrics": [1]}]))
            result = runner.invoke(cli, ['table', str(path)])
            assert result.exit_code == 1
            assert "'metrics'" in result.output

    def test_unsupported_language(self, sample_results):
        runner = CliRunner()
        with runner.isolated_filesystem() as fs:
            results_file = write_results(fs, sample_results)
            result = runner.invoke(cli, ['report', str(results_file), '--lang', 'xx'])
            assert result.exit_code != 0
            assert "Invalid value" in result.output

    def test_unsupported_format(self, sample_results):
        runner = CliRunner()
        with runner.isolated_filesystem() as fs:
            results_file = write_results(fs, sample_results)
            result = runner.invoke(cli, ['report', str(results_file), '-f', 'xml'])
            assert result.exit_code != 0

    def test_missing_results_path(self):
        runner = CliRunner()
        result = runner.invoke(cli, ['report', '/nonexistent/results.json'])
        assert result.exit_code != 0
        assert "does not exist" in result.output


class TestAnalysisCommands:
    """Tests for table and recommend."""

    def test_table(self, sample_results):
        runner = CliRunner()
        with runner.isolated_filesystem() as fs:
            results_file = write_results(fs, sample_results)
            result = runner.invoke(cli, ['table', str(results_file)])
            assert result.exit_code == 0, result.output
            assert "Concurrent Test Comparison" in result.output

    def test_recommend(self, sample_results):
        runner = CliRunner()
        with runner.isolated_filesystem() as fs:
            results_file = write_results(fs, sample_results)
            result = runner.invoke(cli, ['recommend', str(results_file)])
            assert result.exit_code == 0, result.output
            assert "Recommended concurrency: 8" in result.output
            assert "QPS bottleneck" in result.output
            assert "Lowest First Token Latency: 20 ms (concurrency 1)" in result.output
            assert "Highest Success Rate: 100.00% (concurrency 4)" in result.output

    def test_recommend_empty(self):
        runner = CliRunner()
        with runner.isolated_filesystem() as fs:
            path = Path(fs, 'results.json')
            path.write_text(json.dumps({"test_results": []}))
            result = runner.invoke(cli, ['recommend', str(path)])
            assert result.exit_code == 0
            assert "No test results available." in result.output


class TestWebuiCommand:
    """Tests for the web UI launcher."""

    @patch("webui.app.run_app")
    def test_passes_options(self, mock_run_app, sample_results):
        runner = CliRunner()
        with runner.isolated_filesystem() as fs:
            results_file = write_results(fs, sample_results)
            result = runner.invoke(cli, ['webui', str(results_file), '--port', '9000'])
            assert result.exit_code == 0, result.output
            mock_run_app.assert_called_once_with(str(results_file), host="0.0.0.0", port=9000, debug=False,
                                                 results=sample_results)

    @patch("webui.app.run_app")
    def test_malformed_results_exit_before_launch(self, mock_run_app):
        runner = CliRunner()
        with runner.isolated_filesystem() as fs:
            path = Path(fs, 'results.json')
            path.write_text(json.dumps([{"concurrency": 1, "metrics": [1]}]))
            result = runner.invoke(cli, ['webui', str(path)])
            assert result.exit_code == 1
            assert "Error" in result.output
            mock_run_app.assert_not_called()

    @patch("webui.app.run_app")
    def test_invalid_json_exits_before_launch(self, mock_run_app):
        runner = CliRunner()
        with runner.isolated_filesystem() as fs:
            path = Path(fs, 'results.json')
            path.write_text("{not json")
            result = runner.invoke(cli, ['webui', str(path)])
            assert result.exit_code == 1
            assert "failed to read" in result.output
            mock_run_app.assert_not_called()
