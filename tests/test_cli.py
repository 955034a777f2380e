import json
from pathlib import Path
from unittest.mock import patch, MagicMock

from click.testing import CliRunner

from openapi_scorer.cli import main

FIXTURES = Path(__file__).parent / "fixtures"


class TestCliScore:
    def test_score_petstore(self):
        runner = CliRunner()
        result = runner.invoke(main, ["score", str(FIXTURES / "petstore.yaml")])

        assert result.exit_code == 0
        assert "Overall Score: 100/100 (A)" in result.output
        assert "Total Issues: 0" in result.output

    def test_score_writes_report(self, tmp_path):
        output_file = tmp_path / "report.json"
        runner = CliRunner()
        result = runner.invoke(main, [
            "score", str(FIXTURES / "minimal.yaml"),
            "-o", str(output_file),
        ])

        assert result.exit_code == 0
        assert output_file.exists()
        data = json.loads(output_file.read_text(encoding="utf-8"))
        assert data["grade"] == "C"
        assert f"Report saved to: {output_file}" in result.output

    def test_score_markdown_to_stdout(self):
        runner = CliRunner()
        result = runner.invoke(main, ["score", str(FIXTURES / "minimal.yaml"), "-f", "markdown"])

        assert result.exit_code == 0
        assert "# OpenAPI Specification Scoring Report" in result.output

    def test_score_verbose_lists_issues(self):
        runner = CliRunner()
        result = runner.invoke(main, ["score", str(FIXTURES / "minimal.yaml"), "--verbose", "--no-color"])

        assert result.exit_code == 0
        assert "Detailed Issues:" in result.output
        assert "Location: /users → GET → responses" in result.output
        assert '"overallScore": 79' in result.output

    def test_score_with_custom_weights(self):
        runner = CliRunner()
        result = runner.invoke(main, [
            "score", str(FIXTURES / "petstore.yaml"),
            "--config", str(FIXTURES / "weights.yaml"),
        ])

        assert result.exit_code == 0
        assert "Overall Score: 100/100 (A)" in result.output

    def test_score_bad_config(self, tmp_path):
        config = tmp_path / "bad.yaml"
        config.write_text("weights:\n  security: lots\n")
        runner = CliRunner()
        result = runner.invoke(main, ["score", str(FIXTURES / "petstore.yaml"), "--config", str(config)])

        assert result.exit_code == 1
        assert "Invalid config" in result.output

    def test_score_invalid_document_fails(self):
        runner = CliRunner()
        result = runner.invoke(main, ["score", str(FIXTURES / "invalid.yaml")])

        assert result.exit_code == 1
        assert "Validation failed" in result.output
        assert "must start with a forward slash" in result.output

    def test_score_missing_file(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, ["score", str(tmp_path / "nope.yaml")])

        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_score_rejects_unknown_format(self):
        runner = CliRunner()
        result = runner.invoke(main, ["score", str(FIXTURES / "petstore.yaml"), "-f", "pdf"])

        assert result.exit_code == 2

    @patch("openapi_scorer.parser.loader.requests.get")
    def test_score_from_url(self, mock_get):
        mock_response = MagicMock()
        mock_response.text = (FIXTURES / "petstore.yaml").read_text(encoding="utf-8")
        mock_response.content = mock_response.text.encode()
        mock_response.headers = {}
        mock_get.return_value = mock_response

        runner = CliRunner()
        result = runner.invoke(main, ["score", "https://example.com/petstore.yaml"])

        assert result.exit_code == 0
        assert "Swagger Petstore" in result.output
        mock_get.assert_called_once()

    def test_score_dated_version(self, tmp_path):
        doc = tmp_path / "dated.yaml"
        doc.write_text("openapi: 3.0.3\ninfo:\n  title: Dated\n  version: 2024-01-15\npaths: {}\n")
        runner = CliRunner()
        result = runner.invoke(main, ["score", str(doc)])

        assert result.exit_code == 0, result.output
        assert "API: Dated v2024-01-15" in result.output


class TestCliValidate:
    def test_validate_valid(self):
        runner = CliRunner()
        result = runner.invoke(main, ["validate", str(FIXTURES / "petstore.yaml")])

        assert result.exit_code == 0
        assert "OpenAPI specification is valid" in result.output

    def test_validate_invalid(self):
        runner = CliRunner()
        result = runner.invoke(main, ["validate", str(FIXTURES / "invalid.yaml")])

        assert result.exit_code == 1
        assert "OpenAPI specification is invalid" in result.output
        assert "Only 3.x is supported" in result.output

    def test_validate_empty_paths_warns(self, tmp_path):
        doc = tmp_path / "empty.yaml"
        doc.write_text("openapi: 3.0.0\ninfo:\n  title: T\n  version: 0.1.0\npaths: {}\n")
        runner = CliRunner()
        result = runner.invoke(main, ["validate", str(doc)])

        assert result.exit_code == 0
        assert "No paths defined in the specification" in result.output


class TestCliInfo:
    def test_info_petstore(self):
        runner = CliRunner()
        result = runner.invoke(main, ["info", str(FIXTURES / "petstore.yaml")])

        assert result.exit_code == 0
        assert "Title: Swagger Petstore" in result.output
        assert "OpenAPI Version: 3.0.3" in result.output
        assert "1. https://petstore.example.com/v2 - Production" in result.output
        assert "Paths: 2" in result.output
        assert "Operations: 4" in result.output
        assert "Tags: pets" in result.output
        assert "  - Schemas: 3" in result.output
        assert "  - Security Schemes: 1" in result.output

    def test_info_json_document(self):
        runner = CliRunner()
        result = runner.invoke(main, ["info", str(FIXTURES / "petstore.json")])

        assert result.exit_code == 0
        assert "Title: Tiny" in result.output
        assert "Components:" not in result.output
