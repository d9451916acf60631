"""Tests for the kingraph command line."""
from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from conftest import FIXTURES, read_fixture
from kingraph.cli import app
from kingraph.extraction import extract_individual
from kingraph.models import record_to_json

runner = CliRunner()


@pytest.fixture()
def record_file(tmp_path: Path) -> Path:
    path = tmp_path / "record.json"
    record = extract_individual(read_fixture("table.html"))
    path.write_text(json.dumps(record_to_json(record)), encoding="utf-8")
    return path


@pytest.fixture()
def pool_file(tmp_path: Path) -> Path:
    path = tmp_path / "pool.json"
    pool = {
        "individuals": [
            {
                "id": "i1",
                "name": "John Carter",
                "profile": {"givenNames": ["John"], "surname": "Carter", "birth": {"year": 1901}},
            },
            {"id": "i2", "name": "Mary Smith"},
        ],
        "records": [],
    }
    path.write_text(json.dumps(pool), encoding="utf-8")
    return path


class TestExtractCommand:
    """Tests for `kingraph extract`."""

    def test_extract_from_file(self):
        """Test extracting a record from an HTML file."""
        result = runner.invoke(app, ["extract", "--input", str(FIXTURES / "table.html")])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["givenNames"] == ["John"]
        assert payload["surname"] == "Carter"
        assert payload["parents"] == {"father": "William Carter", "mother": "Sarah Miller"}
        assert payload["sourceHtml"] == read_fixture("table.html")

    def test_extract_from_stdin(self):
        """Test extracting a record from stdin."""
        result = runner.invoke(app, ["extract"], input=read_fixture("narrative.html"))

        assert result.exit_code == 0
        assert json.loads(result.stdout)["death"] == {"year": 1975}

    def test_with_confidence(self):
        """Test wrapping output with confidence scores."""
        result = runner.invoke(
            app, ["extract", "-i", str(FIXTURES / "narrative.html"), "--with-confidence"]
        )

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["record"]["surname"] == "Carter"
        assert payload["confidence"]["surname"] == 0.9

    def test_source_url_option(self):
        """Test that the source URL option is recorded."""
        result = runner.invoke(
            app,
            ["extract", "--source-url", "https://example.org/p/1"],
            input="<p>Surname: Carter</p>",
        )

        assert result.exit_code == 0
        assert json.loads(result.stdout)["sourceUrl"] == "https://example.org/p/1"

    def test_config_option(self, tmp_path):
        """Test loading extra labels from a config file."""
        config = tmp_path / "kingraph.yaml"
        config.write_text("label_synonyms:\n  birth: [geboren]\n", encoding="utf-8")

        result = runner.invoke(app, ["extract", "-c", str(config)], input="<p>Geboren: 1850</p>")

        assert result.exit_code == 0
        assert json.loads(result.stdout)["birth"]["year"] == 1850

    def test_bad_config(self, tmp_path):
        """Test that an unreadable config exits with code 2."""
        result = runner.invoke(
            app, ["extract", "-c", str(tmp_path / "missing.yaml")], input="<p>x</p>"
        )

        assert result.exit_code == 2
        assert "Cannot read configuration" in result.output

    def test_empty_input(self):
        """Test that empty input is rejected."""
        result = runner.invoke(app, ["extract"], input="   \n")

        assert result.exit_code == 1
        assert "No HTML input provided on stdin." in result.output


class TestMatchCommand:
    """Tests for `kingraph match`."""

    def test_json_output(self, record_file, pool_file):
        """Test match output as JSON."""
        result = runner.invoke(app, ["match", str(record_file), str(pool_file), "--json"])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["decision"] == "auto_link"
        assert [c["individualId"] for c in payload["candidates"]] == ["i1", "i2"]
        assert payload["candidates"][0]["score"] == 1.0

    def test_table_output(self, record_file, pool_file):
        """Test match output as a table."""
        result = runner.invoke(app, ["match", str(record_file), str(pool_file)])

        assert result.exit_code == 0
        assert "i1" in result.output
        assert "auto_link" in result.output

    def test_accepts_confidence_wrapper(self, tmp_path, pool_file):
        """Test that a confidence-wrapped record is accepted."""
        record = extract_individual(read_fixture("table.html"))
        wrapped = tmp_path / "wrapped.json"
        wrapped.write_text(
            json.dumps({"record": record_to_json(record), "confidence": {}}), encoding="utf-8"
        )

        result = runner.invoke(app, ["match", str(wrapped), str(pool_file), "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["decision"] == "auto_link"

    def test_invalid_record(self, tmp_path, pool_file):
        """Test that an invalid record lists its issues."""
        bad = tmp_path / "bad.json"
        bad.write_text(json.dumps({"sourceHtml": "<p></p>", "sex": "X"}), encoding="utf-8")

        result = runner.invoke(app, ["match", str(bad), str(pool_file)])

        assert result.exit_code == 1
        assert "Extraction result failed validation:" in result.output
        assert " - sex:" in result.output

    def test_invalid_pool(self, record_file, tmp_path):
        """Test that an invalid pool is rejected."""
        pool = tmp_path / "pool.json"
        pool.write_text(json.dumps({"individuals": [{"name": "no id"}]}), encoding="utf-8")

        result = runner.invoke(app, ["match", str(record_file), str(pool)])

        assert result.exit_code == 1
        assert "Invalid individual pool" in result.output


class TestHighlightCommand:
    """Tests for `kingraph highlight`."""

    def test_prints_marked_html(self, record_file):
        """Test printing highlighted HTML."""
        result = runner.invoke(app, ["highlight", str(record_file)])

        assert result.exit_code == 0
        assert '<mark data-field="parents.father">William Carter</mark>' in result.stdout

    def test_writes_output_file(self, record_file, tmp_path):
        """Test writing highlighted HTML to a file."""
        output = tmp_path / "highlighted.html"
        result = runner.invoke(app, ["highlight", str(record_file), "-o", str(output)])

        assert result.exit_code == 0
        assert "<mark" in output.read_text(encoding="utf-8")
