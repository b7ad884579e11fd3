"""Tests for report generation."""

import json
from typing import Any

import pytest

from smokehouse.report import (
    generate_report,
    generate_report_csv,
    generate_report_html,
)
from smokehouse.report.generator import replace_strings


@pytest.fixture
def lhr() -> dict[str, Any]:
    """Minimal audit result with two categories."""
    return {
        "finalUrl": "http://localhost:10200/index.html",
        "categories": {
            "performance": {
                "title": "Performance",
                "auditRefs": [{"id": "first-contentful-paint", "weight": 3}],
            },
            "best-practices": {
                "title": "Best Practices",
                "auditRefs": [{"id": "quotes"}, {"id": "doctype"}],
            },
        },
        "audits": {
            "first-contentful-paint": {
                "id": "first-contentful-paint",
                "title": "First Contentful Paint",
                "score": 0.5,
                "scoreDisplayMode": "numeric",
            },
            "quotes": {
                "id": "quotes",
                "title": 'He said "hi"',
                "score": None,
                "scoreDisplayMode": "informative",
            },
            "doctype": {
                "id": "doctype",
                "title": "Page has the HTML doctype",
                "score": 1,
                "scoreDisplayMode": "binary",
            },
        },
    }


class TestCsv:
    """Tests for the CSV report."""

    def test_header_and_rows(self, lhr: dict[str, Any]) -> None:
        """One row per audit reference, in category order."""
        lines = generate_report_csv(lhr).split("\r\n")

        assert lines == [
            "category,name,title,type,score",
            '"Performance","first-contentful-paint","First Contentful Paint",'
            '"numeric","0.5"',
            '"Best Practices","quotes","He said ""hi""","informative","-1"',
            '"Best Practices","doctype","Page has the HTML doctype","binary","1"',
        ]

    def test_escapes_quotes_and_null_score(self, lhr: dict[str, Any]) -> None:
        """Quotes are doubled and a null score becomes -1."""
        csv = generate_report_csv(lhr)

        assert '"He said ""hi"""' in csv
        assert '"-1"' in csv

    def test_missing_audit(self, lhr: dict[str, Any]) -> None:
        """Referencing an unknown audit is an error."""
        del lhr["audits"]["doctype"]

        with pytest.raises(ValueError, match="doctype"):
            generate_report_csv(lhr)


class TestHtml:
    """Tests for the HTML report."""

    def test_embeds_escaped_json(self, lhr: dict[str, Any]) -> None:
        """Embedded JSON cannot close the script tag early."""
        lhr["audits"]["doctype"]["title"] = "</script><script>alert(1)</script>"

        html = generate_report_html(lhr)

        assert "</script><script>alert(1)" not in html
        assert "\\u003c/script>\\u003cscript>alert(1)" in html

    def test_escapes_line_separators(self, lhr: dict[str, Any]) -> None:
        """U+2028 and U+2029 are escaped in the embedded JSON."""
        lhr["audits"]["doctype"]["title"] = "a\u2028b\u2029c"

        html = generate_report_html(lhr)

        assert "\u2028" not in html
        assert "\u2029" not in html
        assert "a\\u2028b\\u2029c" in html

    def test_inlines_assets(self, lhr: dict[str, Any]) -> None:
        """Template placeholders are all replaced."""
        html = generate_report_html(lhr)

        assert html.startswith("<!doctype html>")
        assert "%%REPORT_" not in html
        assert "renderReport" in html
        assert ".category" in html
        assert '"finalUrl":"http://localhost:10200/index.html"' in html


class TestGenerateReport:
    """Tests for generate_report dispatch."""

    def test_json(self, lhr: dict[str, Any]) -> None:
        """JSON output is pretty-printed."""
        report = generate_report(lhr, "json")

        assert json.loads(report) == lhr
        assert report.startswith('{\n  "finalUrl"')

    def test_single_mode_returns_string(self, lhr: dict[str, Any]) -> None:
        """A single mode gives a single document."""
        assert isinstance(generate_report(lhr, "csv"), str)

    def test_multiple_modes_in_order(self, lhr: dict[str, Any]) -> None:
        """A list of modes gives one document per mode, in order."""
        reports = generate_report(lhr, ["csv", "json", "html"])

        assert len(reports) == 3
        assert reports[0].startswith("category,name")
        assert reports[1].startswith("{")
        assert reports[2].startswith("<!doctype html>")

    def test_invalid_mode(self, lhr: dict[str, Any]) -> None:
        """Unknown modes are rejected."""
        with pytest.raises(ValueError, match="Invalid output mode: pdf"):
            generate_report(lhr, "pdf")


def test_replace_strings_is_not_serial() -> None:
    """Inserted replacements are not themselves searched."""
    result = replace_strings("A-B", [("A", "B"), ("B", "C")])

    assert result == "B-C"
