"""Serialize an audit result into HTML, CSV or JSON reports."""

import json
from collections.abc import Mapping, Sequence
from importlib.resources import files
from typing import Any, overload

from smokehouse.report.models import AuditResult

CSV_HEADER = ("category", "name", "title", "type", "score")
CSV_SEPARATOR = ","
CRLF = "\r\n"


def get_asset(name: str) -> str:
    """Read one of the HTML report assets shipped with the package."""
    return (files("smokehouse.report") / "assets" / name).read_text(encoding="utf-8")


def replace_strings(source: str, replacements: Sequence[tuple[str, str]]) -> str:
    """Replace every search string without re-scanning inserted replacements."""
    if not replacements:
        return source

    (search, replacement), *rest = replacements
    return replacement.join(
        replace_strings(part, rest) for part in source.split(search)
    )


def generate_report_html(lhr: Mapping[str, Any]) -> str:
    """Return the report HTML with the result JSON and renderer inlined."""
    sanitized_json = (
        json.dumps(lhr, ensure_ascii=False, separators=(",", ":"))
        .replace("<", "\\u003c")  # no closing </script> inside the JSON
        .replace("\u2028", "\\u2028")
        .replace("\u2029", "\\u2029")
    )
    sanitized_javascript = get_asset("report.js").replace("</", "\\u003c/")

    return replace_strings(
        get_asset("report-template.html"),
        [
            ("%%REPORT_JSON%%", sanitized_json),
            ("%%REPORT_JAVASCRIPT%%", sanitized_javascript),
            ("/*%%REPORT_CSS%%*/", get_asset("report.css")),
        ],
    )


def generate_report_csv(lhr: Mapping[str, Any]) -> str:
    """Convert the result to CSV (RFC 4180), one row per audit.

    Each row holds the category title, audit id, audit title, score display
    mode and score. Every field is quoted; null scores become -1 so the score
    column stays numeric.
    """
    result = AuditResult.model_validate(lhr)

    rows: list[Sequence[str]] = [CSV_HEADER]
    for category in result.categories.values():
        for ref in category.audit_refs:
            audit = result.audits.get(ref.id)
            if audit is None:
                raise ValueError(
                    f"Audit {ref.id!r} referenced by {category.title!r} not found"
                )
            score = -1 if audit.score is None else audit.score
            rows.append(
                [
                    _escape(category.title),
                    _escape(audit.id),
                    _escape(audit.title),
                    _escape(audit.score_display_mode),
                    _escape(_format_number(score)),
                ]
            )

    return CRLF.join(CSV_SEPARATOR.join(row) for row in rows)


@overload
def generate_report(lhr: Mapping[str, Any], output_modes: str) -> str: ...


@overload
def generate_report(
    lhr: Mapping[str, Any], output_modes: Sequence[str]
) -> list[str]: ...


def generate_report(
    lhr: Mapping[str, Any], output_modes: str | Sequence[str]
) -> str | list[str]:
    """Create reports in the requested formats.

    A single mode returns one document; a sequence of modes returns one
    document per mode, in the requested order.

    Raises:
        ValueError: For an unknown output mode

    """
    if isinstance(output_modes, str):
        return _generate_one(lhr, output_modes)
    return [_generate_one(lhr, mode) for mode in output_modes]


def _generate_one(lhr: Mapping[str, Any], output_mode: str) -> str:
    match output_mode:
        case "html":
            return generate_report_html(lhr)
        case "csv":
            return generate_report_csv(lhr)
        case "json":
            return json.dumps(lhr, indent=2, ensure_ascii=False)
        case _:
            raise ValueError(f"Invalid output mode: {output_mode}")


def _escape(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))
