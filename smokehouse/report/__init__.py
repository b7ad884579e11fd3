"""Report formatting for audit results."""

from smokehouse.report.generator import (
    generate_report,
    generate_report_csv,
    generate_report_html,
)

__all__ = ["generate_report", "generate_report_csv", "generate_report_html"]
