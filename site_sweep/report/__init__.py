"""site_sweep.report: writers for crawl results."""

from site_sweep.report.json_report import as_sorted_list, render_json

__all__ = ["render_json", "as_sorted_list"]
