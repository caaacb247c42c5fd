"""site_clipper.report: Сохранение результатов обхода (JSON), используется CLI и тестами."""

from site_clipper.report.json_report import render_json

__all__ = ["render_json"]
