# site_clipper/report/json_report.py

"""
Генерация JSON-отчёта для проекта SiteClipper.

Сериализация объекта CrawlResult в файл.
"""
import json
from pathlib import Path

from site_clipper.crawler.models import CrawlResult


def render_json(result: CrawlResult, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Сохраняет результат обхода result в формате JSON по указанному пути.

    :param result: объект CrawlResult с данными обхода
    :param output_path: путь к JSON-файлу
    :param pretty: форматировать с отступом 2
    :return: Path сохранённого файла

    Пример:
    ```python
    from site_clipper.report.json_report import render_json
    report_path = render_json(result, 'reports/crawl.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(result.to_dict(), f, ensure_ascii=False, indent=2 if pretty else None)

    return output
