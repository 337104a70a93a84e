# sitemap_checker/report/json_report.py

"""
Генерация JSON-отчёта проверки URL.

Сериализация ResultSet и CheckSummary в файл.
"""
import json
from pathlib import Path

from sitemap_checker.aggregator import ResultSet
from sitemap_checker.report.summary import CheckSummary


def render_json(results: ResultSet, summary: CheckSummary, output_path: Path | str) -> Path:
    """
    Сохраняет результаты проверки в формате JSON по указанному пути.

    :param results: объект ResultSet с корзинами результатов
    :param summary: итоговая статистика запуска
    :param output_path: путь к JSON-файлу
    :return: Path сохранённого файла

    Пример:
    ```python
    from sitemap_checker.report.json_report import render_json
    report_path = render_json(results, summary, 'reports/check.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    data = {
        'summary': summary.to_dict(),
        'results': results.to_dict(),
    }

    with output.open('w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    return output
