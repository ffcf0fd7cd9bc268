# captcha_scout/report/json_report.py

"""
Генерация JSON-отчёта для проекта CaptchaScout.

Сериализация объекта ScanResult в файл.
"""
import json
from pathlib import Path

from captcha_scout.aggregator import ScanResult


def render_json(result: ScanResult, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Сохраняет результат обхода в формате JSON по указанному пути.

    :param result: объект ScanResult
    :param output_path: путь к JSON-файлу
    :param pretty: отступ 2 пробела (иначе одна строка)
    :return: Path сохранённого файла
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    # Запись в файл с Unicode
    with output.open("w", encoding="utf-8") as f:
        json.dump(result.to_dict(), f, ensure_ascii=False, indent=2 if pretty else None)

    return output
