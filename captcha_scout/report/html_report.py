"""captcha_scout.report.html_report: Генерация HTML-отчёта с помощью Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from captcha_scout.aggregator import ScanResult

TEMPLATE_NAME = "report.html.j2"
BUNDLED_TEMPLATES = Path(__file__).resolve().parent.parent / "templates"


def render_html(
    result: ScanResult,
    template_dir: Optional[Union[Path, str]],
    output_path: Union[Path, str],
    *,
    seed_url: str = "",
) -> Path:
    """Рендерит HTML-отчёт из шаблона и сохраняет его по указанному пути.

    Args:
        result: объект ScanResult.
        template_dir: директория с шаблоном ``report.html.j2``;
            ``None`` означает встроенный шаблон пакета.
        output_path: путь к итоговому HTML-файлу.
        seed_url: стартовый адрес для заголовка отчёта.

    Returns:
        Path до сохранённого HTML-файла.
    """
    template_dir = Path(template_dir) if template_dir else BUNDLED_TEMPLATES
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    template = env.get_template(TEMPLATE_NAME)

    context: dict[str, Any] = {
        "seed_url": seed_url,
        "captchas": [c.to_dict() for c in result.captchas],
        "error": result.error,
        "visited": result.visited,
    }

    output_path.write_text(template.render(**context), encoding="utf-8")
    return output_path
