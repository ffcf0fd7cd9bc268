# === FILE: captcha_scout/cli.py ===
#!/usr/bin/env python3
"""
Точка входа CaptchaScout для командной строки.

Команды:
  scan URL  Обойти сайт, найти ключи CAPTCHA и вывести/сохранить отчёт
  config    Показать действующую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (по умолчанию configs/default.yaml, если есть)
  --limit INT         Бюджет страниц (override max_pages)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (только консоль, если не указан)
  --log-format FORMAT Формат логирования

Команда scan опции:
  --json PATH         Сохранить JSON-отчёт в файл
  --html PATH         Сохранить HTML-отчёт в файл
  --template DIR      Папка с Jinja2-шаблоном report.html.j2
  --pretty            Преформатировать JSON-вывод (отступ 2)
  --scan-timeout SEC  Таймаут всего обхода (секунд)

Пример:
  captcha-scout --limit 5 scan example.com --pretty
"""
import asyncio
import sys
from pathlib import Path

import click

from captcha_scout import __version__
from captcha_scout.config import load_config
from captcha_scout.engine import start_scan
from captcha_scout.logger import DEFAULT_FORMAT, configure
from captcha_scout.report.html_report import render_html
from captcha_scout.report.json_report import render_json
from captcha_scout.utils import ensure_scheme

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg="red", err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, "--version", "-v", message="CaptchaScout, version %(version)s")
@click.option(
    "--config", "-c", "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Путь к файлу конфигурации YAML/JSON.",
)
@click.option(
    "--limit", "-l", "limit",
    type=click.IntRange(min=1),
    default=None,
    help="Бюджет страниц (override max_pages)",
)
@click.option(
    "--log-level", "log_level",
    default="WARNING", show_default=True,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    help="Уровень логирования",
)
@click.option(
    "--log-file", "log_file",
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help="Путь к файлу логов (только консоль, если не указан)",
)
@click.option(
    "--log-format", "log_format",
    default=DEFAULT_FORMAT,
    show_default=True,
    help="Строка формата для логов",
)
@click.pass_context
def cli(ctx, config_path, limit, log_level, log_file, log_format):
    """Группа команд CaptchaScout CLI."""
    configure(level=log_level, log_file=log_file, log_format=log_format)
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f"Ошибка загрузки конфигурации: {e}")
    if limit is not None:
        cfg = cfg.model_copy(update={"max_pages": limit})
    ctx.ensure_object(dict)
    ctx.obj["config"] = cfg


@cli.command("scan", context_settings=CONTEXT_SETTINGS)
@click.argument("url")
@click.option(
    "--json", "-j", "json_output",
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help="Сохранить JSON-отчёт в файл",
)
@click.option(
    "--html", "-h", "html_output",
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help="Сохранить HTML-отчёт в файл",
)
@click.option(
    "--template", "-t", "template_dir",
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Папка с Jinja2-шаблоном (по умолчанию встроенный)",
)
@click.option("--pretty", is_flag=True, help="Преформатировать JSON-вывод (отступ 2)")
@click.option(
    "--scan-timeout", "scan_timeout",
    type=float,
    default=None,
    help="Таймаут всего обхода (секунд)",
)
@click.pass_context
def scan(ctx, url, json_output, html_output, template_dir, pretty, scan_timeout):
    """Обойти сайт URL и сгенерировать отчёты."""
    cfg = ctx.obj["config"]
    seed = ensure_scheme(url)
    try:
        if scan_timeout:
            result = asyncio.run(asyncio.wait_for(start_scan(seed, cfg), timeout=scan_timeout))
        else:
            result = asyncio.run(start_scan(seed, cfg))
    except asyncio.TimeoutError:
        print_error(f"Обход не завершён за {scan_timeout} секунд")
    except Exception as e:
        print_error(f"Ошибка при обходе: {e}")

    # Без файлов отчёта печатаем JSON в stdout
    if not json_output and not html_output:
        click.echo(result.json(pretty=pretty))

    if json_output:
        try:
            saved_json = render_json(result, json_output, pretty=True)
            click.echo(f"JSON report: {saved_json}", err=True)
        except Exception as e:
            print_error(f"Ошибка при сохранении JSON: {e}")

    if html_output:
        try:
            saved_html = render_html(result, template_dir, html_output, seed_url=seed)
            click.echo(f"HTML report: {saved_html}", err=True)
        except Exception as e:
            print_error(f"Ошибка при сохранении HTML: {e}")

    if result.error:
        print_error(result.error)


@cli.command("config", context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj["config"]
    click.echo(cfg.model_dump_json(indent=2))


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
