# === FILE: sitesweep/cli.py ===
#!/usr/bin/env python3
"""
Точка входа SiteSweep через командную строку.

Команды:
  crawl URL   Глубокий обход: seed-страница и до max_pages подстраниц
  scan URL    Одностраничный аудит (HTTPS, Impressum, DSGVO, SEO)
  harvest URL Контент одной страницы (до 5 крупных изображений)
  serve       Запустить HTTP-сервер
  config      Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stdout, если не указан)
  --log-format FORMAT Формат логирования

Команда crawl опции:
  --json PATH         Сохранить JSON-отчёт в файл
  --html PATH         Сохранить HTML-отчёт в файл
  --template DIR      Папка с Jinja2-шаблоном (по умолчанию шаблон пакета)
  --pretty            Преформатировать JSON-вывод (отступ 2)

Пример:
  sitesweep crawl example.com --json reports/example.json --pretty
"""
import json
import sys
from pathlib import Path

import click

from sitesweep import __version__
from sitesweep.config import load_config
from sitesweep.engine import Engine
from sitesweep.errors import SiteSweepError
from sitesweep.logger import DEFAULT_FORMAT, configure
from sitesweep.report.html_report import render_html
from sitesweep.report.json_report import render_json
from sitesweep.server import run_server

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def echo_json(data, pretty: bool) -> None:
    click.echo(json.dumps(data, ensure_ascii=False, indent=2 if pretty else None))


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteSweep, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stdout, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд SiteSweep CLI."""
    configure(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить HTML-отчёт в файл'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Папка с Jinja2-шаблоном crawl_report.html.j2'
)
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.pass_context
def crawl(ctx, url, json_output, html_output, template_dir, pretty):
    """Обойти сайт и сгенерировать отчёт."""
    engine = Engine(ctx.obj['config'])
    try:
        report = engine.start_crawl(url)
    except SiteSweepError as e:
        print_error(f'Ошибка при обходе: {e}')
    except Exception as e:
        print_error(f'Непредвиденная ошибка при обходе: {e}')

    # Если не сохраняем в файл — печатаем в stdout
    if not json_output and not html_output:
        echo_json(report.to_dict(), pretty)
        return

    if json_output:
        try:
            saved_json = render_json(report, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved_json}')
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')

    if html_output:
        try:
            saved_html = render_html(report, html_output, template_dir)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Ошибка при сохранении HTML: {e}')


@cli.command('scan', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.pass_context
def scan(ctx, url, pretty):
    """Аудит одной страницы."""
    engine = Engine(ctx.obj['config'])
    try:
        result = engine.start_scan(url)
    except SiteSweepError as e:
        print_error(f'Ошибка при сканировании: {e}')
    except Exception as e:
        print_error(f'Непредвиденная ошибка при сканировании: {e}')
    echo_json(result.to_dict(), pretty)


@cli.command('harvest', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.pass_context
def harvest(ctx, url, pretty):
    """Контент одной страницы."""
    engine = Engine(ctx.obj['config'])
    try:
        page = engine.start_harvest(url)
    except SiteSweepError as e:
        print_error(f'Ошибка при загрузке страницы: {e}')
    except Exception as e:
        print_error(f'Непредвиденная ошибка при загрузке страницы: {e}')
    echo_json(page.to_dict(), pretty)


@cli.command('serve', context_settings=CONTEXT_SETTINGS)
@click.option('--host', default=None, help='Адрес для прослушивания (override server.host)')
@click.option('--port', '-p', type=int, default=None, help='Порт (override server.port / PORT)')
@click.pass_context
def serve(ctx, host, port):
    """Запустить HTTP-сервер."""
    run_server(ctx.obj['config'], host=host, port=port)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
