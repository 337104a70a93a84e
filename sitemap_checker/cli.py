# === FILE: sitemap_checker/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для проверки доступности URL через командную строку.

Команды:
  check     Проверить URL из списка или sitemap.xml и вывести отчёт
  parse     Разобрать входной файл и показать первые записи
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/checker.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stdout, если не указан)
  --log-format FORMAT Формат логирования

Команда check опции:
  --input, -i PATH    Текстовый список URL (URL DATE FREQ [PRIORITY])
  --sitemap, -s PATH  sitemap.xml, берутся только <loc>
  --format, -f NAME   auto | standard | csv | pipe (для --input)
  --concurrent INT    Макс. число одновременных проверок
  --timeout MS        Таймаут одной попытки (мс)
  --max-retries INT   Повторы для таймаутов и обрывов соединения
  --user-agent STR    Заголовок User-Agent
  --strategy NAME     batch | pool
  --json PATH         Сохранить JSON-отчёт в файл
  --html PATH         Сохранить HTML-отчёт в файл
  --quiet             Без построчного прогресса

Код выхода check: 0 — проверка успешна, 1 — есть ошибки, слишком много
таймаутов или входные данные не удалось прочитать.

Пример:
  sitemap-checker check -i data/urls.txt --concurrent 20 --json reports/check.json
"""
import asyncio
import sys
from pathlib import Path

import click

from sitemap_checker import __version__
from sitemap_checker.checker.observer import CheckObserver, ConsoleObserver
from sitemap_checker.config import apply_overrides, load_config
from sitemap_checker.engine import InputError, load_records, start_check
from sitemap_checker.logger import init_logging
from sitemap_checker.parser.line_parser import FORMATS
from sitemap_checker.report.html_report import render_html
from sitemap_checker.report.json_report import render_json
from sitemap_checker.report.summary import render_text

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _input_options(f):
    f = click.option(
        '--format', '-f', 'fmt',
        default='auto', show_default=True,
        type=click.Choice(FORMATS),
        help='Формат строк списка URL (auto перебирает все)'
    )(f)
    f = click.option(
        '--sitemap', '-s', 'sitemap_path',
        default=None,
        type=click.Path(dir_okay=False, path_type=Path),
        help='sitemap.xml для проверки (только <loc>)'
    )(f)
    f = click.option(
        '--input', '-i', 'input_path',
        default=None,
        type=click.Path(dir_okay=False, path_type=Path),
        help='Текстовый файл со списком URL'
    )(f)
    return f


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SitemapChecker, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='WARNING', show_default=True,
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
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Проверка доступности URL из списков и sitemap.xml."""
    init_logging(
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


@cli.command('check', context_settings=CONTEXT_SETTINGS)
@_input_options
@click.option('--concurrent', type=click.IntRange(min=1), default=None,
              help='Макс. число одновременных проверок')
@click.option('--timeout', type=click.IntRange(min=1), default=None,
              help='Таймаут одной попытки, мс')
@click.option('--max-retries', 'max_retries', type=click.IntRange(min=0), default=None,
              help='Число повторов для временных сбоев')
@click.option('--user-agent', 'user_agent', default=None, help='Заголовок User-Agent')
@click.option('--strategy', type=click.Choice(['batch', 'pool']), default=None,
              help='batch — группы с барьером, pool — непрерывный пул')
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
@click.option('--quiet', '-q', is_flag=True, help='Не выводить прогресс по каждому URL')
@click.pass_context
def check(ctx, input_path, sitemap_path, fmt, concurrent, timeout, max_retries, user_agent,
          strategy, json_output, html_output, quiet):
    """Проверить URL и вывести отчёт. Код выхода зависит от вердикта."""
    try:
        cfg = apply_overrides(ctx.obj['config'], {
            'concurrent': concurrent,
            'timeout': timeout,
            'max_retries': max_retries,
            'user_agent': user_agent,
            'strategy': strategy,
        })
    except ValueError as e:
        print_error(f'Некорректные параметры: {e}')

    if input_path is None and sitemap_path is None:
        input_path = Path('data/urls.txt')
    try:
        records = load_records(input_path, sitemap_path, fmt)
    except InputError as e:
        print_error(f'Ошибка входных данных: {e}')

    observer = CheckObserver() if quiet else ConsoleObserver()
    try:
        run = asyncio.run(start_check(cfg, records, observer=observer))
    except Exception as e:
        print_error(f'Ошибка при проверке: {e}')

    click.echo(render_text(run.results, run.summary, color=not quiet))

    if json_output:
        try:
            saved_json = render_json(run.results, run.summary, json_output)
            click.echo(f'JSON report: {saved_json}')
        except Exception as e:
            print_error(f'Ошибка при сохранении JSON: {e}')

    if html_output:
        try:
            saved_html = render_html(run.results, run.summary, html_output)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Ошибка при сохранении HTML: {e}')

    ctx.exit(run.exit_code)


@cli.command('parse', context_settings=CONTEXT_SETTINGS)
@_input_options
@click.option('--limit', '-l', type=click.IntRange(min=1), default=10, show_default=True,
              help='Сколько записей показать')
def parse(input_path, sitemap_path, fmt, limit):
    """Разобрать входной файл и показать первые записи без проверки."""
    if input_path is None and sitemap_path is None:
        input_path = Path('data/urls.txt')
    try:
        records = load_records(input_path, sitemap_path, fmt)
    except InputError as e:
        print_error(f'Ошибка входных данных: {e}')

    shown = records[:limit]
    click.secho(f'Parsed URLs ({len(shown)}/{len(records)}):', fg='cyan')
    for index, record in enumerate(shown, start=1):
        click.echo(f'{index}. {record.url}')
        if record.lastmod or record.changefreq or record.priority is not None:
            click.echo(f'   {record.lastmod} | {record.changefreq} | {record.priority}')
        if record.source:
            click.echo(f'   line {record.source.line} ({record.source.format})')
    if len(records) > limit:
        click.secho(f'... and {len(records) - limit} more URLs', fg='yellow')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
