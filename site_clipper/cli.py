#!/usr/bin/env python3
"""
Точка входа для запуска SiteClipper через командную строку.

Команды:
  crawl URL   Рекурсивно обойти сайт и вывести/сохранить результат
  clip URL    Извлечь основной текст одной страницы
  config      Показать текущие настройки обхода

Общие опции:
  --config PATH       Путь к YAML/JSON с настройками (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования

Команда crawl опции:
  --max-depth INT       Переопределить max_depth
  --max-pages INT       Переопределить max_pages
  --no-fallback         Только стратегия запроса по умолчанию
  --include-images      Сохранять изображения как ![alt](src)
  --json PATH           Сохранить JSON-отчёт в файл
  --pretty              Преформатировать JSON-вывод (отступ 2)
  --crawl-timeout SEC   Таймаут всего обхода (секунд)

Дополнительно:
  --version, -v       Показать версию SiteClipper

Пример:
  site-clipper crawl https://example.com --max-depth 1 --json crawl.json
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from site_clipper import __version__
from site_clipper.clipper import clip_page
from site_clipper.config import load_options
from site_clipper.crawler.crawler import crawl_recursively
from site_clipper.errors import ClipperError
from site_clipper.logger import DEFAULT_FORMAT, configure
from site_clipper.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteClipper, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу настроек YAML/JSON.'
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
    help='Путь к файлу логов (stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд SiteClipper CLI."""
    configure(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        options = load_options(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['options'] = options


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option('--max-depth', 'max_depth', type=click.IntRange(min=0), default=None,
              help='Максимальная глубина обхода (override max_depth)')
@click.option('--max-pages', 'max_pages', type=click.IntRange(min=1), default=None,
              help='Макс. число страниц (override max_pages)')
@click.option('--no-fallback', is_flag=True, help='Не перебирать запасные стратегии запроса')
@click.option('--include-images', is_flag=True, help='Сохранять изображения в тексте')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.option('--crawl-timeout', 'crawl_timeout', type=float, default=None,
              help='Таймаут всего обхода (секунд)')
@click.pass_context
def crawl(ctx, url, max_depth, max_pages, no_fallback, include_images, json_output, pretty,
          crawl_timeout):
    """Рекурсивно обойти сайт начиная с URL."""
    overrides = {}
    if max_depth is not None:
        overrides['max_depth'] = max_depth
    if max_pages is not None:
        overrides['max_pages'] = max_pages
    if no_fallback:
        overrides['use_fallback_strategies'] = False
    if include_images:
        overrides['include_images'] = True
    options = ctx.obj['options'].model_copy(update=overrides)

    click.echo(f'Starting crawl: {url}', err=True)
    try:
        if crawl_timeout:
            result = asyncio.run(
                asyncio.wait_for(crawl_recursively(url, options), timeout=crawl_timeout)
            )
        else:
            result = asyncio.run(crawl_recursively(url, options))
    except asyncio.TimeoutError:
        print_error(f'Обход не завершён за {crawl_timeout} секунд')
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    if json_output:
        try:
            saved = render_json(result, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved}', err=True)
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')
        return

    indent = 2 if pretty else None
    click.echo(json.dumps(result.to_dict(), ensure_ascii=False, indent=indent))


@cli.command('clip', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option('--include-images', is_flag=True, help='Сохранять изображения в тексте')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить запись страницы в JSON-файл'
)
@click.pass_context
def clip(ctx, url, include_images, json_output):
    """Извлечь основной текст одной страницы."""
    options = ctx.obj['options']
    try:
        record = asyncio.run(
            clip_page(
                url,
                timeout=options.request_timeout,
                include_images=include_images or options.include_images,
            )
        )
    except ClipperError as e:
        print_error(f'Ошибка клиппинга {e.url}: {e.message}')

    if json_output:
        json_output.parent.mkdir(parents=True, exist_ok=True)
        json_output.write_text(
            json.dumps(record.to_dict(), ensure_ascii=False, indent=2), encoding='utf-8'
        )
        click.echo(f'JSON: {json_output}', err=True)
        return
    click.echo(f'# {record.title}\n\n{record.content}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущие настройки в JSON."""
    options = ctx.obj['options']
    click.echo(options.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
