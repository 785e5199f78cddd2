# === FILE: page_analyzer/cli.py ===
#!/usr/bin/env python3
"""
Точка входа Page Analyzer через командную строку.

Команды:
  serve     Запустить JSON веб-сервер
  init-db   Создать таблицы urls и checks
  add       Добавить URL (нормализуется до scheme://host[:port])
  check     Проверить сохранённый URL и записать результат
  list      Показать все URL с последней проверкой
  show      Показать URL и историю его проверок
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования

Дополнительно:
  --version, -v       Показать версию Page Analyzer

Пример:
  page-analyzer --config configs/default.yaml add https://example.com/some/page
"""
import asyncio
import json
import sys
from pathlib import Path

import click
from aiohttp.web import run_app

from page_analyzer import __version__
from page_analyzer.config import load_config
from page_analyzer.engine import AppContext
from page_analyzer.errors import PageAnalyzerError
from page_analyzer.logger import DEFAULT_FORMAT, configure
from page_analyzer.report.json_report import (
    check_to_dict,
    detail_to_dict,
    listing_to_dicts,
    render_json,
    url_to_dict,
)
from page_analyzer.web import app_factory

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def echo_json(data, pretty: bool = True):
    click.echo(json.dumps(data, ensure_ascii=False, indent=2 if pretty else None))


async def run_with_context(cfg, action):
    """Создаёт AppContext, выполняет action(ctx) и гарантированно закрывает ресурсы."""
    async with await AppContext.create(cfg) as ctx:
        return await action(ctx)


def run(cfg, action):
    try:
        return asyncio.run(run_with_context(cfg, action))
    except PageAnalyzerError as e:
        print_error(str(e))
    except Exception as e:
        print_error(f'Ошибка при выполнении команды: {e}')


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='Page Analyzer, version %(version)s')
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
    """Группа команд Page Analyzer CLI."""
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


@cli.command('serve', context_settings=CONTEXT_SETTINGS)
@click.option('--host', default=None, help='Адрес (override config.host)')
@click.option('--port', '-p', type=int, default=None, help='Порт (override config.port)')
@click.option('--init-db', 'init_db', is_flag=True, help='Создать таблицы перед стартом')
@click.pass_context
def serve(ctx, host, port, init_db):
    """Запустить JSON веб-сервер."""
    cfg = ctx.obj['config']
    run_app(
        app_factory(cfg, init_db=init_db),
        host=host or cfg.host,
        port=port or cfg.port,
    )


@cli.command('init-db', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def init_db(ctx):
    """Создать таблицы urls и checks, если их нет."""
    async def action(app):
        await app.init_schema()

    run(ctx.obj['config'], action)
    click.echo('Schema ready')


@cli.command('add', context_settings=CONTEXT_SETTINGS)
@click.argument('raw_url')
@click.pass_context
def add(ctx, raw_url):
    """Добавить URL."""
    async def action(app):
        return await app.analyzer.add_url(raw_url)

    url, created = run(ctx.obj['config'], action)
    data = url_to_dict(url)
    data['created'] = created
    echo_json(data)


@cli.command('check', context_settings=CONTEXT_SETTINGS)
@click.argument('url_id', type=int)
@click.option('--timeout', type=float, default=None, help='Таймаут проверки (секунд)')
@click.pass_context
def check(ctx, url_id, timeout):
    """Проверить сохранённый URL."""
    async def action(app):
        return await app.analyzer.run_check(url_id, timeout=timeout)

    result = run(ctx.obj['config'], action)
    echo_json(check_to_dict(result))


@cli.command('list', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить список в JSON-файл'
)
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.pass_context
def list_urls(ctx, json_output, pretty):
    """Показать все URL с последней проверкой."""
    async def action(app):
        return await app.analyzer.list_urls()

    items = listing_to_dicts(run(ctx.obj['config'], action))
    if json_output:
        try:
            saved = render_json(items, json_output, pretty=pretty)
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')
        click.echo(f'JSON report: {saved}')
        return
    echo_json(items, pretty=pretty)


@cli.command('show', context_settings=CONTEXT_SETTINGS)
@click.argument('url_id', type=int)
@click.pass_context
def show(ctx, url_id):
    """Показать URL и историю проверок (новые первыми)."""
    async def action(app):
        return await app.analyzer.get_url(url_id)

    url, checks = run(ctx.obj['config'], action)
    echo_json(detail_to_dict(url, checks))


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
