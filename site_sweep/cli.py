#!/usr/bin/env python3
"""
Command-line entry point for the SiteSweep crawler.

Commands:
  crawl DOMAIN   Crawl a domain level by level and print/save the discovered URLs
  config         Show the effective configuration

Common options:
  --config PATH       YAML/JSON config file (defaults are used when omitted)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stderr only when omitted)
  --log-format FORMAT Logging format string

crawl options:
  --depth N           Number of levels to crawl (overrides config depth)
  --filter NAME       Link filter, repeatable (absolute, no-media, no-ftp, same-domain)
  --partial           Skip pages that fail to fetch instead of aborting
  --json PATH         Save the result as a JSON file
  --pretty            Indent JSON output by 2
  --scan-timeout SEC  Timeout for the whole crawl (seconds)

Example:
  site-sweep crawl example.com --depth 2 --filter absolute --filter same-domain --pretty
"""
import asyncio
import json
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from site_sweep import __version__
from site_sweep.config import load_config
from site_sweep.crawler.models import FetchError, InvalidAddressError
from site_sweep.engine import start_crawl
from site_sweep.filters import FILTER_NAMES, build_filter
from site_sweep.logger import DEFAULT_FORMAT, configure
from site_sweep.report.json_report import as_sorted_list, render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])


def print_error(message: str):
    click.secho(message, fg="red", err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, "--version", "-v", message="SiteSweep, version %(version)s")
@click.option(
    "--config", "-c", "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a YAML or JSON config file.",
)
@click.option(
    "--log-level", "log_level",
    default="WARNING", show_default=True,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    help="Logging level",
)
@click.option(
    "--log-file", "log_file",
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help="Log file (stderr when omitted)",
)
@click.option(
    "--log-format", "log_format",
    default=DEFAULT_FORMAT,
    show_default=True,
    help="Logging format string",
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """SiteSweep command group."""
    configure(level=log_level, log_file=log_file, log_format=log_format)
    try:
        cfg = load_config(config_path)
    except (OSError, ValueError, TypeError, ValidationError) as e:
        print_error(f"Failed to load config: {e}")
    ctx.ensure_object(dict)
    ctx.obj["config"] = cfg


@cli.command("crawl", context_settings=CONTEXT_SETTINGS)
@click.argument("domain", required=False)
@click.option("--depth", "-d", type=click.IntRange(min=0), default=None, help="Levels to crawl")
@click.option(
    "--filter", "-f", "filters",
    multiple=True,
    type=click.Choice(FILTER_NAMES, case_sensitive=False),
    help="Link filter to apply (repeatable)",
)
@click.option("--partial", is_flag=True, help="Skip pages that fail to fetch")
@click.option(
    "--json", "-j", "json_output",
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help="Save the JSON result to a file",
)
@click.option("--pretty", is_flag=True, help="Indent JSON output (2 spaces)")
@click.option("--scan-timeout", "scan_timeout", type=float, default=None, help="Timeout for the whole crawl (seconds)")
@click.pass_context
def crawl_command(ctx, domain, depth, filters, partial, json_output, pretty, scan_timeout):
    """Crawl DOMAIN and output every discovered URL."""
    cfg = ctx.obj["config"]
    target = domain or cfg.domain
    if not target:
        print_error("No domain given: pass DOMAIN or set 'domain' in the config")

    names = list(filters) or cfg.filters
    try:
        filter_fn = build_filter(names, domain=target)
    except ValueError as e:
        print_error(str(e))

    fail_fast = False if partial else None
    coro = start_crawl(cfg, target, depth, filter_fn, fail_fast=fail_fast)
    try:
        if scan_timeout:
            urls = asyncio.run(asyncio.wait_for(coro, timeout=scan_timeout))
        else:
            urls = asyncio.run(coro)
    except asyncio.TimeoutError:
        print_error(f"Crawl did not finish within {scan_timeout} seconds")
    except InvalidAddressError as e:
        print_error(f"Invalid domain: {e}")
    except FetchError as e:
        print_error(f"Crawl aborted: {e}")

    if json_output:
        try:
            saved = render_json(urls, json_output, pretty=pretty)
        except OSError as e:
            print_error(f"Failed to save JSON: {e}")
        click.echo(f"JSON report: {saved}")
        return

    click.echo(json.dumps(as_sorted_list(urls), ensure_ascii=False, indent=2 if pretty else None))


@cli.command("config", context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the effective configuration as JSON."""
    cfg = ctx.obj["config"]
    click.echo(cfg.model_dump_json(indent=2))


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
