"""Command-line entry point.

    cachesim TRACE [options]

Reads a trace, replays it against a cache built from the JSON config file
and/or the command-line options (options win), and prints

    Hits: <n>, Misses: <m>
"""
import logging

import click

from .core.config import CacheConfig, load_config
from .core.errors import ConfigurationError, TraceFormatError
from .core.simulator import CacheSimulator
from .data.stats_export import Exporter, Statistics, format_report
from .trace.reader import read_trace

logger = logging.getLogger(__name__)


def _setup_logging(verbosity: int):
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format='%(levelname)s: %(message)s')


def _format_event(info: dict) -> str:
    line = "{op} {addr:#x} set={set} tag={tag:#x} {result}".format(
        op=info['operation'].value, addr=info['address'], set=info['set_index'],
        tag=info['tag'], result='hit' if info['hit'] else 'miss')
    if info['evicted'] is not None:
        line += f" evict={info['evicted'].tag:#x}"
    if info['prefetch'] is not None:
        line += f" prefetch={info['prefetch']['address']:#x}"
    return line


def build_config(config_path, block_size, num_sets, associativity, prefetch, refresh_on_hit) -> CacheConfig:
    values = load_config(config_path).to_dict() if config_path else CacheConfig().to_dict()
    overrides = {
        'block_size': block_size,
        'num_sets': num_sets,
        'associativity': associativity,
        'prefetch_enabled': prefetch,
        'refresh_on_hit': refresh_on_hit,
    }
    values.update({k: v for k, v in overrides.items() if v is not None})
    return CacheConfig.from_dict(values)


@click.command()
@click.argument('trace_file', type=click.Path(dir_okay=False))
@click.option('-c', '--config', 'config_path', type=click.Path(exists=True, dir_okay=False),
              help='JSON file with block_size, num_sets, associativity, prefetch')
@click.option('-b', '--block-size', type=int, help='Block size in bytes (power of two)')
@click.option('-s', '--num-sets', type=int, help='Number of sets (power of two)')
@click.option('-a', '--associativity', type=int, help='Lines per set')
@click.option('--prefetch/--no-prefetch', default=None, help='Fetch the next block after every miss')
@click.option('--refresh-on-hit/--no-refresh-on-hit', default=None,
              help='Refresh recency on hits (true LRU) instead of evicting by insertion order')
@click.option('--strict', is_flag=True, help='Fail on a malformed trace line instead of stopping there')
@click.option('--events', is_flag=True, help='Print one line per access before the summary')
@click.option('--csv', 'csv_path', type=click.Path(dir_okay=False), help='Write statistics as CSV')
@click.option('--json', 'json_path', type=click.Path(dir_okay=False), help='Write statistics as JSON')
@click.option('--chart', 'chart_path', type=click.Path(dir_okay=False), help='Write a hit-rate chart as PDF')
@click.option('-v', '--verbose', count=True, help='-v for info, -vv for per-access debug logging')
def main(trace_file, config_path, block_size, num_sets, associativity, prefetch, refresh_on_hit,
         strict, events, csv_path, json_path, chart_path, verbose):
    """Replay TRACE_FILE through a set-associative cache and report hits and misses."""
    _setup_logging(verbose)
    try:
        config = build_config(config_path, block_size, num_sets, associativity, prefetch, refresh_on_hit)
    except ConfigurationError as exc:
        raise click.BadParameter(str(exc)) from exc
    logger.info("cache: %s", config)

    try:
        trace = read_trace(trace_file, strict=strict)
    except OSError as exc:
        raise click.FileError(trace_file, hint=exc.strerror or str(exc)) from exc
    except TraceFormatError as exc:
        raise click.ClickException(str(exc)) from exc
    if trace.truncated:
        click.echo(f"warning: trace stopped at malformed line {trace.error_line}: {trace.error_text!r}", err=True)

    sim = CacheSimulator(config, stats=Statistics(track_history=bool(chart_path or json_path)))
    callback = (lambda info: click.echo(_format_event(info))) if events else None
    hits, misses = sim.run(trace.records, callback=callback)
    click.echo(format_report(hits, misses))

    if csv_path:
        Exporter.export_stats_csv(csv_path, sim.stats)
    if json_path:
        Exporter.export_stats_json(json_path, sim.stats, config=config.to_dict())
    if chart_path:
        Exporter.export_chart_pdf(chart_path, sim.stats.hit_rate_history)


if __name__ == '__main__':
    main()
