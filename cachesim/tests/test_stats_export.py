import csv
import json

from cachesim.core.simulator import CacheSimulator
from cachesim.data.stats_export import Exporter, Statistics, format_report


def test_format_report():
    assert format_report(1, 1) == "Hits: 1, Misses: 1"
    assert format_report(0, 0) == "Hits: 0, Misses: 0"


def test_statistics_empty_rates():
    s = Statistics()
    assert s.hit_rate == 0.0
    assert s.miss_rate == 0.0
    assert s.as_dict()['accesses'] == 0


def test_prefetch_counted_in_misses_not_accesses():
    s = Statistics()
    s.record_access(False)
    s.record_prefetch(evicted=True)
    assert (s.accesses, s.misses, s.prefetch_misses, s.demand_misses) == (1, 2, 1, 1)
    assert s.evictions == 1
    assert s.miss_rate == 1.0


def _run(config):
    sim = CacheSimulator(config, stats=Statistics(track_history=True))
    sim.run([0x0, 0x0, 0x100, 0x80])
    return sim.stats


def test_export_csv(tmp_path, reference_config):
    path = tmp_path / "stats.csv"
    Exporter.export_stats_csv(str(path), _run(reference_config))
    with open(path, newline='') as f:
        rows = list(csv.reader(f))
    assert rows[0][:3] == ['accesses', 'hits', 'misses']
    assert rows[1][:3] == ['4', '1', '3']


def test_export_json(tmp_path, reference_config):
    path = tmp_path / "stats.json"
    Exporter.export_stats_json(str(path), _run(reference_config), config=reference_config.to_dict())
    data = json.loads(path.read_text())
    assert data['stats']['hits'] == 1
    assert len(data['hit_rate_history']) == 4
    assert data['config']['block_size'] == 128


def test_export_chart_pdf(tmp_path, reference_config):
    path = tmp_path / "chart.pdf"
    Exporter.export_chart_pdf(str(path), _run(reference_config).hit_rate_history)
    assert path.read_bytes().startswith(b'%PDF')
