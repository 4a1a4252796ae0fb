"""Statistics and exporter.
"""
import csv
import json
from typing import Dict, List, Optional


class Statistics:
    def __init__(self, track_history: bool = False):
        # the per-access hit-rate history grows with the trace; only keep it on request
        self.track_history = track_history
        self.reset()

    def reset(self):
        # counters start from zero
        self.accesses = 0
        self.hits = 0
        # demand misses plus prefetch fills
        self.misses = 0
        self.prefetch_misses = 0
        self.evictions = 0
        self.hit_rate_history: List[float] = []

    def record_access(self, hit: bool, evicted: bool = False):
        # call this once per trace record (demand access)
        self.accesses += 1
        if hit:
            self.hits += 1
        else:
            self.misses += 1
        if evicted:
            self.evictions += 1
        if self.track_history:
            self.hit_rate_history.append(self.hit_rate)

    def record_prefetch(self, evicted: bool = False):
        self.misses += 1
        self.prefetch_misses += 1
        if evicted:
            self.evictions += 1

    @property
    def demand_misses(self):
        return self.misses - self.prefetch_misses

    @property
    def hit_rate(self):
        return (self.hits / self.accesses) if self.accesses else 0.0

    @property
    def miss_rate(self):
        return (self.demand_misses / self.accesses) if self.accesses else 0.0

    def as_dict(self) -> Dict[str, float]:
        return {
            'accesses': self.accesses,
            'hits': self.hits,
            'misses': self.misses,
            'prefetch_misses': self.prefetch_misses,
            'evictions': self.evictions,
            'hit_rate': self.hit_rate,
            'miss_rate': self.miss_rate,
        }


def format_report(hits: int, misses: int) -> str:
    return f"Hits: {hits}, Misses: {misses}"


class Exporter:
    @staticmethod
    def export_stats_csv(path: str, stats: Statistics):
        row = stats.as_dict()
        with open(path, 'w', newline='') as f:
            writer = csv.writer(f)
            writer.writerow(list(row.keys()))
            writer.writerow(list(row.values()))

    @staticmethod
    def export_stats_json(path: str, stats: Statistics, config: Optional[Dict] = None):
        """Export counters and hit-rate history to a JSON file."""
        data = {
            'stats': stats.as_dict(),
            'hit_rate_history': list(stats.hit_rate_history),
        }
        if config is not None:
            data['config'] = dict(config)
        with open(path, 'w', encoding='utf-8') as fh:
            json.dump(data, fh, indent=2)

    @staticmethod
    def export_chart_pdf(path: str, hit_rate_history: List[float]):
        """Render the hit-rate history to a PDF using matplotlib and save it."""
        # Use matplotlib without a display
        import matplotlib
        matplotlib.use('Agg')
        import matplotlib.pyplot as plt

        data = list(hit_rate_history) or [0]
        fig, ax = plt.subplots(figsize=(6, 2))
        try:
            ax.plot(range(len(data)), data, color='#FFA500', linewidth=2)
            ax.fill_between(range(len(data)), data, color='#FFA500', alpha=0.1)
            ax.set_ylim(0, 1)
            ax.set_xlabel('Access')
            ax.set_ylabel('Hit rate')
            ax.grid(False)
            fig.tight_layout()
            fig.savefig(path, format='pdf', dpi=150)
        finally:
            plt.close(fig)
