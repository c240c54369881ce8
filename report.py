# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Console and JSON rendering of lineup search results."""

from __future__ import annotations

import json
from pathlib import Path

from models import RankedLineup, SimulationReport


def format_ranked_line(entry: RankedLineup) -> str:
    """One ranking row, e.g. `` 1) ID=3fa2c1 mean=4.512  order=[Chen Ramos ...]``."""
    return (
        f"{entry.rank:2d}) ID={entry.short_hash} mean={entry.mean_runs:.3f}  "
        f"order=[{' '.join(entry.order)}]"
    )


def format_report(report: SimulationReport) -> str:
    lines = ["Top lineups by average runs:"]
    lines.extend(format_ranked_line(e) for e in report.top)
    lines.append("Bottom lineups by average runs:")
    lines.extend(format_ranked_line(e) for e in report.bottom)
    lines.append(
        f"{report.lineups_processed} lineups x {report.games_per_lineup} games "
        f"in {report.elapsed_seconds:.1f}s"
    )
    return "\n".join(lines)


def print_report(report: SimulationReport) -> None:
    print(format_report(report))


def report_to_dict(report: SimulationReport) -> dict:
    return report.model_dump()


def write_report_json(report: SimulationReport, path: Path | str) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with open(p, "w") as f:
        json.dump(report_to_dict(report), f, indent=2)
    return p
